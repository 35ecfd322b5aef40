from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

from ..remote import RemoteClient


async def get_artist_profile(remote: RemoteClient, artist_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("artist_profiles").select("*").eq("id", artist_id).maybe_single().execute()
    return result.raise_for_error()


async def get_artist_profile_by_user(remote: RemoteClient, user_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("artist_profiles").select("*").eq("user_id", user_id).maybe_single().execute()
    return result.raise_for_error()


async def get_artist_profiles_by_ids(remote: RemoteClient, artist_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    ids = sorted({a for a in artist_ids if a})
    if not ids:
        return {}
    result = await remote.table("artist_profiles").select("*").in_("id", ids).execute()
    return {row["id"]: row for row in (result.raise_for_error() or [])}


async def list_artist_profiles(remote: RemoteClient) -> List[Dict[str, Any]]:
    result = await remote.table("artist_profiles").select("*").order("created_at", desc=True).execute()
    return result.raise_for_error() or []


async def create_artist_profile(remote: RemoteClient, user_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
    result = await remote.table("artist_profiles").insert({**values, "user_id": user_id}).single().execute()
    return result.raise_for_error()


async def update_artist_profile(remote: RemoteClient, artist_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not values:
        return await get_artist_profile(remote, artist_id)
    result = await remote.table("artist_profiles").update(values).eq("id", artist_id).maybe_single().execute()
    return result.raise_for_error()


# --- Social links ---

async def get_social_links(remote: RemoteClient, artist_ids: Iterable[str]) -> Dict[str, Dict[str, str]]:
    ids = sorted({a for a in artist_ids if a})
    links: Dict[str, Dict[str, str]] = defaultdict(dict)
    if not ids:
        return links
    result = await remote.table("artist_social_links").select("artist_id,platform,url").in_("artist_id", ids).execute()
    for row in result.raise_for_error() or []:
        if row.get("url"):
            links[row["artist_id"]][row["platform"]] = row["url"]
    return links


async def replace_social_links(remote: RemoteClient, artist_id: str, links: List[Dict[str, str]]) -> Dict[str, str]:
    """Upsert ``links`` first, then prune platforms no longer listed."""
    wanted = {link["platform"]: link["url"] for link in links}
    if wanted:
        rows = [{"artist_id": artist_id, "platform": platform, "url": url} for platform, url in wanted.items()]
        (
            await remote.table("artist_social_links").upsert(rows, on_conflict="artist_id,platform").execute()
        ).raise_for_error()
    stale = remote.table("artist_social_links").delete().eq("artist_id", artist_id)
    if wanted:
        stale = stale.not_in("platform", list(wanted))
    (await stale.execute()).raise_for_error()
    return wanted


async def get_artist_analytics(remote: RemoteClient, artist_id: str, days: int) -> Dict[str, Any]:
    result = await remote.rpc("get_artist_analytics", {"p_artist_id": artist_id, "p_days": days})
    data = result.raise_for_error()
    if isinstance(data, list):
        return data[0] if data else {}
    return data or {}
