from typing import Any, Dict, List, Optional

from ..remote import RemoteClient
from . import crud_artist, crud_profile


async def list_links(remote: RemoteClient) -> List[Dict[str, Any]]:
    """Every shared pool link, newest first, with owner and artist card."""
    result = await remote.table("music_pool_links").select("*").order("created_at", desc=True).execute()
    rows = result.raise_for_error() or []
    await crud_profile.attach_parties(remote, rows, id_key="user_id", as_key="owner")
    artists = await crud_artist.get_artist_profiles_by_ids(remote, (row.get("artist_id") for row in rows))
    for row in rows:
        row["artist"] = artists.get(row.get("artist_id"))
    return rows


async def get_link(remote: RemoteClient, link_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("music_pool_links").select("*").eq("id", link_id).maybe_single().execute()
    return result.raise_for_error()


async def get_link_for_user(remote: RemoteClient, user_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("music_pool_links").select("*").eq("user_id", user_id).maybe_single().execute()
    return result.raise_for_error()


async def create_link(remote: RemoteClient, values: Dict[str, Any]) -> Dict[str, Any]:
    result = await remote.table("music_pool_links").insert(values).single().execute()
    return result.raise_for_error()


async def update_link(remote: RemoteClient, link_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    result = await remote.table("music_pool_links").update(values).eq("id", link_id).maybe_single().execute()
    return result.raise_for_error()


async def delete_link(remote: RemoteClient, link_id: str) -> None:
    (await remote.table("music_pool_links").delete().eq("id", link_id).execute()).raise_for_error()
