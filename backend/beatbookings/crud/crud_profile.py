from typing import Any, Dict, Iterable, List, Optional

from ..remote import RemoteClient

PROFILE_COLUMNS = "id,name,email,role,is_admin,image_url,country,state,city,agreed_terms,last_active_at,created_at"
PARTY_COLUMNS = "id,name,email,image_url"


async def get_profile(remote: RemoteClient, user_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("profiles").select(PROFILE_COLUMNS).eq("id", user_id).maybe_single().execute()
    return result.raise_for_error()


async def update_profile(remote: RemoteClient, user_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not values:
        return await get_profile(remote, user_id)
    result = await remote.table("profiles").update(values).eq("id", user_id).maybe_single().execute()
    return result.raise_for_error()


async def get_profiles_by_ids(remote: RemoteClient, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    ids = sorted({uid for uid in user_ids if uid})
    if not ids:
        return {}
    result = await remote.table("profiles").select(PARTY_COLUMNS).in_("id", ids).execute()
    rows = result.raise_for_error() or []
    return {row["id"]: row for row in rows}


async def attach_parties(
    remote: RemoteClient,
    rows: List[Dict[str, Any]],
    *,
    id_key: str,
    as_key: str,
) -> List[Dict[str, Any]]:
    """Attach ``{id, name, email, image_url}`` of the user in ``id_key``."""
    profiles = await get_profiles_by_ids(remote, (row.get(id_key) for row in rows))
    for row in rows:
        profile = profiles.get(row.get(id_key))
        if profile is not None:
            row[as_key] = profile
    return rows
