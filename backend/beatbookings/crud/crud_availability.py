from datetime import date
from typing import Any, Dict, List, Optional

from ..remote import RemoteClient


async def list_availability(
    remote: RemoteClient,
    artist_id: str,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Dict[str, Any]]:
    query = remote.table("artist_availability").select("*").eq("artist_id", artist_id)
    if start is not None:
        query = query.gte("event_date", start)
    if end is not None:
        query = query.lte("event_date", end)
    result = await query.order("event_date").execute()
    return result.raise_for_error() or []


async def get_entry(remote: RemoteClient, entry_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("artist_availability").select("*").eq("id", entry_id).maybe_single().execute()
    return result.raise_for_error()


async def create_entry(remote: RemoteClient, artist_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
    result = await remote.table("artist_availability").insert({**values, "artist_id": artist_id}).single().execute()
    return result.raise_for_error()


async def update_entry(remote: RemoteClient, entry_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not values:
        return await get_entry(remote, entry_id)
    result = await remote.table("artist_availability").update(values).eq("id", entry_id).maybe_single().execute()
    return result.raise_for_error()


async def delete_entry(remote: RemoteClient, entry_id: str) -> None:
    (await remote.table("artist_availability").delete().eq("id", entry_id).execute()).raise_for_error()
