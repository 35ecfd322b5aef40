from typing import Any, Dict, List

from ..remote import RemoteClient
from . import crud_artist


async def list_favourites(remote: RemoteClient, planner_id: str) -> List[Dict[str, Any]]:
    result = await remote.table("favourites").select("*").eq("planner_id", planner_id).order("created_at", desc=True).execute()
    rows = result.raise_for_error() or []
    artists = await crud_artist.get_artist_profiles_by_ids(remote, (row["artist_id"] for row in rows))
    for row in rows:
        row["artist"] = artists.get(row["artist_id"])
    return rows


async def toggle_favourite(remote: RemoteClient, planner_id: str, artist_id: str) -> bool:
    """Insert the favourite if absent, delete it if present. Returns the new state."""
    existing = (
        await remote.table("favourites")
        .select("id")
        .eq("planner_id", planner_id)
        .eq("artist_id", artist_id)
        .execute()
    ).raise_for_error() or []
    if existing:
        ids = [row["id"] for row in existing]
        (await remote.table("favourites").delete().in_("id", ids).execute()).raise_for_error()
        return False
    row = {"planner_id": planner_id, "artist_id": artist_id}
    (await remote.table("favourites").insert(row).execute()).raise_for_error()
    return True
