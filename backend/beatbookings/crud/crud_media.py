from typing import Any, Dict, List, Optional

from ..models import MediaType
from ..remote import RemoteClient


async def list_media(remote: RemoteClient, artist_id: str) -> List[Dict[str, Any]]:
    result = await remote.table("artist_media").select("*").eq("artist_id", artist_id).order("created_at", desc=True).execute()
    return result.raise_for_error() or []


async def count_media(remote: RemoteClient, artist_id: str, media_type: MediaType) -> int:
    result = (
        await remote.table("artist_media")
        .select("id", count="exact", head=True)
        .eq("artist_id", artist_id)
        .eq("media_type", media_type)
        .execute()
    )
    result.raise_for_error()
    return result.count or 0


async def get_media(remote: RemoteClient, media_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("artist_media").select("*").eq("id", media_id).maybe_single().execute()
    return result.raise_for_error()


async def create_media(remote: RemoteClient, artist_id: str, media_type: MediaType, url: str) -> Dict[str, Any]:
    row = {"artist_id": artist_id, "media_type": media_type, "url": url}
    result = await remote.table("artist_media").insert(row).single().execute()
    return result.raise_for_error()


async def delete_media(remote: RemoteClient, media_id: str) -> None:
    (await remote.table("artist_media").delete().eq("id", media_id).execute()).raise_for_error()
