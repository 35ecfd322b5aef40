from typing import Any, Dict, List, Optional

from ..remote import RemoteClient


async def get_notifications_for_user(
    remote: RemoteClient,
    user_id: str,
    *,
    skip: int = 0,
    limit: Optional[int] = None,
    unread_only: bool = False,
) -> List[Dict[str, Any]]:
    """Newest first, with optional pagination."""
    query = remote.table("notifications").select("*").eq("user_id", user_id)
    if unread_only:
        query = query.eq("is_read", False)
    query = query.order("created_at", desc=True)
    if limit is not None:
        query = query.range(skip, skip + limit - 1)
    result = await query.execute()
    return result.raise_for_error() or []


async def get_notification(remote: RemoteClient, notification_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("notifications").select("*").eq("id", notification_id).maybe_single().execute()
    return result.raise_for_error()


async def count_unread(remote: RemoteClient, user_id: str) -> int:
    result = (
        await remote.table("notifications")
        .select("id", count="exact", head=True)
        .eq("user_id", user_id)
        .eq("is_read", False)
        .execute()
    )
    result.raise_for_error()
    return result.count or 0


async def mark_as_read(remote: RemoteClient, notification_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("notifications").update({"is_read": True}).eq("id", notification_id).execute()
    rows = result.raise_for_error() or []
    return rows[0] if rows else None


async def mark_all_read(remote: RemoteClient, user_id: str) -> int:
    result = (
        await remote.table("notifications")
        .update({"is_read": True})
        .eq("user_id", user_id)
        .eq("is_read", False)
        .execute()
    )
    return len(result.raise_for_error() or [])


async def delete_notification(remote: RemoteClient, notification_id: str) -> None:
    (await remote.table("notifications").delete().eq("id", notification_id).execute()).raise_for_error()
