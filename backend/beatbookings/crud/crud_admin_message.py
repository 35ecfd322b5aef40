from datetime import datetime, timezone
from typing import Any, Dict, List

from ..models import AdminSender
from ..remote import RemoteClient


async def list_thread(remote: RemoteClient, user_id: str) -> List[Dict[str, Any]]:
    result = await remote.table("admin_messages").select("*").eq("user_id", user_id).order("created_at").execute()
    return result.raise_for_error() or []


async def create_support_message(remote: RemoteClient, user_id: str, sender: AdminSender, message: str) -> Dict[str, Any]:
    row = {"user_id": user_id, "sender": sender, "message": message}
    result = await remote.table("admin_messages").insert(row).single().execute()
    return result.raise_for_error()


async def mark_read(remote: RemoteClient, user_id: str, sender: AdminSender) -> int:
    """Mark unread messages written by ``sender`` in ``user_id``'s thread."""
    result = (
        await remote.table("admin_messages")
        .update({"read_at": datetime.now(timezone.utc)})
        .eq("user_id", user_id)
        .eq("sender", sender)
        .is_("read_at", None)
        .execute()
    )
    return len(result.raise_for_error() or [])


async def count_unread_for_user(remote: RemoteClient, user_id: str) -> int:
    """Admin replies the user has not read yet."""
    result = (
        await remote.table("admin_messages")
        .select("id", count="exact", head=True)
        .eq("user_id", user_id)
        .eq("sender", AdminSender.ADMIN)
        .is_("read_at", None)
        .execute()
    )
    result.raise_for_error()
    return result.count or 0


async def count_unread_for_admin(remote: RemoteClient) -> int:
    """User messages across all threads that no admin has read yet."""
    result = (
        await remote.table("admin_messages")
        .select("id", count="exact", head=True)
        .eq("sender", AdminSender.USER)
        .is_("read_at", None)
        .execute()
    )
    result.raise_for_error()
    return result.count or 0


async def get_admin_conversations(remote: RemoteClient) -> List[Dict[str, Any]]:
    result = await remote.rpc("get_admin_conversations")
    return result.raise_for_error() or []
