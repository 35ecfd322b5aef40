import asyncio
from typing import Any, Dict, List, Optional

from ..remote import RemoteClient


def _sort_key(row: Dict[str, Any]) -> tuple:
    return (row.get("created_at") or "", row.get("id") or "")


async def get_messages_for_booking(remote: RemoteClient, booking_id: str) -> List[Dict[str, Any]]:
    result = await remote.table("messages").select("*").eq("booking_id", booking_id).order("created_at").execute()
    return result.raise_for_error() or []


async def get_conversation(remote: RemoteClient, user_a: str, user_b: str) -> List[Dict[str, Any]]:
    """Messages exchanged between two users outside any booking.

    Both directions are fetched concurrently and merged in time order.
    """
    outgoing, incoming = await asyncio.gather(
        remote.table("messages").select("*").eq("sender_id", user_a).eq("recipient_id", user_b).is_("booking_id", None).execute(),
        remote.table("messages").select("*").eq("sender_id", user_b).eq("recipient_id", user_a).is_("booking_id", None).execute(),
    )
    rows = (outgoing.raise_for_error() or []) + (incoming.raise_for_error() or [])
    return sorted(rows, key=_sort_key)


async def create_message(
    remote: RemoteClient,
    *,
    sender_id: str,
    recipient_id: str,
    content: str,
    booking_id: Optional[str] = None,
) -> None:
    row = {
        "sender_id": sender_id,
        "recipient_id": recipient_id,
        "booking_id": booking_id,
        "content": content,
    }
    (await remote.table("messages").insert(row, returning=False).execute()).raise_for_error()
