from datetime import date
from typing import Any, Dict, List, Optional

from ..models import AttendanceStatus, EventStatus
from ..remote import RemoteClient


async def get_event(remote: RemoteClient, event_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("events").select("*").eq("id", event_id).maybe_single().execute()
    return result.raise_for_error()


async def list_published_events(
    remote: RemoteClient,
    *,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    query = remote.table("events").select("*").eq("status", EventStatus.PUBLISHED)
    if from_date is not None:
        query = query.gte("event_date", from_date)
    if to_date is not None:
        query = query.lte("event_date", to_date)
    query = query.order("event_date")
    if limit:
        query = query.limit(limit)
    result = await query.execute()
    return result.raise_for_error() or []


async def list_events_by_creator(
    remote: RemoteClient,
    creator_id: str,
    *,
    status: Optional[EventStatus] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    query = remote.table("events").select("*").eq("creator_id", creator_id)
    if status is not None:
        query = query.eq("status", status)
    if from_date is not None:
        query = query.gte("event_date", from_date)
    if to_date is not None:
        query = query.lte("event_date", to_date)
    result = await query.order("event_date").execute()
    return result.raise_for_error() or []


async def count_published_by_creator(remote: RemoteClient, creator_id: str) -> int:
    result = (
        await remote.table("events")
        .select("id", count="exact", head=True)
        .eq("creator_id", creator_id)
        .eq("status", EventStatus.PUBLISHED)
        .execute()
    )
    result.raise_for_error()
    return result.count or 0


async def create_event(remote: RemoteClient, creator_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
    row = {**values, "creator_id": creator_id, "status": EventStatus.DRAFT}
    result = await remote.table("events").insert(row).single().execute()
    return result.raise_for_error()


async def update_event(remote: RemoteClient, event_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not values:
        return await get_event(remote, event_id)
    result = await remote.table("events").update(values).eq("id", event_id).maybe_single().execute()
    return result.raise_for_error()


async def delete_event(remote: RemoteClient, event_id: str) -> None:
    (await remote.table("events").delete().eq("id", event_id).execute()).raise_for_error()


# --- Attendance ---

async def list_attending_events(
    remote: RemoteClient,
    user_id: str,
    *,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    result = (
        await remote.table("event_attendance")
        .select("event_id")
        .eq("user_id", user_id)
        .eq("status", AttendanceStatus.GOING)
        .execute()
    )
    event_ids = sorted({row["event_id"] for row in (result.raise_for_error() or [])})
    if not event_ids:
        return []
    query = remote.table("events").select("*").in_("id", event_ids).eq("status", EventStatus.PUBLISHED)
    if from_date is not None:
        query = query.gte("event_date", from_date)
    if to_date is not None:
        query = query.lte("event_date", to_date)
    events = await query.order("event_date").execute()
    return events.raise_for_error() or []


async def set_attendance(remote: RemoteClient, user_id: str, event_id: str) -> None:
    row = {"user_id": user_id, "event_id": event_id, "status": AttendanceStatus.GOING}
    result = await remote.table("event_attendance").upsert(row, on_conflict="user_id,event_id").execute()
    result.raise_for_error()


async def clear_attendance(remote: RemoteClient, user_id: str, event_id: str) -> None:
    result = await remote.table("event_attendance").delete().eq("user_id", user_id).eq("event_id", event_id).execute()
    result.raise_for_error()


# --- Announcements ---

async def list_announcements(remote: RemoteClient, *, active_only: bool = True) -> List[Dict[str, Any]]:
    query = remote.table("admin_announcements").select("*")
    if active_only:
        query = query.eq("is_active", True)
    result = await query.order("created_at", desc=True).execute()
    return result.raise_for_error() or []


async def create_announcement(remote: RemoteClient, values: Dict[str, Any]) -> Dict[str, Any]:
    result = await remote.table("admin_announcements").insert(values).single().execute()
    return result.raise_for_error()


async def delete_announcement(remote: RemoteClient, announcement_id: str) -> List[Dict[str, Any]]:
    result = await remote.table("admin_announcements").delete().eq("id", announcement_id).execute()
    return result.raise_for_error() or []
