from typing import Any, Dict, Iterable, Optional

from ..remote import RemoteClient


async def get_subscription_for_artist(remote: RemoteClient, artist_id: str) -> Optional[Dict[str, Any]]:
    """The artist's current subscription: the most recently created row."""
    result = (
        await remote.table("subscriptions")
        .select("*")
        .eq("artist_id", artist_id)
        .order("created_at", desc=True)
        .limit(1)
        .maybe_single()
        .execute()
    )
    return result.raise_for_error()


async def get_subscriptions_for_artists(remote: RemoteClient, artist_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """Current subscription per artist, chosen like ``get_subscription_for_artist``."""
    ids = sorted({a for a in artist_ids if a})
    if not ids:
        return {}
    result = await remote.table("subscriptions").select("*").in_("artist_id", ids).order("created_at", desc=True).execute()
    subs: Dict[str, Dict[str, Any]] = {}
    for row in result.raise_for_error() or []:
        subs.setdefault(row["artist_id"], row)
    return subs


async def count_by_tier(remote: RemoteClient, tier: str) -> int:
    result = await remote.table("subscriptions").select("id", count="exact", head=True).eq("subscription_tier", tier).execute()
    result.raise_for_error()
    return result.count or 0


async def update_subscription(remote: RemoteClient, subscription_id: str, values: Dict[str, Any]) -> list:
    result = await remote.table("subscriptions").update(values).eq("id", subscription_id).execute()
    return result.raise_for_error() or []


async def update_by_provider_subscription(remote: RemoteClient, provider_subscription_id: str, values: Dict[str, Any]) -> list:
    result = (
        await remote.table("subscriptions")
        .update(values)
        .eq("stripe_subscription_id", provider_subscription_id)
        .execute()
    )
    return result.raise_for_error() or []
