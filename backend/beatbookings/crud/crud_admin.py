"""Admin console procedures. Aggregates and listings are computed remotely."""

from typing import Any, Dict, List

from ..remote import RemoteClient


async def get_platform_stats(remote: RemoteClient) -> Dict[str, Any]:
    result = await remote.rpc("get_platform_stats")
    data = result.raise_for_error()
    # Set-returning procedures come back as a one-row list
    if isinstance(data, list):
        return data[0] if data else {}
    return data or {}


async def get_all_users(remote: RemoteClient) -> List[Dict[str, Any]]:
    return (await remote.rpc("get_all_users")).raise_for_error() or []


async def get_all_events(remote: RemoteClient) -> List[Dict[str, Any]]:
    return (await remote.rpc("get_all_events")).raise_for_error() or []


async def get_all_subscriptions(remote: RemoteClient) -> List[Dict[str, Any]]:
    return (await remote.rpc("get_all_subscriptions")).raise_for_error() or []


async def deactivate_subscription(remote: RemoteClient, subscription_id: str) -> Any:
    result = await remote.rpc("admin_deactivate_subscription", {"p_subscription_id": subscription_id})
    return result.raise_for_error()


async def delete_subscription(remote: RemoteClient, subscription_id: str) -> Any:
    result = await remote.rpc("admin_delete_subscription", {"p_subscription_id": subscription_id})
    return result.raise_for_error()
