from .client import AuthApi, RemoteClient, RemoteResult, StorageBucket, service_client
from .errors import NoRowsError, RemoteError
from .query import TableQuery

__all__ = [
    "AuthApi",
    "NoRowsError",
    "RemoteClient",
    "RemoteError",
    "RemoteResult",
    "StorageBucket",
    "TableQuery",
    "service_client",
]
