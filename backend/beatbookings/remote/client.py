"""HTTP gateway to the backend-as-a-service project.

Every table read, stored procedure, storage object and auth call made by the
API goes through ``RemoteClient``. Calls are made on behalf of the signed-in
user by forwarding their bearer token, so the service's row-level rules stay
authoritative. Nothing is cached or retried here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional
from urllib.parse import quote, unquote

import httpx
import orjson

from ..core.config import Settings, settings as default_settings
from .errors import NoRowsError, RemoteError
from .query import TableQuery

logger = logging.getLogger(__name__)

_CONTENT_RANGE_RE = re.compile(r"^(?:\d+-\d+|\*)/(\d+|\*)$")


@dataclass
class RemoteResult:
    data: Any = None
    error: Optional[RemoteError] = None
    count: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> Any:
        """Return ``data`` or raise the attached ``RemoteError``."""
        if self.error is not None:
            raise self.error
        return self.data


def _parse_count(response: httpx.Response) -> Optional[int]:
    header = response.headers.get("content-range")
    if not header:
        return None
    match = _CONTENT_RANGE_RE.match(header.strip())
    if not match or match.group(1) == "*":
        return None
    return int(match.group(1))


def _encode_body(payload: Any) -> bytes:
    # orjson handles date, time, datetime and enum values natively
    return orjson.dumps(payload)


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


class RemoteClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        settings: Settings = default_settings,
        access_token: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
    ) -> None:
        self.http = http
        self.settings = settings
        self.access_token = access_token
        self.api_key = api_key or settings.SUPABASE_ANON_KEY
        self.base_url = settings.SUPABASE_URL
        self.rest_url = f"{self.base_url}/rest/v1"
        self.storage = StorageBucket(self, settings.MEDIA_BUCKET)
        self.auth = AuthApi(self)

    def headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        bearer = self.access_token or self.api_key
        headers = {"apikey": self.api_key, "Authorization": f"Bearer {bearer}"}
        if extra:
            headers.update(extra)
        return headers

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)

    async def _send(self, method: str, url: str, *, what: str, **kwargs: Any) -> httpx.Response | RemoteResult:
        try:
            return await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Remote %s %s failed: %s", method, what, exc)
            return RemoteResult(
                error=RemoteError(f"Remote service unavailable: {exc}", code="unavailable", status_code=503)
            )

    async def execute(self, query: TableQuery) -> RemoteResult:
        kwargs: dict[str, Any] = {
            "params": query.build_params(),
            "headers": self.headers(query.build_headers()),
        }
        if query.payload is not None:
            kwargs["content"] = _encode_body(query.payload)
            kwargs["headers"]["Content-Type"] = "application/json"
        response = await self._send(query.method, f"{self.rest_url}/{query.table}", what=query.table, **kwargs)
        if isinstance(response, RemoteResult):
            return response
        if response.is_error:
            error = RemoteError.from_response(response)
            logger.error("Remote %s on %s failed: %s", query.method, query.table, error)
            return RemoteResult(error=error)

        count = _parse_count(response)
        if query.method == "HEAD":
            return RemoteResult(data=None, count=count)

        data = _decode_json(response)
        if query.single_mode is not None:
            rows = data if isinstance(data, list) else ([data] if data else [])
            if query.single_mode == "maybe" and len(rows) <= 1:
                return RemoteResult(data=rows[0] if rows else None, count=count)
            if len(rows) != 1:
                return RemoteResult(error=NoRowsError(query.table, len(rows)))
            data = rows[0]
        elif data is None and query.method in ("GET", "POST", "PATCH", "DELETE") and query.returning:
            data = []
        return RemoteResult(data=data, count=count)

    async def rpc(self, name: str, params: Optional[dict[str, Any]] = None) -> RemoteResult:
        """Invoke a stored procedure by name."""
        response = await self._send(
            "POST",
            f"{self.rest_url}/rpc/{name}",
            what=f"rpc:{name}",
            content=_encode_body(params or {}),
            headers=self.headers({"Content-Type": "application/json"}),
        )
        if isinstance(response, RemoteResult):
            return response
        if response.is_error:
            error = RemoteError.from_response(response)
            logger.error("Remote procedure %s failed: %s", name, error)
            return RemoteResult(error=error)
        return RemoteResult(data=_decode_json(response))

    async def ping(self) -> RemoteResult:
        response = await self._send("GET", f"{self.rest_url}/", what="ping", headers=self.headers())
        if isinstance(response, RemoteResult):
            return response
        if response.status_code >= 500:
            return RemoteResult(error=RemoteError.from_response(response))
        return RemoteResult(data={"status": response.status_code})


class StorageBucket:
    """Object storage for one bucket: uploads, public URLs and removal."""

    def __init__(self, client: RemoteClient, bucket: str) -> None:
        self._client = client
        self.bucket = bucket

    @property
    def object_url(self) -> str:
        return f"{self._client.base_url}/storage/v1/object"

    def public_url(self, path: str) -> str:
        return f"{self.object_url}/public/{self.bucket}/{quote(path.lstrip('/'))}"

    def path_from_url(self, url: str) -> Optional[str]:
        """Recover the object path from a public URL of this bucket."""
        marker = f"/{self.bucket}/"
        if not url or marker not in url:
            return None
        return unquote(url.split(marker, 1)[1]) or None

    async def upload(
        self,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        *,
        upsert: bool = False,
    ) -> RemoteResult:
        path = path.lstrip("/")
        response = await self._client._send(
            "POST",
            f"{self.object_url}/{self.bucket}/{quote(path)}",
            what=f"storage:{path}",
            content=content,
            headers=self._client.headers(
                {"Content-Type": content_type, "x-upsert": "true" if upsert else "false"}
            ),
        )
        if isinstance(response, RemoteResult):
            return response
        if response.is_error:
            error = RemoteError.from_response(response)
            logger.error("Upload of %s failed: %s", path, error)
            return RemoteResult(error=error)
        return RemoteResult(data={"path": path, "public_url": self.public_url(path)})

    async def remove(self, paths: Iterable[str]) -> RemoteResult:
        prefixes = [p.lstrip("/") for p in paths if p]
        if not prefixes:
            return RemoteResult(data=[])
        response = await self._client._send(
            "DELETE",
            f"{self.object_url}/{self.bucket}",
            what="storage:remove",
            content=_encode_body({"prefixes": prefixes}),
            headers=self._client.headers({"Content-Type": "application/json"}),
        )
        if isinstance(response, RemoteResult):
            return response
        if response.is_error:
            error = RemoteError.from_response(response)
            logger.error("Removing %s failed: %s", prefixes, error)
            return RemoteResult(error=error)
        return RemoteResult(data=_decode_json(response) or [])


class AuthApi:
    def __init__(self, client: RemoteClient) -> None:
        self._client = client

    async def get_user(self) -> RemoteResult:
        response = await self._client._send(
            "GET", f"{self._client.base_url}/auth/v1/user", what="auth:user", headers=self._client.headers()
        )
        if isinstance(response, RemoteResult):
            return response
        if response.is_error:
            return RemoteResult(error=RemoteError.from_response(response))
        return RemoteResult(data=_decode_json(response))

    async def sign_out(self) -> RemoteResult:
        response = await self._client._send(
            "POST", f"{self._client.base_url}/auth/v1/logout", what="auth:logout", headers=self._client.headers()
        )
        if isinstance(response, RemoteResult):
            return response
        if response.is_error:
            error = RemoteError.from_response(response)
            logger.error("Sign-out failed: %s", error)
            return RemoteResult(error=error)
        return RemoteResult(data=None)


def service_client(http: httpx.AsyncClient, settings: Settings = default_settings) -> RemoteClient:
    """Client using the service-role key. Bypasses row-level rules."""
    key = settings.SUPABASE_SERVICE_ROLE_KEY or settings.SUPABASE_ANON_KEY
    return RemoteClient(http, settings, access_token=key, api_key=key)
