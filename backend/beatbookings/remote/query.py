"""Fluent builder for table queries against the backend's REST interface.

A ``TableQuery`` only collects the request; ``execute()`` hands it to the
owning ``RemoteClient`` which performs the HTTP call.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any, Iterable, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .client import RemoteClient, RemoteResult


def encode_value(value: Any) -> str:
    """Render a Python value the way the REST filter grammar expects."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if hasattr(value, "value"):  # enums
        return str(value.value)
    return str(value)


def _quote_list_item(value: Any) -> str:
    text = encode_value(value)
    if any(ch in text for ch in ',()"'):
        escaped = text.replace('"', '\\"')
        return f'"{escaped}"'
    return text


class TableQuery:
    def __init__(self, client: "RemoteClient", table: str) -> None:
        self._client = client
        self.table = table
        self.method = "GET"
        self.columns = "*"
        self.filters: list[tuple[str, str]] = []
        self.order_by: list[str] = []
        self.limit_n: Optional[int] = None
        self.offset_n: Optional[int] = None
        self.payload: Any = None
        self.count_mode: Optional[str] = None
        self.returning = True
        self.on_conflict: Optional[str] = None
        self.single_mode: Optional[str] = None

    # ── verbs ────────────────────────────────────────────────────────────
    def select(self, columns: str = "*", *, count: Optional[str] = None, head: bool = False) -> "TableQuery":
        self.method = "HEAD" if head else "GET"
        self.columns = columns
        self.count_mode = count
        return self

    def insert(self, rows: dict | list[dict], *, returning: bool = True) -> "TableQuery":
        self.method = "POST"
        self.payload = rows
        self.returning = returning
        return self

    def upsert(self, rows: dict | list[dict], *, on_conflict: Optional[str] = None) -> "TableQuery":
        self.method = "POST"
        self.payload = rows
        self.on_conflict = on_conflict or "id"
        return self

    def update(self, values: dict) -> "TableQuery":
        self.method = "PATCH"
        self.payload = values
        return self

    def delete(self) -> "TableQuery":
        self.method = "DELETE"
        return self

    # ── filters ──────────────────────────────────────────────────────────
    def _filter(self, column: str, op: str, value: str) -> "TableQuery":
        self.filters.append((column, f"{op}.{value}"))
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "eq", encode_value(value))

    def neq(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "neq", encode_value(value))

    def gt(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "gt", encode_value(value))

    def gte(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "gte", encode_value(value))

    def lt(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "lt", encode_value(value))

    def lte(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "lte", encode_value(value))

    def ilike(self, column: str, pattern: str) -> "TableQuery":
        return self._filter(column, "ilike", pattern)

    def in_(self, column: str, values: Iterable[Any]) -> "TableQuery":
        items = ",".join(_quote_list_item(v) for v in values)
        return self._filter(column, "in", f"({items})")

    def not_in(self, column: str, values: Iterable[Any]) -> "TableQuery":
        items = ",".join(_quote_list_item(v) for v in values)
        return self._filter(column, "not.in", f"({items})")

    def is_(self, column: str, value: Optional[bool]) -> "TableQuery":
        return self._filter(column, "is", encode_value(value))

    # ── modifiers ────────────────────────────────────────────────────────
    def order(self, column: str, *, desc: bool = False) -> "TableQuery":
        self.order_by.append(f"{column}.{'desc' if desc else 'asc'}")
        return self

    def limit(self, n: int) -> "TableQuery":
        self.limit_n = int(n)
        return self

    def range(self, start: int, end: int) -> "TableQuery":
        self.offset_n = int(start)
        self.limit_n = int(end) - int(start) + 1
        return self

    def single(self) -> "TableQuery":
        self.single_mode = "single"
        return self

    def maybe_single(self) -> "TableQuery":
        self.single_mode = "maybe"
        return self

    # ── wire format ──────────────────────────────────────────────────────
    def build_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.method in ("GET", "HEAD") or self.returning:
            params.append(("select", self.columns))
        params.extend(self.filters)
        if self.order_by:
            params.append(("order", ",".join(self.order_by)))
        if self.limit_n is not None:
            params.append(("limit", str(self.limit_n)))
        if self.offset_n is not None:
            params.append(("offset", str(self.offset_n)))
        if self.on_conflict:
            params.append(("on_conflict", self.on_conflict))
        return params

    def build_headers(self) -> dict[str, str]:
        prefer: list[str] = []
        if self.method in ("POST", "PATCH", "DELETE"):
            prefer.append("return=representation" if self.returning else "return=minimal")
        if self.on_conflict:
            prefer.append("resolution=merge-duplicates")
        if self.count_mode:
            prefer.append(f"count={self.count_mode}")
        return {"Prefer": ",".join(prefer)} if prefer else {}

    async def execute(self) -> "RemoteResult":
        return await self._client.execute(self)

    def __repr__(self) -> str:
        return f"<TableQuery {self.method} {self.table} {self.build_params()!r}>"
