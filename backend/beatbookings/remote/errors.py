from __future__ import annotations

from typing import Any, Optional

import httpx


class RemoteError(Exception):
    """Error returned by the backend service for a query, procedure or upload.

    Mirrors the ``{message, code, details, hint}`` body PostgREST returns so
    callers can surface ``message`` to users verbatim.
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Any = None,
        hint: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        self.status_code = status_code

    def __str__(self) -> str:
        if self.code:
            return f"{self.code}: {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "hint": self.hint,
        }

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RemoteError":
        body: Any = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = (
                body.get("message")
                or body.get("msg")
                or body.get("error_description")
                or body.get("error")
                or response.reason_phrase
            )
            code = body.get("code") or body.get("error_code")
            return cls(
                str(message),
                code=str(code) if code is not None else None,
                details=body.get("details"),
                hint=body.get("hint"),
                status_code=response.status_code,
            )
        text = (response.text or "").strip() or response.reason_phrase or "Remote request failed"
        return cls(text, status_code=response.status_code)


class NoRowsError(RemoteError):
    """Raised by ``single()`` when the query matched zero or several rows."""

    def __init__(self, table: str, count: int) -> None:
        super().__init__(
            "JSON object requested, multiple (or no) rows returned",
            code="PGRST116",
            details=f"{table}: {count} rows",
            status_code=406,
        )
