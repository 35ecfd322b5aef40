from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

from ..remote import RemoteError

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    field_errors: Dict[str, str],
    code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details."""
    logger.error("%s %s", message, field_errors)
    detail = {"message": message, "field_errors": field_errors}
    return HTTPException(status_code=code, detail=detail)


def remote_error_response(
    exc: RemoteError,
    code: int = status.HTTP_400_BAD_REQUEST,
    field: Optional[str] = None,
) -> HTTPException:
    """Surface a remote failure with its message verbatim."""
    field_errors = {field: exc.message} if field else {}
    if exc.code:
        field_errors.setdefault("remote_code", exc.code)
    return error_response(exc.message, field_errors, code)


def require_confirmation(confirm: bool, action: str) -> None:
    """Destructive actions must be explicitly confirmed by the caller."""
    if not confirm:
        raise error_response(
            f"Please confirm you want to {action}",
            {"confirm": "required"},
            status.HTTP_400_BAD_REQUEST,
        )
