"""Booking request and booking state rules.

Requests move ``pending`` -> ``accepted | declined | cancelled`` and every
other state is terminal. The stored procedures own the actual transition;
these helpers decide which actions a viewer is offered and reject obviously
illegal ones before anything is sent to the remote service.
"""

from typing import Any, Mapping

from .booking_status import BookingRequestStatus, BookingStatus
from .user import UserRole


class RequestAction:
    ACCEPT = "accept"
    DECLINE = "decline"
    EDIT = "edit"
    CANCEL = "cancel"


# action -> (role allowed to perform it, resulting status)
REQUEST_TRANSITIONS: dict[BookingRequestStatus, dict[str, tuple[UserRole, BookingRequestStatus | None]]] = {
    BookingRequestStatus.PENDING: {
        RequestAction.ACCEPT: (UserRole.ARTIST, BookingRequestStatus.ACCEPTED),
        RequestAction.DECLINE: (UserRole.ARTIST, BookingRequestStatus.DECLINED),
        RequestAction.CANCEL: (UserRole.PLANNER, BookingRequestStatus.CANCELLED),
        RequestAction.EDIT: (UserRole.PLANNER, None),
    },
    BookingRequestStatus.ACCEPTED: {},
    BookingRequestStatus.DECLINED: {},
    BookingRequestStatus.CANCELLED: {},
}


class InvalidTransitionError(Exception):
    """Raised when an action is not available for a request or booking."""

    def __init__(self, message: str, current_status: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.current_status = current_status


def _coerce_request_status(status: Any) -> BookingRequestStatus | None:
    try:
        return BookingRequestStatus(status)
    except ValueError:
        return None


def is_terminal(status: Any) -> bool:
    parsed = _coerce_request_status(status)
    return parsed is None or not REQUEST_TRANSITIONS[parsed]


def next_status(status: Any, action: str) -> BookingRequestStatus | None:
    parsed = _coerce_request_status(status)
    if parsed is None:
        return None
    entry = REQUEST_TRANSITIONS[parsed].get(action)
    return entry[1] if entry else None


def available_request_actions(status: Any, viewer_role: Any, is_owner: bool) -> list[str]:
    """Actions the viewer may take on a request in ``status``.

    ``is_owner`` means the viewer is the party the request involves: the
    addressed artist for artist actions or the sending planner for planner
    actions.
    """
    parsed = _coerce_request_status(status)
    if parsed is None or not is_owner:
        return []
    try:
        role = UserRole(viewer_role)
    except ValueError:
        return []
    return [action for action, (allowed, _) in REQUEST_TRANSITIONS[parsed].items() if allowed is role]


def ensure_request_action(request: Mapping[str, Any], action: str, viewer_id: str, viewer_role: Any) -> None:
    """Raise ``InvalidTransitionError`` unless ``viewer`` may perform ``action``."""
    status = request.get("status")
    try:
        role = UserRole(viewer_role)
    except ValueError:
        role = None
    if role is UserRole.ARTIST:
        is_owner = request.get("artist_user_id") == viewer_id
    elif role is UserRole.PLANNER:
        is_owner = request.get("planner_id") == viewer_id
    else:
        is_owner = False
    if action in available_request_actions(status, role, is_owner):
        return
    if is_terminal(status):
        raise InvalidTransitionError(f"Booking request is already {status}", current_status=status)
    raise InvalidTransitionError(f"Cannot {action} this booking request", current_status=status)


def available_booking_actions(status: Any) -> list[str]:
    if status == BookingStatus.ACCEPTED.value or status is BookingStatus.ACCEPTED:
        return [RequestAction.CANCEL]
    return []
