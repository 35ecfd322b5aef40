from .user import UserRole, dashboard_path
from .booking_status import BookingRequestStatus, BookingStatus
from .event import EventStatus, AttendanceStatus
from .subscription import SubscriptionStatus, SubscriptionTier, EntitlementTier
from .message import AdminSender, MediaType, SocialPlatform
from .lifecycle import (
    REQUEST_TRANSITIONS,
    InvalidTransitionError,
    RequestAction,
    available_booking_actions,
    available_request_actions,
    ensure_request_action,
    is_terminal,
    next_status,
)

__all__ = [
    "UserRole",
    "dashboard_path",
    "BookingRequestStatus",
    "BookingStatus",
    "EventStatus",
    "AttendanceStatus",
    "SubscriptionStatus",
    "SubscriptionTier",
    "EntitlementTier",
    "AdminSender",
    "MediaType",
    "SocialPlatform",
    "REQUEST_TRANSITIONS",
    "InvalidTransitionError",
    "RequestAction",
    "available_booking_actions",
    "available_request_actions",
    "ensure_request_action",
    "is_terminal",
    "next_status",
]
