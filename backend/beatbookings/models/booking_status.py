import enum


class BookingRequestStatus(str, enum.Enum):
    """Status of a planner's request to book an artist."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"


class BookingStatus(str, enum.Enum):
    """Status of a confirmed engagement. Bookings are never hard-deleted."""

    ACCEPTED = "accepted"
    CANCELLED = "cancelled"
