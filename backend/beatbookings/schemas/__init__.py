from .user import Profile, ProfileUpdate, PartySummary, SessionResponse
from .subscription import SubscriptionResponse, SubscriptionCheckoutRequest, SubscriptionCheckoutResult
from .artist import (
    ArtistProfileCreate,
    ArtistProfileUpdate,
    ArtistProfileResponse,
    ArtistCard,
    ArtistDetail,
    SocialLink,
    SocialLinksUpdate,
    MediaResponse,
    ReviewCreate,
    ReviewResponse,
    FavouriteResponse,
    FavouriteToggleResponse,
    ViewsByDay,
    ArtistAnalytics,
)
from .booking import (
    BookingRequestCreate,
    BookingRequestUpdate,
    BookingRequestResponse,
    AcceptBookingRequest,
    AcceptBookingResponse,
    DeclineBookingRequest,
    BookingResponse,
    ConfirmAction,
)
from .event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    PublishResult,
    AttendanceResponse,
    AnnouncementCreate,
    AnnouncementResponse,
)
from .calendar import (
    AvailabilityCreate,
    AvailabilityUpdate,
    AvailabilityResponse,
    CalendarDay,
    CalendarMonth,
)
from .message import (
    MessageCreate,
    MessageResponse,
    SupportMessageCreate,
    SupportMessageResponse,
    ConversationSummary,
    UnreadCount,
)
from .admin import PlatformStats, AdminUserRow, AdminEventRow, AdminSubscriptionRow
from .notification import NotificationResponse
from .music_pool import (
    MusicPoolLinkCreate,
    MusicPoolLinkUpdate,
    MusicPoolArtist,
    MusicPoolLinkResponse,
)
