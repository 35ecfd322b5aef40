import enum


class AdminSender(str, enum.Enum):
    """Who wrote a support message: the admin team or the user."""

    ADMIN = "admin"
    USER = "user"


class MediaType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


class SocialPlatform(str, enum.Enum):
    YOUTUBE = "youtube"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    SOUNDCLOUD = "soundcloud"
    SPOTIFY = "spotify"
