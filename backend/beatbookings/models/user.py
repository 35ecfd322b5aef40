import enum


class UserRole(str, enum.Enum):
    ARTIST = "artist"
    PLANNER = "planner"

    @classmethod
    def _missing_(cls, value):
        # Accept legacy upper-case role names stored before the enum was lowercased.
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


ADMIN_DASHBOARD = "/admin"


def dashboard_path(role, is_admin: bool = False) -> str:
    """Return the landing route for a user of the given role."""
    if is_admin:
        return ADMIN_DASHBOARD
    if role in (UserRole.ARTIST, UserRole.ARTIST.value):
        return "/artist/dashboard"
    if role in (UserRole.PLANNER, UserRole.PLANNER.value):
        return "/planner/dashboard"
    return "/select-role"
