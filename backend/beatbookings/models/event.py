import enum


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class AttendanceStatus(str, enum.Enum):
    GOING = "going"
