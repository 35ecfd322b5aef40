import logging
import time
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile, status

from ..core.config import Settings
from ..models import MediaType
from ..remote import RemoteClient, RemoteError
from ..utils.errors import error_response, remote_error_response

logger = logging.getLogger(__name__)

PROFILE_PREFIX = "profiles"
ARTIST_MEDIA_PREFIX = "artist-media"
EVENT_COVER_PREFIX = "event-covers"


@dataclass
class StoredObject:
    path: str
    public_url: str
    media_type: MediaType
    size: int


def media_type_for(content_type: Optional[str]) -> MediaType:
    ct = (content_type or "").lower()
    if ct.startswith("video/"):
        return MediaType.VIDEO
    if ct.startswith("image/"):
        return MediaType.IMAGE
    raise error_response("Unsupported file type", {"file": "Only images and videos are accepted"})


def max_bytes_for(media_type: MediaType, settings: Settings) -> int:
    return settings.MAX_VIDEO_BYTES if media_type == MediaType.VIDEO else settings.MAX_IMAGE_BYTES


def _guess_ext(content_type: Optional[str], filename: Optional[str]) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].strip().lower()
        if ext and ext.isalnum():
            return "." + ext
    ct = (content_type or "").lower()
    if ct == "image/png":
        return ".png"
    if ct in ("image/jpeg", "image/jpg"):
        return ".jpg"
    if ct == "image/webp":
        return ".webp"
    if ct == "video/mp4":
        return ".mp4"
    if ct == "video/quicktime":
        return ".mov"
    return ".bin"


async def store_upload(
    remote: RemoteClient,
    settings: Settings,
    upload: UploadFile,
    *,
    prefix: str,
    owner_id: str,
    images_only: bool = False,
) -> StoredObject:
    """Validate size and type, then upload to ``<prefix>/<owner_id>/``."""
    media_type = media_type_for(upload.content_type)
    if images_only and media_type != MediaType.IMAGE:
        raise error_response("Please upload an image", {"file": "image required"})
    limit = max_bytes_for(media_type, settings)
    content = await upload.read(limit + 1)
    if len(content) > limit:
        mb = limit // (1024 * 1024)
        raise error_response(
            f"File too large. Max size: {mb}MB",
            {"file": f"max {limit} bytes"},
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    if not content:
        raise error_response("No file provided", {"file": "required"})
    name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{_guess_ext(upload.content_type, upload.filename)}"
    path = f"{prefix}/{owner_id}/{name}"
    try:
        stored = (await remote.storage.upload(path, content, upload.content_type or "application/octet-stream")).raise_for_error()
    except RemoteError as exc:
        raise remote_error_response(exc, status.HTTP_502_BAD_GATEWAY, field="file")
    logger.info("Stored %s (%d bytes)", path, len(content))
    return StoredObject(path=path, public_url=stored["public_url"], media_type=media_type, size=len(content))


async def remove_by_url(remote: RemoteClient, url: Optional[str]) -> None:
    """Best-effort removal of the storage object behind a public URL."""
    path = remote.storage.path_from_url(url or "")
    if not path:
        return
    result = await remote.storage.remove([path])
    if result.error is not None:
        logger.warning("Failed to remove stored object %s: %s", path, result.error)
