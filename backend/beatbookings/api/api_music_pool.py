import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status

from .. import schemas
from ..crud import crud_artist, crud_music_pool
from ..models import UserRole
from ..remote import RemoteError
from ..utils.errors import error_response, remote_error_response, require_confirmation
from .dependencies import CurrentUser, forbidden, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["music-pool"])

DUPLICATE_LINK = "You already have a music pool link. Please update your existing one."


def _present(row: dict, current_user: CurrentUser) -> dict:
    row["is_owner"] = row.get("user_id") == current_user.id
    return row


async def _owned_link(link_id: str, current_user: CurrentUser, *, allow_admin: bool = False) -> dict:
    link = await crud_music_pool.get_link(current_user.remote, link_id)
    if not link:
        raise error_response("Music pool link not found", {"link_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    if link.get("user_id") != current_user.id and not (allow_admin and current_user.is_admin):
        raise forbidden("You can only change your own music pool link.", current_user)
    return link


@router.get("/", response_model=List[schemas.MusicPoolLinkResponse])
async def list_music_pool(current_user: CurrentUser = Depends(get_current_user)):
    """Shared DJ music pools, newest first."""
    rows = await crud_music_pool.list_links(current_user.remote)
    return [_present(row, current_user) for row in rows]


@router.post("/", response_model=schemas.MusicPoolLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_music_pool_link(
    payload: schemas.MusicPoolLinkCreate,
    current_user: CurrentUser = Depends(get_current_user),
):
    """Share one pool link per user, tagged with the caller's artist profile when they have one."""
    if await crud_music_pool.get_link_for_user(current_user.remote, current_user.id):
        raise error_response(DUPLICATE_LINK, {"user_id": "duplicate"}, status.HTTP_409_CONFLICT)
    artist = None
    if current_user.role == UserRole.ARTIST:
        artist = await crud_artist.get_artist_profile_by_user(current_user.remote, current_user.id)
    values = {
        **payload.model_dump(),
        "user_id": current_user.id,
        "artist_id": artist["id"] if artist else None,
    }
    try:
        row = await crud_music_pool.create_link(current_user.remote, values)
    except RemoteError as exc:
        if exc.code == "23505":
            raise error_response(DUPLICATE_LINK, {"user_id": "duplicate"}, status.HTTP_409_CONFLICT)
        raise remote_error_response(exc)
    logger.info("User %s shared a music pool link", current_user.id)
    return _present(row, current_user)


@router.patch("/{link_id}", response_model=schemas.MusicPoolLinkResponse)
async def update_music_pool_link(
    link_id: str,
    payload: schemas.MusicPoolLinkUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    link = await _owned_link(link_id, current_user)
    values = payload.model_dump(exclude_unset=True)
    if "link_url" in values and values["link_url"] is None:
        raise error_response("Please enter a valid URL", {"link_url": "required"})
    if not values:
        return _present(link, current_user)
    updated = await crud_music_pool.update_link(current_user.remote, link_id, values)
    return _present(updated or {**link, **values}, current_user)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_music_pool_link(
    link_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
):
    require_confirmation(confirm, "delete this music pool link")
    await _owned_link(link_id, current_user, allow_admin=True)
    await crud_music_pool.delete_link(current_user.remote, link_id)
    logger.info("Music pool link %s deleted by %s", link_id, current_user.id)
