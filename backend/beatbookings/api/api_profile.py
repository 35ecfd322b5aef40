from fastapi import APIRouter, Depends, File, UploadFile

from .. import schemas
from ..core.config import Settings
from ..crud import crud_profile
from ..services.media_service import PROFILE_PREFIX, remove_by_url, store_upload
from .dependencies import CurrentUser, get_current_user, get_settings

router = APIRouter(tags=["profiles"])


@router.get("/me", response_model=schemas.Profile)
async def read_my_profile(current_user: CurrentUser = Depends(get_current_user)):
    return current_user.profile


@router.patch("/me", response_model=schemas.Profile)
async def update_my_profile(
    payload: schemas.ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    return await crud_profile.update_profile(
        current_user.remote, current_user.id, payload.model_dump(exclude_unset=True)
    )


@router.post("/me/avatar", response_model=schemas.Profile)
async def upload_my_avatar(
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user),
    cfg: Settings = Depends(get_settings),
):
    """Replace the profile picture; the previous object is removed."""
    stored = await store_upload(
        current_user.remote, cfg, file, prefix=PROFILE_PREFIX, owner_id=current_user.id, images_only=True
    )
    previous = current_user.profile.image_url
    profile = await crud_profile.update_profile(current_user.remote, current_user.id, {"image_url": stored.public_url})
    if previous and previous != stored.public_url:
        await remove_by_url(current_user.remote, previous)
    return profile
