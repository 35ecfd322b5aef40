from typing import List

from fastapi import APIRouter, Depends, status

from .. import schemas
from ..crud import crud_artist, crud_favourite
from ..utils.errors import error_response
from .dependencies import CurrentUser, get_current_planner

router = APIRouter(tags=["favourites"])


@router.get("/", response_model=List[schemas.FavouriteResponse])
async def list_favourites(current_user: CurrentUser = Depends(get_current_planner)):
    return await crud_favourite.list_favourites(current_user.remote, current_user.id)


@router.post("/{artist_id}/toggle", response_model=schemas.FavouriteToggleResponse)
async def toggle_favourite(artist_id: str, current_user: CurrentUser = Depends(get_current_planner)):
    if not await crud_artist.get_artist_profile(current_user.remote, artist_id):
        raise error_response("Artist not found", {"artist_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    favourited = await crud_favourite.toggle_favourite(current_user.remote, current_user.id, artist_id)
    return {"favourited": favourited}
