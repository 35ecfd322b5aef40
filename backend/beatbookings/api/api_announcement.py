from typing import List

from fastapi import APIRouter, Depends

from .. import schemas
from ..crud import crud_event
from ..remote import RemoteClient
from .dependencies import get_anon_remote

router = APIRouter(tags=["announcements"])


@router.get("/", response_model=List[schemas.AnnouncementResponse])
async def list_active_announcements(remote: RemoteClient = Depends(get_anon_remote)):
    """Homepage banners, newest first."""
    return await crud_event.list_announcements(remote, active_only=True)
