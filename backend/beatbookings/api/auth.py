import logging

from fastapi import APIRouter, Depends, Response, status

from ..schemas import SessionResponse
from .dependencies import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/session", response_model=SessionResponse)
async def read_session(current_user: CurrentUser = Depends(get_current_user)):
    """Who is signed in, and where they belong."""
    return SessionResponse(
        user=current_user.profile,
        role=current_user.role,
        is_admin=current_user.is_admin,
        dashboard_path=current_user.dashboard_path,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response, current_user: CurrentUser = Depends(get_current_user)):
    """Revoke the session remotely and clear the cookie."""
    result = await current_user.remote.auth.sign_out()
    if result.error is not None:
        # The token is still dropped client side; nothing else to undo.
        logger.warning("Remote sign-out failed for %s: %s", current_user.id, result.error)
    response.delete_cookie("access_token", path="/")
    response.status_code = status.HTTP_204_NO_CONTENT
    return response
