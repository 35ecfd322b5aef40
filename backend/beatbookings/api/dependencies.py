from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from ..core.config import Settings, settings
from ..crud import crud_artist, crud_profile
from ..models import UserRole, dashboard_path
from ..remote import RemoteClient
from ..schemas import Profile

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/session", auto_error=False)


def get_settings() -> Settings:
    return settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound client created on startup."""
    return request.app.state.http


def get_anon_remote(
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_settings),
) -> RemoteClient:
    """Remote client for public reads made without a session."""
    return RemoteClient(http, cfg)


@dataclass
class CurrentUser:
    profile: Profile
    token: str
    remote: RemoteClient
    artist_profile: Optional[Dict[str, Any]] = None

    @property
    def id(self) -> str:
        return self.profile.id

    @property
    def role(self) -> Optional[UserRole]:
        return self.profile.role

    @property
    def is_admin(self) -> bool:
        return bool(self.profile.is_admin)

    @property
    def dashboard_path(self) -> str:
        return dashboard_path(self.role, self.is_admin)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden(message: str, user: CurrentUser) -> HTTPException:
    """403 carrying the caller's own dashboard so the client can redirect."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"message": message, "redirect_to": user.dashboard_path},
    )


def decode_access_token(token: str, cfg: Settings) -> str:
    try:
        payload = jwt.decode(
            token,
            cfg.SUPABASE_JWT_SECRET,
            algorithms=[cfg.JWT_ALGORITHM],
            audience=cfg.JWT_AUDIENCE,
        )
    except JWTError:
        raise _credentials_exception()
    user_id = payload.get("sub")
    if not user_id:
        raise _credentials_exception()
    return str(user_id)


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_settings),
) -> CurrentUser:
    jwt_token = token or request.cookies.get("access_token")
    if not jwt_token:
        raise _credentials_exception("Not authenticated")
    user_id = decode_access_token(jwt_token, cfg)
    remote = RemoteClient(http, cfg, jwt_token)
    row = await crud_profile.get_profile(remote, user_id)
    if row is None:
        raise _credentials_exception("Profile not found")
    return CurrentUser(profile=Profile.model_validate(row), token=jwt_token, remote=remote)


async def get_optional_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_settings),
) -> Optional[CurrentUser]:
    if not (token or request.cookies.get("access_token")):
        return None
    return await get_current_user(request, token, http, cfg)


async def get_current_artist(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Ensure the current user is an artist with a profile."""
    if current_user.role != UserRole.ARTIST:
        raise forbidden("User is not an artist.", current_user)
    artist = await crud_artist.get_artist_profile_by_user(current_user.remote, current_user.id)
    if not artist:
        raise forbidden("Artist profile does not exist. Please create one.", current_user)
    current_user.artist_profile = artist
    return current_user


def get_current_planner(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role != UserRole.PLANNER:
        raise forbidden("User is not an event planner.", current_user)
    return current_user


def get_current_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise forbidden("Admin access required", current_user)
    return current_user
