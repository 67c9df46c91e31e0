"""FastAPI dependencies for authentication, database and media access."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config import Settings
from src.database import Database
from src.services.auth import decode_access_token
from src.services.media import MediaStore

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Database handle created at startup."""
    return request.app.state.database


def get_media_store(request: Request) -> MediaStore:
    """Media host adapter created at startup."""
    return request.app.state.media_store


def get_current_user_id(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Get the authenticated user id from the bearer token.

    Missing credentials are a 401; a token that does not verify is a 403.
    """
    if credentials is None:
        has_header = bool(request.headers.get("Authorization"))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing" if has_header else "Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials, settings)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    user_id = str(payload["id"])
    request.state.user_id = user_id
    return user_id


def get_category_owner_id(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Resolve the owner for a new category.

    When CATEGORY_CREATE_REQUIRES_AUTH is off, anonymous requests are allowed,
    but a presented Authorization header must still carry a valid token.
    """
    if not settings.category_create_requires_auth and not request.headers.get("Authorization"):
        return None
    return get_current_user_id(request, settings, credentials)
