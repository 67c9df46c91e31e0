"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_app_settings, get_database
from src.config import Settings
from src.database import Database
from src.exceptions import DuplicateUserError, InvalidCredentialsError, UserNotFoundError
from src.schemas.auth import LoginResponse, MessageResponse, UserLogin, UserSignup
from src.services.auth import authenticate_user, create_access_token, register_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    database: Annotated[Database, Depends(get_database)],
):
    """Register a new user."""
    try:
        await register_user(database.users, user_data.name, user_data.username, user_data.password)
    except DuplicateUserError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        ) from None

    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    database: Annotated[Database, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Login with username and password."""
    try:
        user = await authenticate_user(database.users, credentials.username, credentials.password)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from None
    except InvalidCredentialsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid password") from None

    return LoginResponse(
        user_id=str(user.id),
        name=user.name,
        token=create_access_token(str(user.id), settings),
    )
