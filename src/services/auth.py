"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from src.config import Settings
from src.database import UserRepository
from src.exceptions import DuplicateUserError, InvalidCredentialsError, UserNotFoundError
from src.models.user import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: str, settings: Settings) -> str:
    """Create a JWT access token carrying the user id.

    The token has no expiry unless ``jwt_expiration_minutes`` is configured.
    """
    to_encode: dict = {"id": str(user_id)}
    if settings.jwt_expiration_minutes:
        to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if not payload.get("id"):
        return None
    return payload


async def register_user(users: UserRepository, name: str, username: str, password: str) -> User:
    """Create a new user with a hashed password.

    Raises:
        DuplicateUserError: If the username is already taken.
    """
    if await users.get_by_username(username):
        raise DuplicateUserError(f"Username {username!r} already exists")

    user = await users.create(name, username, get_password_hash(password))
    logger.info(f"Registered user '{username}'")
    return user


async def authenticate_user(users: UserRepository, username: str, password: str) -> User:
    """Authenticate a user by username and password.

    Raises:
        UserNotFoundError: If no user has this username.
        InvalidCredentialsError: If the password does not match.
    """
    user = await users.get_by_username(username)
    if not user:
        raise UserNotFoundError(f"No user named {username!r}")
    if not verify_password(password, user.password):
        raise InvalidCredentialsError("Invalid password")
    return user
