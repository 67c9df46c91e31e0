"""Tests for password hashing, tokens and the auth service functions."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.exceptions import DuplicateUserError, InvalidCredentialsError, UserNotFoundError
from src.services.auth import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_password_hash,
    register_user,
    verify_password,
)


class TestPasswordHashing:
    """Tests for bcrypt hashing helpers."""

    def test_hash_is_salted(self):
        """Hashing the same password twice gives different hashes."""
        first = get_password_hash("secret1")
        second = get_password_hash("secret1")
        assert first != second
        assert verify_password("secret1", first)
        assert verify_password("secret1", second)

    def test_wrong_password_does_not_verify(self):
        assert not verify_password("wrong", get_password_hash("secret1"))


class TestTokens:
    """Tests for JWT issue and verification."""

    def test_round_trip(self, settings):
        token = create_access_token("507f1f77bcf86cd799439011", settings)
        payload = decode_access_token(token, settings)
        assert payload["id"] == "507f1f77bcf86cd799439011"

    def test_no_expiry_by_default(self, settings):
        token = create_access_token("abc", settings)
        assert "exp" not in jwt.get_unverified_claims(token)

    def test_expiry_when_configured(self, settings):
        settings.jwt_expiration_minutes = 30
        token = create_access_token("abc", settings)
        assert "exp" in jwt.get_unverified_claims(token)
        assert decode_access_token(token, settings) is not None

    def test_expired_token_rejected(self, settings):
        expired = jwt.encode(
            {"id": "abc", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_access_token(expired, settings) is None

    def test_wrong_secret_rejected(self, settings):
        forged = jwt.encode({"id": "abc"}, "another-secret", algorithm="HS256")
        assert decode_access_token(forged, settings) is None

    def test_token_without_id_rejected(self, settings):
        token = jwt.encode({"sub": "abc"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        assert decode_access_token(token, settings) is None

    def test_garbage_rejected(self, settings):
        assert decode_access_token("not-a-jwt", settings) is None


class TestRegisterAndAuthenticate:
    """Tests for the user-facing auth service functions."""

    @pytest.mark.asyncio
    async def test_register_then_authenticate(self, database):
        users = database.users
        created = await register_user(users, "Alice", "alice", "secret1")

        user = await authenticate_user(users, "alice", "secret1")
        assert user.id == created.id
        assert user.password != "secret1"

    @pytest.mark.asyncio
    async def test_register_duplicate(self, database):
        users = database.users
        await register_user(users, "Alice", "alice", "secret1")

        with pytest.raises(DuplicateUserError):
            await register_user(users, "Other Alice", "alice", "secret2")

    @pytest.mark.asyncio
    async def test_authenticate_unknown_user(self, database):
        with pytest.raises(UserNotFoundError):
            await authenticate_user(database.users, "nobody", "secret1")

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, database):
        users = database.users
        await register_user(users, "Alice", "alice", "secret1")

        with pytest.raises(InvalidCredentialsError):
            await authenticate_user(users, "alice", "wrong-password")
