"""
SnackTrack Backend - User Service Unit Tests
=============================================

What:  Tests for UserService with a mocked AsyncSession (no database).

What we test:
    ✅ Existing username → ConflictError, nothing inserted
    ✅ Insert losing a uniqueness race → DatabaseError("Registration failed")
    ✅ New user → hashed password stored, id returned
    ✅ Unknown user / wrong password → AuthenticationError
    ✅ Successful login returns the row with or without the hash
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from sqlalchemy.exc import IntegrityError

from snacktrack.exceptions import AuthenticationError, ConflictError, DatabaseError
from snacktrack.models.user import User
from snacktrack.schemas.user import LoginRequest, RegisterRequest, UserResponse
from snacktrack.services.user_service import UserService


def lookup_result(user):
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    return result


def stored_user():
    return User(id=3, username="alice", password="$2b$04$storedhash", role="user", name="Alice")


class TestRegister:

    def setup_method(self):
        self.service = UserService()
        self.payload = RegisterRequest(username="alice", password="pw", name="Alice")

    @pytest.mark.asyncio
    async def test_existing_username_conflicts(self, mock_db_session):
        mock_db_session.execute.return_value = lookup_result(stored_user())

        with pytest.raises(ConflictError) as exc_info:
            await self.service.register(mock_db_session, self.payload)

        assert exc_info.value.message == "Username already exists"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_new_user_is_inserted_with_hash(self, mock_db_session):
        mock_db_session.execute.return_value = lookup_result(None)
        mock_db_session.add.side_effect = lambda obj: setattr(obj, "id", 11)

        with patch(
            "snacktrack.services.user_service.hash_password",
            AsyncMock(return_value="$2b$10$hashed"),
        ):
            result = await self.service.register(mock_db_session, self.payload)

        assert result.user_id == 11
        assert result.model_dump(by_alias=True) == {
            "message": "User registered successfully",
            "userId": 11,
        }
        inserted = mock_db_session.add.call_args.args[0]
        assert inserted.password == "$2b$10$hashed"
        assert inserted.role == "user"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_lost_uniqueness_race_is_registration_failure(self, mock_db_session):
        mock_db_session.execute.return_value = lookup_result(None)
        mock_db_session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT INTO users", {}, Exception("duplicate key"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.register(mock_db_session, self.payload)

        assert exc_info.value.message == "Registration failed"
        assert exc_info.value.context["stage"] == "insert"
        mock_db_session.rollback.assert_awaited_once()


class TestAuthenticate:

    def setup_method(self):
        self.service = UserService()
        self.payload = LoginRequest(username="alice", password="pw")

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_db_session):
        mock_db_session.execute.return_value = lookup_result(None)

        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.authenticate(mock_db_session, self.payload)

        assert exc_info.value.message == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db_session):
        mock_db_session.execute.return_value = lookup_result(stored_user())

        with patch(
            "snacktrack.services.user_service.verify_password",
            AsyncMock(return_value=False),
        ):
            with pytest.raises(AuthenticationError) as exc_info:
                await self.service.authenticate(mock_db_session, self.payload)

        assert exc_info.value.message == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_success_includes_hash_by_default(self, mock_db_session):
        mock_db_session.execute.return_value = lookup_result(stored_user())

        with patch(
            "snacktrack.services.user_service.verify_password",
            AsyncMock(return_value=True),
        ):
            result = await self.service.authenticate(mock_db_session, self.payload)

        assert isinstance(result, UserResponse)
        assert result.password == "$2b$04$storedhash"
        assert result.username == "alice"

    @pytest.mark.asyncio
    async def test_success_without_hash(self, mock_db_session):
        mock_db_session.execute.return_value = lookup_result(stored_user())

        with patch(
            "snacktrack.services.user_service.verify_password",
            AsyncMock(return_value=True),
        ):
            result = await self.service.authenticate(
                mock_db_session, self.payload, include_password_hash=False
            )

        assert "password" not in result.model_dump()
        assert result.id == 3
