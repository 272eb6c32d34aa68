"""
SnackTrack Backend - Password Hashing and Configuration Tests
==============================================================
"""

import pytest
from pydantic import ValidationError

from snacktrack.config import Settings
from snacktrack.services.security import hash_password, verify_password


class TestPasswordHashing:

    @pytest.mark.asyncio
    async def test_hash_is_salted_and_not_plaintext(self):
        first = await hash_password("hunter2")
        second = await hash_password("hunter2")

        assert first != "hunter2"
        assert first != second

    @pytest.mark.asyncio
    async def test_verify(self):
        hashed = await hash_password("hunter2")

        assert await verify_password("hunter2", hashed) is True
        assert await verify_password("hunter3", hashed) is False

    @pytest.mark.asyncio
    async def test_non_hash_stored_value_never_matches(self):
        assert await verify_password("hunter2", "hunter2") is False


class TestSettings:

    @pytest.mark.parametrize(
        "url",
        ["postgres://u:p@db:5432/snacks", "postgresql://u:p@db:5432/snacks"],
    )
    def test_postgres_urls_use_asyncpg(self, url):
        assert Settings(database_url=url).database_url == "postgresql+asyncpg://u:p@db:5432/snacks"

    def test_sqlite_url_untouched(self):
        settings = Settings(database_url="sqlite+aiosqlite:///./x.db")

        assert settings.database_url == "sqlite+aiosqlite:///./x.db"
        assert settings.is_sqlite

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="https://a.example, https://b.example,")

        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]

    def test_log_level_normalized_and_validated(self):
        assert Settings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_defaults(self):
        settings = Settings()

        assert settings.login_include_password_hash is True
        assert settings.port == 3000
