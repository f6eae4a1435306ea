"""
Unit tests for UserService.

This module contains unit tests for the UserService class, covering the
lookup of local users by identity-provider ID and first-sight creation.
"""

import uuid
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.domains.user.service import UserService


class TestUserService:
    """Test cases for UserService."""

    @pytest.mark.asyncio
    async def test_get_user_by_auth_id_existing_user(self, test_db, test_user):
        service = UserService(test_db)

        result = await service.get_user_by_auth_id(test_user.auth_user_id)

        assert result is not None
        assert result.id == test_user.id
        assert result.email == test_user.email

    @pytest.mark.asyncio
    async def test_get_user_by_auth_id_nonexistent_user(self, test_db):
        service = UserService(test_db)

        assert await service.get_user_by_auth_id("nonexistent_auth_id") is None

    @pytest.mark.asyncio
    async def test_create_user_success(self, test_db):
        service = UserService(test_db)
        auth_user_id = f"auth_user_{uuid.uuid4()}"

        result = await service.create_user(auth_user_id=auth_user_id, email="new@example.com")

        assert result.auth_user_id == auth_user_id
        assert result.email == "new@example.com"
        assert result.username is None
        assert result.is_active is True

    @pytest.mark.asyncio
    async def test_create_user_database_error(self, test_db):
        service = UserService(test_db)

        with patch.object(test_db, "commit", side_effect=SQLAlchemyError("Database error")):
            with pytest.raises(SQLAlchemyError):
                await service.create_user(auth_user_id="auth_user_x")

    @pytest.mark.asyncio
    async def test_get_or_create_user_returns_existing(self, test_db, test_user):
        service = UserService(test_db)

        result = await service.get_or_create_user(test_user.auth_user_id, {"email": "other@example.com"})

        assert result.id == test_user.id
        assert result.email == "test@example.com"

    @pytest.mark.asyncio
    async def test_get_or_create_user_creates_from_payload(self, test_db):
        service = UserService(test_db)
        payload = {"sub": "auth_user_new", "email": "fresh@example.com", "username": "fresh"}

        result = await service.get_or_create_user("auth_user_new", payload)

        assert result.auth_user_id == "auth_user_new"
        assert result.email == "fresh@example.com"
        assert result.username == "fresh"
        assert (await service.get_user_by_auth_id("auth_user_new")).id == result.id
