# app/core/dependencies.py
import logging
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import SupabaseAuthenticator
from app.database import get_db
from app.domains.files.service import FileService
from app.domains.organizer.service import OrganizerService
from app.domains.tagging.service import TaggingService
from app.domains.user.service import UserService
from app.exceptions.base import AuthenticationError, BaseAppException, UpstreamServiceError
from app.services.object_storage import ObjectStorageService
from models import User

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our 401, not a bare 403
security = HTTPBearer(auto_error=False)


@lru_cache
def get_authenticator() -> SupabaseAuthenticator:
    return SupabaseAuthenticator()


@lru_cache
def get_object_storage() -> ObjectStorageService:
    return ObjectStorageService()


@lru_cache
def get_tagging_service() -> TaggingService:
    return TaggingService()


async def validate_token(
    token: HTTPAuthorizationCredentials | None = Depends(security),
    auth: SupabaseAuthenticator = Depends(get_authenticator),
) -> dict:
    """Validate and decode the bearer token from the identity provider.

    Returns:
        dict: Decoded token payload

    Raises:
        AuthenticationError: If token is missing, invalid or expired
    """
    if not token or not token.credentials:
        raise AuthenticationError("No valid authentication token provided")

    try:
        payload = await auth.verify_token(token.credentials)
    except BaseAppException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", str(e))
        raise AuthenticationError("Authentication failed") from e

    if not payload or not payload.get("sub"):
        raise AuthenticationError("Invalid authentication token")

    return payload


async def get_current_user(
    request: Request,
    payload: dict = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from the token payload.

    Returns:
        User: Current authenticated user

    Raises:
        AuthenticationError: If the user is inactive
    """
    auth_user_id = payload["sub"]

    try:
        user_service = UserService(db)
        user = await user_service.get_or_create_user(auth_user_id, payload)
    except Exception as e:
        logger.error("User authentication error: %s", str(e))
        raise UpstreamServiceError(f"Authentication service error: {str(e)}") from e

    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    # Add user info to request state for logging
    request.state.user_id = user.id
    request.state.auth_user_id = auth_user_id

    return user


def get_file_service(
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorageService = Depends(get_object_storage),
    tagger: TaggingService = Depends(get_tagging_service),
) -> FileService:
    return FileService(db, storage=storage, tagger=tagger)


def get_organizer_service(
    db: AsyncSession = Depends(get_db),
    files: FileService = Depends(get_file_service),
    tagger: TaggingService = Depends(get_tagging_service),
) -> OrganizerService:
    return OrganizerService(db, files=files, tagger=tagger)
