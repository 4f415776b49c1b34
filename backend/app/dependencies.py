# fastapi dependency injection
# provides storage access and get_current_user via a pluggable identity provider

import logging
from typing import Annotated, Optional

from fastapi import Depends, Path, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import Settings
from app.errors import ApiError
from app.services.auth_service import verify_token
from app.services.storage import MAX_RECORD_ID, Storage

logger = logging.getLogger(__name__)

# auto_error off so a missing header becomes our 401 envelope, not fastapi's
security = HTTPBearer(auto_error=False)

INVALID_TOKEN = "Invalid or expired token"

# path ids outside the storable range are rejected up front
RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID, description="record id")]


def public_user(user: dict) -> dict:
    """strip credentials from a stored user document"""
    return {
        "id": user["id"],
        "name": user["name"],
        "email": user["email"],
        "created_at": user.get("created_at", ""),
    }


class BearerIdentityProvider:
    """resolves the caller from a jwt bearer token"""

    async def resolve(self, credentials: Optional[HTTPAuthorizationCredentials], storage: Storage) -> dict:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise ApiError.unauthorized("Authentication required")

        user_id = verify_token(credentials.credentials)
        if user_id is None:
            raise ApiError.unauthorized(INVALID_TOKEN)

        user = await storage.get_user(user_id)
        if not user:
            # account gone but token still unexpired
            logger.warning(f"Token for unknown user {user_id} rejected")
            raise ApiError.unauthorized(INVALID_TOKEN)

        return public_user(user)


class DemoIdentityProvider(BearerIdentityProvider):
    """development only: requests without a token act as a fixed demo user.
    a token that is sent is still verified normally."""

    def __init__(self, demo_user_id: int):
        self.demo_user_id = demo_user_id

    async def resolve(self, credentials: Optional[HTTPAuthorizationCredentials], storage: Storage) -> dict:
        if credentials is not None:
            return await super().resolve(credentials, storage)

        user = await storage.get_user(self.demo_user_id)
        if not user:
            raise ApiError.unauthorized("Authentication required")
        logger.info(f"No bearer token, using demo user {self.demo_user_id}")
        return public_user(user)


def build_identity_provider(settings: Settings) -> BearerIdentityProvider:
    """choose the identity strategy once, at startup"""
    if settings.DEMO_USER_ID is None:
        return BearerIdentityProvider()
    if settings.is_production:
        raise RuntimeError("DEMO_USER_ID must not be set in production")
    logger.warning(f"Demo identity fallback enabled for user {settings.DEMO_USER_ID}")
    return DemoIdentityProvider(settings.DEMO_USER_ID)


async def get_storage(request: Request) -> Storage:
    """dependency injection for the storage backend chosen at startup"""
    return request.app.state.storage


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    storage: Storage = Depends(get_storage),
) -> dict:
    """resolve the authenticated caller, never including the password hash"""
    provider: BearerIdentityProvider = request.app.state.identity_provider
    return await provider.resolve(credentials, storage)
