# auth router — signup, login, me
# signup and login are the only unguarded api routes

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_current_user, get_storage
from app.errors import ApiError
from app.models.user import AuthResponse, UserCreate, UserLogin, UserResponse
from app.services.auth_service import DUMMY_PASSWORD_HASH, hash_password, issue_token, verify_password
from app.services.storage import EmailAlreadyRegistered, Storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])

DUPLICATE_EMAIL = "User already exists with this email"
# same text for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid email or password"


def _auth_response(user: dict) -> AuthResponse:
    return AuthResponse(
        id=user["id"],
        name=user["name"],
        email=user["email"],
        token=issue_token(user["id"]),
    )


@router.post("/signup", response_model=AuthResponse)
async def signup(body: UserCreate, storage: Storage = Depends(get_storage)):
    """register a new user and return a bearer token"""

    if await storage.get_user_by_email(body.email):
        raise ApiError.conflict(DUPLICATE_EMAIL)

    try:
        user = await storage.create_user(
            name=body.name,
            email=body.email,
            hashed_password=hash_password(body.password),
        )
    except EmailAlreadyRegistered:
        raise ApiError.conflict(DUPLICATE_EMAIL)

    logger.info(f"New user registered: {user['id']}")
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(body: UserLogin, storage: Storage = Depends(get_storage)):
    """authenticate with email + password, returns a fresh token"""

    user = await storage.get_user_by_email(body.email)
    hashed = user["hashed_password"] if user else DUMMY_PASSWORD_HASH
    password_ok = verify_password(body.password, hashed)
    if not user or not password_ok:
        logger.warning("Failed login attempt")
        raise ApiError.unauthorized(INVALID_CREDENTIALS)

    logger.info(f"User logged in: {user['id']}")
    return _auth_response(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: dict = Depends(get_current_user)):
    """current user profile"""
    return UserResponse(**current_user)
