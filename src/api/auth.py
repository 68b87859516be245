"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_bearer_token, get_current_user
from src.config import get_settings
from src.database import get_db
from src.errors import NotFound, Unauthorized
from src.models.user import User
from src.schemas.auth import AuthResponse, DevLogin, UserLogin, UserRegister, UserResponse
from src.services.auth import (
    authenticate_user,
    create_session,
    create_user,
    delete_session,
    get_user_by_email,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
me_router = APIRouter(prefix="/api", tags=["auth"])


def _auth_response(db: Session, user: User) -> AuthResponse:
    token = create_session(db, user)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user and start a session."""
    user = create_user(db, user_data.email, name=user_data.name, password=user_data.password)
    return _auth_response(db, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise Unauthorized("Incorrect email or password")

    logger.info(f"User {user.id} logged in")
    return _auth_response(db, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
@router.delete("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: Annotated[str, Depends(get_bearer_token)],
    db: Annotated[Session, Depends(get_db)],
):
    """Invalidate the presented session. Repeating it is harmless."""
    delete_session(db, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/dev-login", response_model=AuthResponse)
async def dev_login(
    body: DevLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Find or create a user by email and start a session (development only)."""
    if not get_settings().enable_dev_login:
        raise NotFound("Not found")

    user = get_user_by_email(db, body.email)
    if user is None:
        user = create_user(
            db,
            body.email,
            name=body.name,
            is_admin=body.is_admin,
            is_nutritionist=body.is_nutritionist,
        )
    logger.info(f"Dev login for user {user.id}")
    return _auth_response(db, user)


@me_router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user
