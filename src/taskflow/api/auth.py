"""Authentication endpoints and dependencies."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from taskflow.core.db import get_db
from taskflow.core.errors import UnauthorizedError
from taskflow.core.logging import get_logger
from taskflow.core.security import check_login_password
from taskflow.models.user import User
from taskflow.models.user_schemas import UserResponse

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency to get current authenticated user from session."""
    user_id = request.session.get("user_id")

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user session",
        )

    stmt = select(User).where((User.id == user_uuid) & (User.is_active))
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return user


@router.post("/login", response_model=UserResponse)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Login endpoint - validates credentials and creates session.

    The form's `username` field carries the email address.
    """
    email = form_data.username.strip().lower()
    stmt = select(User).where(User.email == email)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning("auth.login_failed", email=email)
        raise UnauthorizedError("Invalid email or password")

    valid, rehashed = check_login_password(form_data.password, user.hashed_password)
    if not valid:
        logger.warning("auth.login_failed", email=email)
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        logger.warning("auth.login_disabled_account", email=user.email, user_id=str(user.id))
        raise UnauthorizedError("Account is disabled")

    if rehashed is not None:
        user.hashed_password = rehashed
        await db.flush()
        logger.info("auth.password_rehashed", user_id=str(user.id))

    request.session["user_id"] = str(user.id)

    logger.info("auth.login_success", email=user.email, user_id=str(user.id))
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: Request):
    """Logout endpoint - clears session."""
    user_id = request.session.get("user_id")
    if user_id:
        logger.info("auth.logout", user_id=user_id)

    request.session.clear()


@router.get("/auth/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the logged-in user."""
    return current_user
