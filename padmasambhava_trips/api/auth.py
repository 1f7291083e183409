"""
Authentication API endpoints for the admin console.
"""

from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..models.admin import Admin
from ..schemas.auth import AdminData, AdminLogin, AdminProfile, AdminResponse, LoginResponse
from ..schemas.common import ErrorResponse, SuccessResponse
from ..services.admin_service import AdminService
from ..utils.auth import create_access_token
from ..utils.dependencies import get_current_admin
from ..utils.exceptions import AuthenticationError, AuthorizationError
from ..utils.logging_config import log_security_event


router = APIRouter(prefix="/auth", tags=["authentication"])


def _set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.jwt_cookie_name,
        value=token,
        max_age=settings.jwt_cookie_expires_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)
async def login_admin(
    login_data: AdminLogin,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Authenticate an admin and issue an access token.

    The token is returned in the body and also set as an http-only cookie.

    Raises:
        AuthenticationError: If the e-mail or password is wrong
        AuthorizationError: If the account has been deactivated
    """
    admin = await AdminService(db).authenticate_admin(login_data.email, login_data.password)

    if not admin:
        log_security_event(
            "admin_login_failed",
            {"client_ip": request.client.host if request.client else None}
        )
        raise AuthenticationError("Incorrect email or password")

    if not admin.is_active:
        log_security_event("inactive_admin_login", {"admin_id": str(admin.id)})
        raise AuthorizationError("Your account has been deactivated")

    access_token = create_access_token(
        data={"sub": str(admin.id), "role": admin.role.value},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    _set_token_cookie(response, access_token)

    log_security_event("admin_login", {"admin_id": str(admin.id)}, severity="INFO")

    return LoginResponse(
        token=access_token,
        data=AdminData(admin=AdminProfile.model_validate(admin)),
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout_admin(
    response: Response,
    current_admin: Admin = Depends(get_current_admin)
) -> Any:
    """Clear the token cookie."""
    response.delete_cookie(settings.jwt_cookie_name, httponly=True, samesite="lax")
    return SuccessResponse(message="Logged out successfully")


@router.get("/me", response_model=AdminResponse)
async def get_current_admin_profile(
    current_admin: Admin = Depends(get_current_admin)
) -> Any:
    """Get the logged-in admin's profile."""
    return AdminResponse(data=AdminData(admin=AdminProfile.model_validate(current_admin)))
