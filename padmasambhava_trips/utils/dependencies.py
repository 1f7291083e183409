"""
FastAPI dependencies for admin authentication.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..database import get_db
from ..models.admin import Admin
from ..services.admin_service import AdminService
from .auth import check_credential
from .exceptions import AuthenticationError, AuthorizationError
from .logging_config import log_security_event


# Bearer scheme; a missing header falls back to the jwt cookie
security = HTTPBearer(auto_error=False)


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """Take the token from the Authorization header first, then the cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().jwt_cookie_name) or None


async def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Admin:
    """
    Resolve the admin making the request.

    Args:
        request: Incoming request, used for the cookie and request state
        credentials: HTTP Bearer credentials, if sent
        db: Database session

    Returns:
        The authenticated, active admin

    Raises:
        AuthenticationError: No credential, a bad credential, or a deleted admin
        AuthorizationError: The admin account is deactivated
    """
    result = check_credential(extract_token(request, credentials))
    if not result.authenticated:
        log_security_event(
            "admin_auth_rejected",
            {"reason": result.reason, "path": request.url.path},
            severity="INFO"
        )
        raise AuthenticationError(result.reason)

    try:
        admin_id = UUID(result.admin_id)
    except ValueError:
        raise AuthenticationError("Invalid token. Please log in again.")

    admin = await AdminService(db).get_admin_by_id(admin_id)
    if admin is None:
        raise AuthenticationError("The admin belonging to this token no longer exists.")

    if not admin.is_active:
        log_security_event("inactive_admin_access", {"admin_id": str(admin.id)})
        raise AuthorizationError("Your account has been deactivated")

    # Plain values: the session that loaded the admin is closed before the response is logged
    request.state.admin_id = str(admin.id)
    request.state.admin_role = admin.role.value
    return admin

