"""Admin authentication endpoints."""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from globalpoll.api.deps import get_db
from globalpoll.core import config
from globalpoll.core.exceptions import AuthenticationError
from globalpoll.core.security import ADMIN_COOKIE_NAME, create_access_token
from globalpoll.schemas import AdminInfo, AdminLoginRequest, AdminLoginResponse, MessageResponse
from globalpoll.services.admin import authenticate_admin

router = APIRouter()


@router.post("/auth", response_model=AdminLoginResponse)
def admin_login(
    request: AdminLoginRequest,
    response: Response,
    db: Session = Depends(get_db)
) -> AdminLoginResponse:
    """
    Authenticate an admin and set a JWT in an httpOnly cookie.

    Passwords are verified against the stored Argon2 hash.

    Args:
        request: AdminLoginRequest with username and password
        response: FastAPI Response object for setting cookies
        db: Database session (injected)

    Returns:
        AdminLoginResponse with the admin's id and username

    Raises:
        AuthenticationError: 401 on unknown username or wrong password

    Example:
        Request:
            POST /api/admin/auth
            {
                "username": "admin",
                "password": "admin123"
            }

        Response (200):
            {
                "message": "Login successful",
                "admin": {"id": 1, "username": "admin"}
            }
            Set-Cookie: admin_token=eyJhbGc...; HttpOnly; SameSite=Lax

        Response (401):
            {
                "message": "Invalid credentials"
            }
    """
    admin = authenticate_admin(db, request.username, request.password)
    if admin is None:
        raise AuthenticationError("Invalid credentials")

    access_token = create_access_token(data={"is_admin": True, "sub": str(admin.id)})

    response.set_cookie(
        key=ADMIN_COOKIE_NAME,
        value=access_token,
        httponly=True,  # Prevents JavaScript access (XSS protection)
        secure=config.settings.ENVIRONMENT == "production",  # Requires HTTPS in production
        samesite="lax",  # CSRF protection
        max_age=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

    return AdminLoginResponse(
        message="Login successful",
        admin=AdminInfo(id=admin.id, username=admin.username),
    )


@router.post("/logout", response_model=MessageResponse)
def admin_logout(response: Response) -> MessageResponse:
    """Clear the admin cookie. Safe to call when not logged in."""
    response.delete_cookie(key=ADMIN_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")
