"""
Authentication Routes
Admin login and logout
"""

from fastapi import APIRouter, HTTPException, Response, status

from app.auth import create_access_token, verify_password
from app.config import settings
from app.logging_config import get_logger
from app.schemas.auth import LoginRequest, LoginResponse

router = APIRouter()
logger = get_logger("AUTH")


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, response: Response):
    """
    Exchange the admin key for a session

    The token is set as an HTTP-only cookie and also returned in the body
    for scripted clients.
    """
    if not credentials.admin_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin key is required"
        )

    if not verify_password(credentials.admin_key, settings.ADMIN_KEY_HASH):
        logger.warning("Rejected admin login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin key"
        )

    token = create_access_token({"isAdmin": True})
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.APP_ENV == "production",
        samesite="strict",
        max_age=settings.JWT_EXPIRATION_HOURS * 60 * 60,
        path="/",
    )
    logger.info("Admin logged in")

    return {
        "success": True,
        "message": "Login successful",
        "access_token": token,
    }


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie"""
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return {"success": True, "message": "Logged out successfully"}
