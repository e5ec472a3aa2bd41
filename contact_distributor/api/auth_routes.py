"""
Admin authentication.
Credentials are checked against the admin_users table.
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
import jwt
from contact_distributor.core.db.repository import AdminUserRepository
from contact_distributor.core.logging import setup_logger
from contact_distributor.core.security import (
    create_access_token,
    decode_access_token,
    verify_password,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])
logger = setup_logger("INFO")


class LoginRequest(BaseModel):
    """Login request model"""
    email: str
    password: str


class LoginResponse(BaseModel):
    """Login response model"""
    access_token: str
    token_type: str
    role: str
    email: str


class TokenVerifyRequest(BaseModel):
    """Token verification request"""
    token: str


class TokenVerifyResponse(BaseModel):
    """Token verification response"""
    valid: bool
    role: str | None = None
    email: str | None = None


@router.post("/login", response_model=LoginResponse)
async def admin_login(request: LoginRequest):
    """
    Admin login endpoint.

    Returns a JWT valid for JWT_EXPIRE_HOURS.
    """
    logger.info(f"Login attempt for user: {request.email}")

    try:
        admin = await AdminUserRepository.get_by_email(request.email)
    except Exception as e:
        logger.error(f"Login lookup failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Login temporarily unavailable")

    if admin is None or not verify_password(request.password, admin.password_hash):
        logger.warning(f"Failed login attempt for: {request.email}")
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials"
        )

    token = create_access_token(admin.id, admin.email, admin.role)

    logger.info(f"Successful login for admin: {admin.email}")

    return {
        "access_token": token,
        "token_type": "bearer",
        "role": admin.role,
        "email": admin.email
    }


@router.post("/verify", response_model=TokenVerifyResponse)
async def verify_token(request: TokenVerifyRequest):
    """
    Verify JWT token validity.

    Returns user role and email if valid.
    """
    try:
        payload = decode_access_token(request.token)

        return {
            "valid": True,
            "role": payload.get("role"),
            "email": payload.get("email")
        }

    except jwt.ExpiredSignatureError:
        logger.warning("Token verification failed: expired")
        raise HTTPException(
            status_code=401,
            detail="Token expired"
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"Token verification failed: {str(e)}")
        raise HTTPException(
            status_code=401,
            detail="Invalid token"
        )
