"""
Password hashing and session tokens.

Passwords are bcrypt-hashed; sessions are HS256 JWTs signed with
JWT_SECRET_KEY.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from contact_distributor.core.config import settings
from contact_distributor.core.logging import setup_logger

logger = setup_logger("INFO")

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    subject: Any,
    email: str,
    role: str = "admin",
    expires_hours: Optional[int] = None
) -> str:
    """
    Issue a signed session token.

    Args:
        subject: Admin user id
        email: Admin email
        role: Role claim
        expires_hours: Lifetime, defaults to JWT_EXPIRE_HOURS

    Returns:
        Encoded JWT
    """
    hours = expires_hours if expires_hours is not None else settings.JWT_EXPIRE_HOURS
    token_data = {
        "sub": str(subject),
        "email": email,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours)
    }
    return jwt.encode(token_data, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a session token.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed or the signature is wrong
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Dict[str, Any]:
    """FastAPI dependency: the caller must present a valid admin bearer token."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        logger.warning("Token verification failed: expired")
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")

    if payload.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")

    return payload
