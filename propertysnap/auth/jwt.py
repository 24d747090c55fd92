# auth/jwt.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from jwt import encode, decode, ExpiredSignatureError, InvalidTokenError
from uuid import uuid4
from propertysnap.config import settings
import logging

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

def create_access_token(data: Dict[str, Any], expires_delta: timedelta = None) -> str:
    """Issue a bearer token; `data` must carry `sub` (the user's email) and `role`."""
    try:
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode.update({"exp": expire, "jti": str(uuid4()), "type": "access"})
        return encode(to_encode, settings.JWT_SECRET, algorithm=ALGORITHM)
    except Exception as e:
        logger.error(f"Failed to create access token: {str(e)}")
        raise ValueError(f"Token creation failed: {str(e)}")

def decode_token(token: str) -> dict:
    try:
        payload = decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Attempt to use expired token")
        raise ValueError("Token expired")
    except InvalidTokenError:
        logger.warning("Attempt to use invalid token")
        raise ValueError("Invalid token")

    if payload.get("type") != "access" or not payload.get("sub"):
        logger.warning("Token is not an access token")
        raise ValueError("Invalid token")
    return payload
