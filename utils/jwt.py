import jwt
import logging
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("AUTH_SECRET")

if not SECRET_KEY:
    raise ValueError("AUTH_SECRET environment variable is not set")

ALGORITHM = "HS256"
ACCESS_TOKEN_TTL_SECONDS = int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "3600"))


def create_jwt(user_id: str, email: str) -> str:
    """
    Issue a signed access token for a user

    Args:
        user_id: Subject of the token
        email: User email, copied into the payload

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(seconds=ACCESS_TOKEN_TTL_SECONDS),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify JWT token and return payload

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        return jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp", "jti"]},
        )
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected token: %s", exc)
        return None
