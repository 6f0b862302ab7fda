from fastapi import Depends, Request, HTTPException, status
from sqlmodel import Session
from database import get_session
from models import RevokedToken
from utils.jwt import verify_jwt


def bearer_token(request: Request) -> str:
    """
    Extract the bearer token from the Authorization header

    Raises:
        HTTPException: If the header is missing or malformed
    """
    auth_header = request.headers.get("Authorization")

    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header"
        )

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>"
        )

    return parts[1]


async def verify_jwt_middleware(request: Request, session: Session = Depends(get_session)):
    """
    Middleware to verify JWT token in Authorization header

    Args:
        request: FastAPI request object
        session: Database session, used for the revocation check

    Raises:
        HTTPException: If token is missing, invalid, expired or signed out
    """
    payload = verify_jwt(bearer_token(request))

    if not payload or session.get(RevokedToken, payload["jti"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )

    # Attach user info to request state
    request.state.user_id = payload.get("sub")
    request.state.user_email = payload.get("email")
    request.state.token_id = payload.get("jti")
    request.state.token_expires = payload.get("exp")
