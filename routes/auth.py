from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlmodel import Session, select
from datetime import datetime, timezone
import logging
import re
from database import get_session
from models import User, RevokedToken
from schemas import Credentials, UserResponse, SessionResponse, ApiResponse
from middleware.auth import verify_jwt_middleware
from utils.jwt import create_jwt, ACCESS_TOKEN_TTL_SECONDS
from utils.passwords import hash_password, verify_password, MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _issue_session(user: User) -> ApiResponse:
    session_data = SessionResponse(
        access_token=create_jwt(user.id, user.email),
        expires_in=ACCESS_TOKEN_TTL_SECONDS,
        user=UserResponse.model_validate(user),
    )
    return ApiResponse(success=True, data=session_data.model_dump(mode="json"))


@router.post("/auth/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(
    credentials: Credentials,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Create an account and sign it in

    Args:
        credentials: Email and password
        session: Database session

    Returns:
        ApiResponse with the new session
    """
    email = credentials.email.strip().lower()

    if not EMAIL_PATTERN.match(email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to validate email address: invalid format"
        )

    if len(credentials.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
        )

    if session.exec(select(User).where(User.email == email)).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already registered"
        )

    user = User(email=email, password_hash=hash_password(credentials.password))

    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info("Registered user %s", user.id)
    return _issue_session(user)


@router.post("/auth/signin")
async def sign_in(
    credentials: Credentials,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Exchange email and password for an access token

    Args:
        credentials: Email and password
        session: Database session

    Returns:
        ApiResponse with the new session
    """
    email = credentials.email.strip().lower()
    user = session.exec(select(User).where(User.email == email)).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid login credentials"
        )

    return _issue_session(user)


@router.post("/auth/signout", dependencies=[Depends(verify_jwt_middleware)])
async def sign_out(
    request: Request,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Revoke the access token used for this request

    Args:
        request: FastAPI request (contains authenticated user info)
        session: Database session

    Returns:
        ApiResponse with success message
    """
    expires = request.state.token_expires
    session.add(RevokedToken(
        jti=request.state.token_id,
        user_id=request.state.user_id,
        expires_at=datetime.fromtimestamp(expires, timezone.utc) if expires else None
    ))
    session.commit()

    return ApiResponse(
        success=True,
        data={"message": "Signed out"}
    )


@router.get("/auth/user", dependencies=[Depends(verify_jwt_middleware)])
async def current_user(
    request: Request,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Get the authenticated identity

    Args:
        request: FastAPI request (contains authenticated user info)
        session: Database session

    Returns:
        ApiResponse with user details
    """
    user = session.get(User, request.state.user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return ApiResponse(
        success=True,
        data=UserResponse.model_validate(user).model_dump(mode="json")
    )
