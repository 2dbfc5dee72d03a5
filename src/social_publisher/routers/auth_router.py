# src/social_publisher/routers/auth_router.py
from datetime import datetime
import os
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from ..dependencies.db import get_session_dep
from ..UAA.repository import UserRepository
from ..UAA.schemas import LoginRequest, Token, UserCreate, UserRead
from ..UAA.services import AuthenticationError, UserService

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

# cookie config (in prod set secure=True)
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")
REFRESH_COOKIE = "refresh_token"

optional_bearer = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _token_response(response: Response, tokens: dict) -> dict:
    refresh = tokens["refresh"]
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh["token"],
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
        max_age=max(0, refresh["exp"] - int(datetime.utcnow().timestamp())),
    )
    access = tokens["access"]
    return {"access_token": access["token"], "token_type": "bearer", "expires_in": access["exp"]}


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, session: AsyncSession = Depends(get_session_dep)):
    svc = UserService(UserRepository(session))
    try:
        return await svc.register_user(user_in)
    except ValueError as e:
        logger.info("register_validation_failed", error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/login", response_model=Token)
async def login(form: LoginRequest, response: Response, session: AsyncSession = Depends(get_session_dep)):
    """
    Returns the access token in the body and sets the refresh token as an HttpOnly cookie.
    """
    svc = UserService(UserRepository(session))
    try:
        user = await svc.authenticate_user(form.email, form.password)
    except AuthenticationError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _token_response(response, await svc.issue_tokens(str(user.id)))


@router.post("/refresh", response_model=Token)
async def refresh(response: Response, refresh_token: Optional[str] = Cookie(None)):
    if not refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing refresh token")
    try:
        tokens = await UserService().refresh_tokens(refresh_token)
    except AuthenticationError as e:
        logger.warning("refresh_failed", reason=str(e))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    return _token_response(response, tokens)


@router.post("/logout")
async def logout(
    response: Response,
    access_token: Optional[str] = Depends(optional_bearer),
    refresh_token: Optional[str] = Cookie(None),
):
    await UserService().logout(access_token=access_token, refresh_token=refresh_token)
    response.delete_cookie(REFRESH_COOKIE)
    return {"ok": True}
