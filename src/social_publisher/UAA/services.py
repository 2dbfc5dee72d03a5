# src/social_publisher/UAA/services.py
from typing import Optional
import structlog

from .models import User
from .repository import UserRepository
from .schemas import UserCreate
from . import utils

logger = structlog.get_logger(__name__)


class AuthenticationError(Exception):
    pass


class UserService:
    def __init__(self, repo: Optional[UserRepository] = None):
        self.repo = repo

    async def register_user(self, user_in: UserCreate) -> User:
        utils.assert_password_policy(user_in.password)
        email = user_in.email.lower()
        if await self.repo.get_by_email(email):
            raise ValueError("email already registered")
        if await self.repo.get_by_username(user_in.username):
            raise ValueError("username already taken")

        user = await self.repo.save(
            User(email=email, username=user_in.username, hashed_password=utils.hash_password(user_in.password))
        )
        logger.info("user_registered", user_id=str(user.id))
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        user = await self.repo.get_by_email(email)
        if not user or not utils.verify_password(password, user.hashed_password):
            logger.info("auth_failed", email=email)
            raise AuthenticationError("invalid credentials")
        if not user.is_active:
            raise AuthenticationError("user is inactive")
        await self.repo.touch_last_login(user)
        logger.info("auth_success", user_id=str(user.id))
        return user

    async def issue_tokens(self, user_id: str) -> dict:
        access = utils.create_access_token(user_id)
        refresh = utils.create_refresh_token(user_id)
        await utils.store_refresh_jti(refresh["jti"], user_id, refresh["exp"])
        logger.info("tokens_issued", user_id=user_id, refresh_jti=refresh["jti"])
        return {"access": access, "refresh": refresh}

    async def refresh_tokens(self, refresh_token: str) -> dict:
        claims = utils.try_decode(refresh_token, utils.REFRESH)
        if not claims:
            raise AuthenticationError("invalid refresh token")
        if not await utils.is_refresh_valid(claims["jti"]):
            logger.warning("refresh_token_revoked", jti=claims["jti"])
            raise AuthenticationError("refresh token revoked or invalid")

        await utils.revoke_refresh_jti(claims["jti"])
        return await self.issue_tokens(claims["sub"])

    async def logout(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> None:
        refresh_claims = utils.try_decode(refresh_token, utils.REFRESH)
        if refresh_claims:
            await utils.revoke_refresh_jti(refresh_claims["jti"])

        access_claims = utils.try_decode(access_token, utils.ACCESS)
        if access_claims:
            await utils.blacklist_access_jti(access_claims["jti"], access_claims["exp"])
