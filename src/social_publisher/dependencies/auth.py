# src/social_publisher/dependencies/auth.py
import uuid

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from social_publisher.dependencies.db import get_session_dep
from social_publisher.errors import AuthError, NotFoundError
from social_publisher.UAA import utils
from social_publisher.UAA.models import User
from social_publisher.UAA.repository import UserRepository

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session_dep),
) -> User:
    """
    Resolve the bearer token to a stored user.
    Bad or revoked token -> 401; token for a user that no longer exists -> 404.
    """
    claims = utils.try_decode(token, utils.ACCESS)
    if not claims:
        raise AuthError("Unauthorized")
    if await utils.is_access_jti_blacklisted(claims.get("jti", "")):
        raise AuthError("token revoked")
    try:
        user_id = uuid.UUID(str(claims.get("sub")))
    except ValueError:
        raise AuthError("Unauthorized")

    user = await UserRepository(session).get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
