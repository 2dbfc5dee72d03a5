# src/social_publisher/UAA/utils.py
import os
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import structlog
import redis.asyncio as aioredis
from passlib.context import CryptContext
from jose import jwt, JWTError

logger = structlog.get_logger(__name__)

# Config (env)
SECRET_KEY = os.getenv("SECRET_KEY", "change_me_now")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "30"))
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

ACCESS = "access"
REFRESH = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
redis_client = aioredis.from_url(REDIS_URL, decode_responses=True)


# --- passwords ---
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError as e:
        logger.warning("password_verify_failed", error=str(e))
        return False


def assert_password_policy(password: str) -> None:
    if len(password) < 8:
        raise ValueError("password must be at least 8 characters")
    if not any(c.isdigit() for c in password):
        raise ValueError("password must include a digit")
    if not any(c.isalpha() for c in password):
        raise ValueError("password must include a letter")


# --- JWT ---
def _now_ts() -> int:
    return int(datetime.utcnow().timestamp())


def _create_token(subject: str, token_type: str, lifetime: timedelta) -> Dict[str, Any]:
    jti = str(uuid.uuid4())
    exp = int((datetime.utcnow() + lifetime).timestamp())
    claims = {"sub": subject, "exp": exp, "jti": jti, "type": token_type, "iat": _now_ts()}
    token = jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)
    logger.debug("token_created", sub=subject, type=token_type, jti=jti, exp=exp)
    return {"token": token, "jti": jti, "exp": exp}


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> Dict[str, Any]:
    return _create_token(subject, ACCESS, expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(subject: str, expires_delta: Optional[timedelta] = None) -> Dict[str, Any]:
    return _create_token(subject, REFRESH, expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info("token_decode_failed", error=str(e))
        raise


def try_decode(token: Optional[str], token_type: str) -> Optional[Dict[str, Any]]:
    if not token:
        return None
    try:
        claims = decode_token(token)
    except JWTError:
        return None
    return claims if claims.get("type") == token_type else None


# --- redis: access blacklist, refresh allow-list ---
def _ttl(expires_at_ts: int) -> int:
    return max(0, expires_at_ts - _now_ts())


async def blacklist_access_jti(jti: str, expires_at_ts: int) -> None:
    ttl = _ttl(expires_at_ts)
    if ttl:
        await redis_client.set(f"bl:{jti}", "1", ex=ttl)
        logger.info("access_jti_blacklisted", jti=jti, ttl=ttl)


async def is_access_jti_blacklisted(jti: str) -> bool:
    return await redis_client.exists(f"bl:{jti}") == 1


async def store_refresh_jti(jti: str, user_id: str, expires_at_ts: int) -> None:
    ttl = _ttl(expires_at_ts)
    if not ttl:
        raise ValueError("refresh token already expired")
    await redis_client.set(f"rt:{jti}", user_id, ex=ttl)


async def is_refresh_valid(jti: str) -> bool:
    return await redis_client.exists(f"rt:{jti}") == 1


async def revoke_refresh_jti(jti: str) -> None:
    await redis_client.delete(f"rt:{jti}")
    logger.info("refresh_jti_revoked", jti=jti)
