# src/social_publisher/routers/accounts_router.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from social_publisher.dependencies.auth import get_current_user
from social_publisher.dependencies.db import get_session_dep
from social_publisher.errors import ValidationError
from social_publisher.infrastructure.accounts_repo import AccountsRepository
from social_publisher.models.platform import platform_catalog
from social_publisher.schemas.account_schema import AccountCreate, AccountRead, PlatformRead

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/platforms", response_model=List[PlatformRead])
async def list_platforms():
    return platform_catalog()


@router.get("/", response_model=List[AccountRead])
async def list_accounts(session: AsyncSession = Depends(get_session_dep), current_user=Depends(get_current_user)):
    return await AccountsRepository(session).list_by_user(current_user.id)


@router.post("/", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
async def create_account(
    payload: AccountCreate,
    session: AsyncSession = Depends(get_session_dep),
    current_user=Depends(get_current_user),
):
    username = (payload.username or "").strip()
    if payload.platform is None or not username:
        raise ValidationError("Platform and username are required")

    repo = AccountsRepository(session)
    return await repo.create(
        user_id=current_user.id,
        platform=payload.platform,
        username=username,
        profile_url=payload.profile_url or None,
    )
