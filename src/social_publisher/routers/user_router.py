# src/social_publisher/routers/user_router.py
from fastapi import APIRouter, Depends

from social_publisher.dependencies.auth import get_current_user
from social_publisher.UAA.schemas import UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
async def me(current_user=Depends(get_current_user)):
    return current_user
