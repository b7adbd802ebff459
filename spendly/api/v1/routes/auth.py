# spendly/api/v1/routes/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from spendly.api.deps import get_caller
from spendly.core.auth import authenticate_user, register_user
from spendly.core.database import get_async_session
from spendly.core.errors import NotFoundError
from spendly.core.identity import CallerIdentity
from spendly.crud.user import get_user_by_id, update_profile
from spendly.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserRead,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: RegisterRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """Create an account, seed the default categories and return a token"""
    user, token = await register_user(user_in, db)
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserRead.model_validate(user),
    )

@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
):
    user, token = await authenticate_user(credentials, db)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserRead.model_validate(user),
    )

@router.get("/profile", response_model=UserResponse)
async def read_own_profile(
    caller: CallerIdentity = Depends(get_caller),
    db: AsyncSession = Depends(get_async_session),
):
    """Get current user's profile"""
    user = await get_user_by_id(caller.user_id, db)
    if not user:
        raise NotFoundError("User not found")
    return UserResponse(user=UserRead.model_validate(user))

@router.put("/profile", response_model=UserResponse)
async def update_own_profile(
    profile_in: ProfileUpdate,
    caller: CallerIdentity = Depends(get_caller),
    db: AsyncSession = Depends(get_async_session),
):
    """Update name and/or preferences; omitted preference keys are kept"""
    user = await get_user_by_id(caller.user_id, db)
    if not user:
        raise NotFoundError("User not found")
    user = await update_profile(user, profile_in, db)
    return UserResponse(
        message="Profile updated successfully",
        user=UserRead.model_validate(user),
    )
