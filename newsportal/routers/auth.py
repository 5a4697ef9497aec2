from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsportal.database import get_db
from newsportal.dependencies import get_current_user_id
from newsportal.schemas import AuthResponse, LoginRequest, UserCreate, UserResponse
from newsportal.services import user_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_service.register_user(db, data)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await user_service.login_user(db, data)


@router.get("/me")
async def me(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    return {"user": UserResponse(**user)}
