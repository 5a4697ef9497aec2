from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsportal.database import get_db
from newsportal.dependencies import get_current_user_id
from newsportal.schemas import CategoryCreate, CategoryUpdate, Language
from newsportal.services import category_service

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("")
async def list_categories(lang: Language = Language.RU, db: AsyncSession = Depends(get_db)):
    return {"categories": await category_service.get_categories(db, lang)}


@router.get("/{slug}")
async def get_category(slug: str, lang: Language = Language.RU, db: AsyncSession = Depends(get_db)):
    return {"category": await category_service.get_category_by_slug(db, slug, lang)}


# Categories have no owner; any authenticated user may manage them.

@router.post("", status_code=201)
async def create_category(
    data: CategoryCreate,
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return {"category": await category_service.create_category(db, data)}


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return {"category": await category_service.update_category(db, category_id, data)}


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await category_service.delete_category(db, category_id)
    return {"message": "Category deleted"}
