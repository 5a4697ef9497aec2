from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from newsportal.database import get_db
from newsportal.dependencies import NewsListParams, PageParams, get_current_user_id
from newsportal.schemas import Language, NewsCreate, NewsUpdate
from newsportal.services import news_service

router = APIRouter(prefix="/api/v1/news", tags=["news"])


@router.get("")
async def list_news(params: NewsListParams = Depends(), db: AsyncSession = Depends(get_db)):
    return await news_service.get_news_list(db, params.to_options())


@router.get("/search")
async def search_news(
    q: str = Query("", description="Search term (title or content)."),
    params: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await news_service.search_news(db, q, params.page, params.limit, params.lang)


@router.get("/category/{slug}")
async def list_news_by_category(slug: str, params: PageParams = Depends(), db: AsyncSession = Depends(get_db)):
    return await news_service.get_news_by_category_slug(db, slug, params.page, params.limit, params.lang)


@router.get("/{news_id}")
async def get_news(news_id: int, lang: Language = Language.RU, db: AsyncSession = Depends(get_db)):
    return {"news": await news_service.get_news(db, news_id, lang)}


@router.post("", status_code=201)
async def create_news(
    data: NewsCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return {"news": await news_service.create_news(db, data, user_id)}


@router.put("/{news_id}")
async def update_news(
    news_id: int,
    data: NewsUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return {"news": await news_service.update_news(db, news_id, data, user_id)}


@router.delete("/{news_id}")
async def delete_news(
    news_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await news_service.delete_news(db, news_id, user_id)
    return {"message": "News deleted"}
