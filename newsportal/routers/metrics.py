from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from newsportal.cache import cache
from newsportal.database import get_db
from newsportal.models import Category, News, User
from newsportal.schemas import MetricsResponse

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


async def _count(db: AsyncSession, model, *predicates) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*predicates))).scalar_one()


@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):
    total_news = await _count(db, News)
    published_news = await _count(db, News, News.published_at.is_not(None))

    return MetricsResponse(
        total_news=total_news,
        published_news=published_news,
        draft_news=total_news - published_news,
        flash_news=await _count(db, News, News.is_flash.is_(True), News.published_at.is_not(None)),
        total_categories=await _count(db, Category),
        total_users=await _count(db, User),
        cache_info=cache.stats,
    )
