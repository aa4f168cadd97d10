from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from article_folder.database import get_db
from article_folder.models import Article, Folder
from article_folder.schemas import MetricsResponse
from article_folder.cache import cache

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):

    total_articles = (await db.execute(select(func.count()).select_from(Article))).scalar_one()

    total_folders = (await db.execute(select(func.count()).select_from(Folder))).scalar_one()

    unfiled_articles = (
        await db.execute(
            select(func.count()).select_from(Article).where(Article.folder_id.is_(None))
        )
    ).scalar_one()

    return MetricsResponse(
        total_articles=total_articles,
        total_folders=total_folders,
        unfiled_articles=unfiled_articles,
        cache_info=cache.stats,
    )
