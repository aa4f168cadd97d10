from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from article_folder.config import settings
from article_folder.database import get_db
from article_folder.services.aggregation_service import ArticleFolderService
from article_folder.services.article_service import ArticleService
from article_folder.services.folder_service import FolderService


class PaginationParams:
    """
    Reusable FastAPI dependency that parses the paging query parameters.

    Attributes
    ----------
    page:
        1-based page number (minimum 1).
    size:
        Number of records per page, clamped to ``settings.MAX_PAGE_SIZE``
        regardless of the value supplied by the caller.
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number (1-based)."),
        size: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            description="Number of records per page.",
        ),
    ) -> None:
        self.page = page
        self.size = min(size, settings.MAX_PAGE_SIZE)


def get_article_service(db: AsyncSession = Depends(get_db)) -> ArticleService:
    return ArticleService(db)


def get_folder_service(db: AsyncSession = Depends(get_db)) -> FolderService:
    return FolderService(db)


def get_aggregation_service(
    articles: ArticleService = Depends(get_article_service),
    folders: FolderService = Depends(get_folder_service),
) -> ArticleFolderService:
    # FastAPI caches get_db per request, so both providers share one session.
    return ArticleFolderService(articles, folders)
