from fastapi import APIRouter, Depends, Query, Response

from article_folder.dependencies import (
    PaginationParams,
    get_aggregation_service,
    get_article_service,
)
from article_folder.schemas import (
    ArticleCreate,
    ArticleRead,
    ArticleWithFolder,
    MoveArticleRequest,
    PageResultWithFolder,
)
from article_folder.services.aggregation_service import ArticleFolderService
from article_folder.services.article_service import ArticleService

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])


@router.get("", response_model=PageResultWithFolder)
async def list_articles(
    pagination: PaginationParams = Depends(),
    owner_id: int | None = None,
    owner_type: str = "",
    article_type: str = "",
    title: str = "",
    folder_id: int | None = Query(None, description="Include articles anywhere in this folder's subtree."),
    service: ArticleFolderService = Depends(get_aggregation_service),
):
    return await service.list_articles_with_folder(
        pagination.page,
        pagination.size,
        owner_id=owner_id,
        owner_type=owner_type,
        article_type=article_type,
        title=title,
        folder_id=folder_id,
    )


@router.get("/{article_id}", response_model=ArticleWithFolder)
async def get_article(
    article_id: int, service: ArticleFolderService = Depends(get_aggregation_service)
):
    return await service.get_article_with_folder(article_id)


@router.post("", status_code=201, response_model=ArticleRead)
async def create_article(
    data: ArticleCreate,
    articles: ArticleService = Depends(get_article_service),
    service: ArticleFolderService = Depends(get_aggregation_service),
):
    if data.folder_id is not None:
        await service.validate_folder_exists(data.folder_id)
    return await articles.create_article(data)


@router.put("/{article_id}/folder", status_code=204)
async def move_article(
    article_id: int,
    data: MoveArticleRequest,
    service: ArticleFolderService = Depends(get_aggregation_service),
):
    await service.move_article_to_folder(article_id, data.folder_id)
    return Response(status_code=204)
