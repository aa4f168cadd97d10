from fastapi import APIRouter, Depends, Response

from article_folder.dependencies import (
    get_aggregation_service,
    get_article_service,
    get_folder_service,
)
from article_folder.schemas import FolderCreate, FolderDeletable, FolderRead
from article_folder.services.aggregation_service import ArticleFolderService
from article_folder.services.article_service import ArticleService
from article_folder.services.folder_service import FolderService

router = APIRouter(prefix="/api/v1/folders", tags=["folders"])


@router.post("", status_code=201, response_model=FolderRead)
async def create_folder(data: FolderCreate, folders: FolderService = Depends(get_folder_service)):
    return await folders.create_folder(data)


@router.get("/{folder_id}", response_model=FolderRead)
async def get_folder(
    folder_id: int, service: ArticleFolderService = Depends(get_aggregation_service)
):
    return await service.validate_folder_exists(folder_id)


@router.get("/{folder_id}/deletable", response_model=FolderDeletable)
async def folder_deletable(
    folder_id: int, service: ArticleFolderService = Depends(get_aggregation_service)
):
    deletable, count = await service.can_delete_folder(folder_id)
    return FolderDeletable(deletable=deletable, article_count=count)


@router.delete("/{folder_id}", status_code=204)
async def delete_folder(
    folder_id: int,
    folders: FolderService = Depends(get_folder_service),
    articles: ArticleService = Depends(get_article_service),
):
    await folders.delete_folder(folder_id, article_counter=articles.count_by_folder)
    return Response(status_code=204)
