"""
Article/folder aggregation service — composes the two independently
owned domains into the views presentation clients need.

Design notes
------------
- Reads split into a primary entity (the article, or the page of
  articles) and an optional enrichment (folder info with breadcrumb).
  The primary fetch is fail-fast: provider errors propagate untouched.
  Enrichment is best-effort: any failure turns into ``folder=None`` or
  an empty breadcrumb, which is what callers and tests observe.
- A folder-scoped listing covers the folder's whole subtree.  If the
  subtree cannot be resolved, the listing narrows to the single folder
  instead of failing.
- Folder info for a page is resolved once per distinct folder id, and
  each id succeeds or fails on its own.
- Nothing is cached here; breadcrumbs always reflect the folder tree as
  it is when the request runs.
"""
import logging
from collections.abc import Iterable
from typing import Protocol

from article_folder.schemas import (
    ArticleRead,
    ArticleWithFolder,
    BreadcrumbItem,
    FolderInfo,
    FolderRead,
    PageResult,
    PageResultWithFolder,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider contracts
# ---------------------------------------------------------------------------

class ArticleProvider(Protocol):
    async def get_article(self, article_id: int) -> ArticleRead: ...

    async def list_articles(
        self,
        page: int,
        size: int,
        owner_id: int | None = None,
        owner_type: str | None = None,
        article_type: str | None = None,
        title: str | None = None,
        folder_id: int | None = None,
    ) -> PageResult: ...

    async def list_articles_by_folder_ids(
        self,
        page: int,
        size: int,
        owner_id: int | None = None,
        owner_type: str | None = None,
        article_type: str | None = None,
        title: str | None = None,
        folder_ids: Iterable[int] = (),
    ) -> PageResult: ...

    async def move_to_folder(self, article_id: int, folder_id: int | None) -> None: ...

    async def count_by_folder(self, folder_id: int) -> int: ...


class FolderProvider(Protocol):
    async def get_folder(self, folder_id: int) -> FolderRead: ...

    async def get_descendant_ids(self, folder_id: int) -> list[int]: ...

    async def get_ancestors(self, folder_id: int) -> list[FolderRead]: ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _with_folder(article: ArticleRead, folder: FolderInfo | None) -> ArticleWithFolder:
    # Built from a dump so the result never shares state with the provider's record.
    return ArticleWithFolder(**article.model_dump(), folder=folder)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class ArticleFolderService:
    def __init__(self, articles: ArticleProvider, folders: FolderProvider) -> None:
        self.articles = articles
        self.folders = folders

    async def get_article_with_folder(self, article_id: int) -> ArticleWithFolder:
        """
        Return the article with its folder context attached.

        Raises whatever the article provider raises when the article
        cannot be fetched.  Folder context is attached only when the
        article is filed and its folder resolves.
        """
        article = await self.articles.get_article(article_id)

        folder = None
        if article.folder_id is not None:
            folder = await self._try_folder_info(article.folder_id)
        return _with_folder(article, folder)

    async def list_articles_with_folder(
        self,
        page: int,
        size: int,
        owner_id: int | None = None,
        owner_type: str = "",
        article_type: str = "",
        title: str = "",
        folder_id: int | None = None,
    ) -> PageResultWithFolder:
        """
        Return one page of articles, each with its folder context.

        With *folder_id* set, the page covers articles filed anywhere in
        that folder's subtree.  The envelope fields are copied from the
        article provider's page unchanged.
        """
        filters = (owner_id, owner_type, article_type, title)

        if folder_id is None:
            result = await self.articles.list_articles(page, size, *filters, folder_id=None)
        else:
            descendant_ids = await self._descendant_ids_or_none(folder_id)
            if descendant_ids is None:
                result = await self.articles.list_articles(page, size, *filters, folder_id=folder_id)
            else:
                result = await self.articles.list_articles_by_folder_ids(
                    page, size, *filters, folder_ids=descendant_ids
                )

        folder_ids = {a.folder_id for a in result.records if a.folder_id is not None}
        folder_map = await self._batch_folder_info(folder_ids)

        records = [_with_folder(a, folder_map.get(a.folder_id)) for a in result.records]
        return PageResultWithFolder(records=records, **result.model_dump(exclude={"records"}))

    async def move_article_to_folder(self, article_id: int, folder_id: int | None) -> None:
        """
        File the article under *folder_id*, or unfile it when None.

        The target folder is checked first so an article never ends up
        pointing at a folder that does not exist; the folder provider's
        error is raised as-is and the article is left untouched.
        """
        if folder_id is not None:
            await self.folders.get_folder(folder_id)
        await self.articles.move_to_folder(article_id, folder_id)

    async def validate_folder_exists(self, folder_id: int) -> FolderRead:
        return await self.folders.get_folder(folder_id)

    async def can_delete_folder(self, folder_id: int) -> tuple[bool, int]:
        """Return ``(deletable, article_count)``; deletable iff no article is filed there."""
        count = await self.articles.count_by_folder(folder_id)
        return count == 0, count

    # ------------------------------------------------------------------
    # Folder resolution
    # ------------------------------------------------------------------

    async def _descendant_ids_or_none(self, folder_id: int) -> list[int] | None:
        try:
            return await self.folders.get_descendant_ids(folder_id)
        except Exception as exc:
            logger.debug(
                "Descendant lookup failed for folder_id=%d, scoping to the folder alone: %s",
                folder_id,
                exc,
            )
            return None

    async def _folder_info(self, folder_id: int) -> FolderInfo:
        """
        Resolve the folder and its breadcrumb.

        Fails if the folder itself cannot be fetched.  A failed ancestor
        lookup still yields the folder, with an empty breadcrumb.
        """
        folder = await self.folders.get_folder(folder_id)

        try:
            ancestors = await self.folders.get_ancestors(folder_id)
        except Exception as exc:
            logger.debug("Ancestor lookup failed for folder_id=%d: %s", folder_id, exc)
            ancestors = []

        # Ancestors already end with the folder itself.
        breadcrumb = [BreadcrumbItem(id=a.id, name=a.name) for a in ancestors]
        return FolderInfo(id=folder.id, name=folder.name, path=folder.path, breadcrumb=breadcrumb)

    async def _try_folder_info(self, folder_id: int) -> FolderInfo | None:
        try:
            return await self._folder_info(folder_id)
        except Exception as exc:
            logger.debug("Folder info unavailable for folder_id=%d: %s", folder_id, exc)
            return None

    async def _batch_folder_info(self, folder_ids: set[int]) -> dict[int, FolderInfo]:
        # Sequential: the providers share one database session per request.
        result: dict[int, FolderInfo] = {}
        for folder_id in folder_ids:
            info = await self._try_folder_info(folder_id)
            if info is not None:
                result[folder_id] = info
        return result
