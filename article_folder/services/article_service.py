"""
Article service — the article domain's provider.

Design notes
------------
- Owns every piece of listing arithmetic: filtering, ordering,
  LIMIT/OFFSET and the page envelope flags.  The aggregation layer copies
  the envelope through verbatim.
- Detail and list reads go through the cache-aside pattern (Redis →
  fallback to DB).  List keys encode every filter, including the sorted
  folder-id set, so a page is never served for a different scope.
- Writes flush but do not commit; the transaction boundary is owned by
  the ``get_db`` dependency in the router layer.
- A missing article is reported by raising ``ArticleNotFoundError``
  rather than returning None, so callers further up can tell "absent"
  apart from other failures by type.
"""
import json
import math
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from article_folder.cache import DETAIL_KEY_PREFIX, LIST_KEY_PREFIX, cache
from article_folder.config import settings
from article_folder.errors import ArticleNotFoundError
from article_folder.models import Article
from article_folder.schemas import ArticleCreate, ArticleRead, PageResult

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _apply_filters(
    stmt,
    owner_id: int | None,
    owner_type: str | None,
    article_type: str | None,
    title: str | None,
):
    """Narrow *stmt* by every non-empty filter.  Empty strings mean "any"."""
    if owner_id is not None:
        stmt = stmt.where(Article.owner_id == owner_id)
    if owner_type:
        stmt = stmt.where(Article.owner_type == owner_type)
    if article_type:
        stmt = stmt.where(Article.article_type == article_type)
    if title:
        stmt = stmt.where(Article.title.ilike(f"%{title}%"))
    return stmt


def _normalise_paging(page: int, size: int) -> tuple[int, int]:
    page = max(page, 1)
    if size < 1:
        size = settings.DEFAULT_PAGE_SIZE
    return page, min(size, settings.MAX_PAGE_SIZE)


def build_page(records: list[ArticleRead], total: int, page: int, size: int) -> PageResult:
    """Assemble the page envelope for *records* (1-based *page*)."""
    pages = math.ceil(total / size) if total > 0 else 0
    return PageResult(
        records=records,
        total=total,
        size=size,
        current=page,
        pages=pages,
        has_previous=page > 1,
        has_next=page < pages,
        is_first=page == 1,
        is_last=page >= pages,
    )


def _list_cache_key(page, size, owner_id, owner_type, article_type, title, scope) -> str:
    # Free-text filters may contain the ":" separator, so they are JSON-encoded.
    filters = json.dumps([owner_id, owner_type or "", article_type or "", title or "", scope])
    return f"{LIST_KEY_PREFIX}:{page}:{size}:{filters}"


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class ArticleService:
    """Article provider bound to one request's session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_article(self, article_id: int) -> ArticleRead:
        cache_key = f"{DETAIL_KEY_PREFIX}:{article_id}"
        cached = await cache.get(cache_key)
        if cached:
            return ArticleRead.model_validate(cached)

        article = await self.db.get(Article, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)

        data = ArticleRead.model_validate(article)
        await cache.set(cache_key, data.model_dump(mode="json"), ttl=settings.CACHE_TTL_DETAIL)
        return data

    async def list_articles(
        self,
        page: int,
        size: int,
        owner_id: int | None = None,
        owner_type: str | None = None,
        article_type: str | None = None,
        title: str | None = None,
        folder_id: int | None = None,
    ) -> PageResult:
        """
        Return one page of articles matching the filters, newest first.

        *folder_id* restricts the page to articles filed directly in that
        folder; None leaves articles from every folder (and unfiled ones)
        in scope.
        """
        folder_ids = [folder_id] if folder_id is not None else None
        scope = f"f{folder_id}" if folder_id is not None else "all"
        return await self._list(
            page, size, owner_id, owner_type, article_type, title, folder_ids, scope
        )

    async def list_articles_by_folder_ids(
        self,
        page: int,
        size: int,
        owner_id: int | None = None,
        owner_type: str | None = None,
        article_type: str | None = None,
        title: str | None = None,
        folder_ids: Iterable[int] = (),
    ) -> PageResult:
        """Like ``list_articles`` but scoped to any folder in *folder_ids*."""
        folder_ids = sorted(set(folder_ids))
        scope = "fs" + ",".join(str(fid) for fid in folder_ids)
        return await self._list(
            page, size, owner_id, owner_type, article_type, title, folder_ids, scope
        )

    async def _list(
        self,
        page: int,
        size: int,
        owner_id: int | None,
        owner_type: str | None,
        article_type: str | None,
        title: str | None,
        folder_ids: list[int] | None,
        scope: str,
    ) -> PageResult:
        page, size = _normalise_paging(page, size)
        cache_key = _list_cache_key(page, size, owner_id, owner_type, article_type, title, scope)
        cached = await cache.get(cache_key)
        if cached:
            return PageResult.model_validate(cached)

        # 1. Total count
        count_q = _apply_filters(
            select(func.count()).select_from(Article), owner_id, owner_type, article_type, title
        )
        # 2. Page rows
        rows_q = _apply_filters(select(Article), owner_id, owner_type, article_type, title)
        if folder_ids is not None:
            count_q = count_q.where(Article.folder_id.in_(folder_ids))
            rows_q = rows_q.where(Article.folder_id.in_(folder_ids))

        total: int = (await self.db.execute(count_q)).scalar_one()
        rows_q = (
            rows_q.order_by(Article.created_at.desc(), Article.id.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
        articles = (await self.db.execute(rows_q)).scalars().all()

        result = build_page([ArticleRead.model_validate(a) for a in articles], total, page, size)
        await cache.set(cache_key, result.model_dump(mode="json"), ttl=settings.CACHE_TTL_LIST)
        return result

    async def create_article(self, data: ArticleCreate) -> ArticleRead:
        article = Article(**data.model_dump())
        self.db.add(article)
        await self.db.flush()
        await self.db.refresh(article)
        await cache.invalidate_articles()
        return ArticleRead.model_validate(article)

    async def move_to_folder(self, article_id: int, folder_id: int | None) -> None:
        """File *article_id* under *folder_id*, or unfile it when None."""
        article = await self.db.get(Article, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)

        article.folder_id = folder_id
        await self.db.flush()
        # updated_at is set server-side; reload it before the object is read again.
        await self.db.refresh(article)
        await cache.invalidate_articles(article_id)

    async def count_by_folder(self, folder_id: int) -> int:
        """Number of articles filed directly in *folder_id*."""
        q = select(func.count()).select_from(Article).where(Article.folder_id == folder_id)
        return (await self.db.execute(q)).scalar_one()
