"""
Folder service — the folder domain's provider.

The hierarchy is stored as a materialized path on every folder
(``/<root id>/.../<own id>/``), which makes both hierarchy questions the
aggregation layer asks single-statement lookups:

- descendants of F: every folder whose path starts with F's path.  F's
  own path matches, so F is always part of its descendant set.
- ancestors of F: the ids encoded in F's path, root first and F last.

Missing folders raise ``FolderNotFoundError``.
"""
import logging
from collections.abc import Awaitable, Callable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from article_folder.errors import (
    FolderHasArticlesError,
    FolderHasChildrenError,
    FolderNotFoundError,
)
from article_folder.models import Folder
from article_folder.schemas import FolderCreate, FolderRead

logger = logging.getLogger(__name__)


def path_ids(path: str) -> list[int]:
    """Return the folder ids encoded in a materialized *path*, root first."""
    return [int(part) for part in path.strip("/").split("/") if part]


class FolderService:
    """Folder provider bound to one request's session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get(self, folder_id: int) -> Folder:
        folder = await self.db.get(Folder, folder_id)
        if folder is None:
            raise FolderNotFoundError(folder_id)
        return folder

    async def get_folder(self, folder_id: int) -> FolderRead:
        return FolderRead.model_validate(await self._get(folder_id))

    async def get_descendant_ids(self, folder_id: int) -> list[int]:
        """Ids of *folder_id* and every folder nested beneath it."""
        folder = await self._get(folder_id)
        q = select(Folder.id).where(Folder.path.startswith(folder.path)).order_by(Folder.id)
        return list((await self.db.execute(q)).scalars().all())

    async def get_ancestors(self, folder_id: int) -> list[FolderRead]:
        """The chain from the hierarchy root down to *folder_id*, inclusive."""
        folder = await self._get(folder_id)
        ids = path_ids(folder.path)
        result = await self.db.execute(select(Folder).where(Folder.id.in_(ids)))
        by_id = {f.id: f for f in result.scalars().all()}
        return [FolderRead.model_validate(by_id[i]) for i in ids if i in by_id]

    async def create_folder(self, data: FolderCreate) -> FolderRead:
        parent_path = "/"
        if data.parent_id is not None:
            parent_path = (await self._get(data.parent_id)).path

        folder = Folder(name=data.name, parent_id=data.parent_id, path="")
        self.db.add(folder)
        # The id is only known after the INSERT, and the path ends with it.
        await self.db.flush()
        folder.path = f"{parent_path}{folder.id}/"
        await self.db.flush()
        await self.db.refresh(folder)
        return FolderRead.model_validate(folder)

    async def delete_folder(
        self,
        folder_id: int,
        article_counter: Callable[[int], Awaitable[int]],
    ) -> None:
        """
        Delete an empty leaf folder.

        *article_counter* reports how many articles are filed in a folder;
        the folder domain does not know about articles itself, so the
        caller supplies the count source.
        """
        folder = await self._get(folder_id)

        children_q = select(func.count()).select_from(Folder).where(Folder.parent_id == folder_id)
        if (await self.db.execute(children_q)).scalar_one() > 0:
            raise FolderHasChildrenError(folder_id)

        article_count = await article_counter(folder_id)
        if article_count > 0:
            raise FolderHasArticlesError(folder_id, article_count)

        path = folder.path
        await self.db.delete(folder)
        await self.db.flush()
        logger.info("Deleted folder id=%d path=%s", folder_id, path)
