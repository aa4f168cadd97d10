"""
Provider tests — the article and folder services against a real (SQLite)
database, plus the aggregation service wired to both.
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from article_folder.errors import (
    ArticleNotFoundError,
    FolderHasArticlesError,
    FolderHasChildrenError,
    FolderNotFoundError,
)
from article_folder.schemas import ArticleCreate, FolderCreate
from article_folder.services.aggregation_service import ArticleFolderService
from article_folder.services.article_service import ArticleService, build_page
from article_folder.services.folder_service import FolderService, path_ids


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _tree(db: AsyncSession) -> dict[str, int]:
    """Docs > Guides > Python, Docs > API, and a separate Misc root."""
    folders = FolderService(db)
    docs = await folders.create_folder(FolderCreate(name="Docs"))
    guides = await folders.create_folder(FolderCreate(name="Guides", parent_id=docs.id))
    python = await folders.create_folder(FolderCreate(name="Python", parent_id=guides.id))
    api = await folders.create_folder(FolderCreate(name="API", parent_id=docs.id))
    misc = await folders.create_folder(FolderCreate(name="Misc"))
    return {"docs": docs.id, "guides": guides.id, "python": python.id, "api": api.id, "misc": misc.id}


async def _article(db: AsyncSession, title: str, folder_id: int | None = None, **kwargs):
    return await ArticleService(db).create_article(
        ArticleCreate(title=title, content="body", folder_id=folder_id, **kwargs)
    )


# ---------------------------------------------------------------------------
# folder_service
# ---------------------------------------------------------------------------

def test_path_ids():
    assert path_ids("/1/4/9/") == [1, 4, 9]
    assert path_ids("/7/") == [7]
    assert path_ids("/") == []


@pytest.mark.asyncio
async def test_create_folder_builds_materialized_path(db_session: AsyncSession):
    ids = await _tree(db_session)
    folder = await FolderService(db_session).get_folder(ids["python"])
    assert folder.path == f"/{ids['docs']}/{ids['guides']}/{ids['python']}/"
    assert folder.parent_id == ids["guides"]


@pytest.mark.asyncio
async def test_create_folder_under_missing_parent(db_session: AsyncSession):
    with pytest.raises(FolderNotFoundError):
        await FolderService(db_session).create_folder(FolderCreate(name="Orphan", parent_id=999))


@pytest.mark.asyncio
async def test_get_folder_not_found(db_session: AsyncSession):
    with pytest.raises(FolderNotFoundError) as exc_info:
        await FolderService(db_session).get_folder(999)
    assert exc_info.value.folder_id == 999


@pytest.mark.asyncio
async def test_descendant_ids_include_the_folder_itself(db_session: AsyncSession):
    ids = await _tree(db_session)
    folders = FolderService(db_session)
    assert await folders.get_descendant_ids(ids["docs"]) == sorted(
        [ids["docs"], ids["guides"], ids["python"], ids["api"]]
    )
    assert await folders.get_descendant_ids(ids["python"]) == [ids["python"]]
    assert await folders.get_descendant_ids(ids["misc"]) == [ids["misc"]]


@pytest.mark.asyncio
async def test_descendant_ids_do_not_match_on_id_prefix(db_session: AsyncSession):
    folders = FolderService(db_session)
    first = await folders.create_folder(FolderCreate(name="F1"))
    # Push ids past 10 so "/1/" and "/1x/" paths coexist.
    for i in range(10):
        await folders.create_folder(FolderCreate(name=f"Filler {i}"))
    assert await folders.get_descendant_ids(first.id) == [first.id]


@pytest.mark.asyncio
async def test_ancestors_ordered_root_first_and_inclusive(db_session: AsyncSession):
    ids = await _tree(db_session)
    ancestors = await FolderService(db_session).get_ancestors(ids["python"])
    assert [a.name for a in ancestors] == ["Docs", "Guides", "Python"]
    assert ancestors[-1].id == ids["python"]


@pytest.mark.asyncio
async def test_ancestors_of_missing_folder(db_session: AsyncSession):
    with pytest.raises(FolderNotFoundError):
        await FolderService(db_session).get_ancestors(999)


@pytest.mark.asyncio
async def test_delete_empty_leaf_folder(db_session: AsyncSession):
    ids = await _tree(db_session)
    folders = FolderService(db_session)
    await folders.delete_folder(ids["api"], ArticleService(db_session).count_by_folder)
    with pytest.raises(FolderNotFoundError):
        await folders.get_folder(ids["api"])


@pytest.mark.asyncio
async def test_delete_folder_with_articles_rejected(db_session: AsyncSession):
    ids = await _tree(db_session)
    await _article(db_session, "Filed", ids["misc"])
    await _article(db_session, "Also filed", ids["misc"])
    with pytest.raises(FolderHasArticlesError) as exc_info:
        await FolderService(db_session).delete_folder(
            ids["misc"], ArticleService(db_session).count_by_folder
        )
    assert exc_info.value.article_count == 2


@pytest.mark.asyncio
async def test_delete_folder_with_children_rejected(db_session: AsyncSession):
    ids = await _tree(db_session)
    with pytest.raises(FolderHasChildrenError):
        await FolderService(db_session).delete_folder(
            ids["guides"], ArticleService(db_session).count_by_folder
        )


# ---------------------------------------------------------------------------
# article_service
# ---------------------------------------------------------------------------

def test_build_page_flags():
    page = build_page([], total=0, page=1, size=10)
    assert (page.pages, page.has_previous, page.has_next, page.is_first, page.is_last) == (
        0, False, False, True, True,
    )

    page = build_page([], total=25, page=2, size=10)
    assert (page.pages, page.has_previous, page.has_next, page.is_first, page.is_last) == (
        3, True, True, False, False,
    )

    page = build_page([], total=25, page=3, size=10)
    assert page.has_next is False
    assert page.is_last is True


@pytest.mark.asyncio
async def test_get_article_not_found(db_session: AsyncSession):
    with pytest.raises(ArticleNotFoundError):
        await ArticleService(db_session).get_article(999)


@pytest.mark.asyncio
async def test_list_articles_filters(db_session: AsyncSession):
    await _article(db_session, "Python tips", owner_id=1, owner_type="user", article_type="post")
    await _article(db_session, "Rust notes", owner_id=2, owner_type="user", article_type="note")
    await _article(db_session, "Team python guide", owner_id=1, owner_type="team", article_type="post")
    articles = ArticleService(db_session)

    assert (await articles.list_articles(1, 10)).total == 3
    assert (await articles.list_articles(1, 10, owner_id=1)).total == 2
    assert (await articles.list_articles(1, 10, owner_type="team")).total == 1
    assert (await articles.list_articles(1, 10, article_type="note")).total == 1

    by_title = await articles.list_articles(1, 10, title="PYTHON")
    assert {a.title for a in by_title.records} == {"Python tips", "Team python guide"}


@pytest.mark.asyncio
async def test_list_articles_pagination(db_session: AsyncSession):
    for i in range(5):
        await _article(db_session, f"Article {i}")
    page = await ArticleService(db_session).list_articles(2, 2)
    assert page.total == 5
    assert page.pages == 3
    assert page.current == 2
    assert len(page.records) == 2
    # Newest first; ids break created_at ties.
    assert [a.title for a in page.records] == ["Article 2", "Article 1"]


@pytest.mark.asyncio
async def test_list_articles_single_folder_vs_folder_set(db_session: AsyncSession):
    ids = await _tree(db_session)
    await _article(db_session, "In docs", ids["docs"])
    await _article(db_session, "In python", ids["python"])
    await _article(db_session, "Unfiled")
    articles = ArticleService(db_session)

    single = await articles.list_articles(1, 10, folder_id=ids["docs"])
    assert [a.title for a in single.records] == ["In docs"]

    many = await articles.list_articles_by_folder_ids(
        1, 10, folder_ids=[ids["docs"], ids["python"]]
    )
    assert {a.title for a in many.records} == {"In docs", "In python"}


@pytest.mark.asyncio
async def test_move_and_count(db_session: AsyncSession):
    ids = await _tree(db_session)
    created = await _article(db_session, "Mover")
    articles = ArticleService(db_session)

    await articles.move_to_folder(created.id, ids["misc"])
    assert await articles.count_by_folder(ids["misc"]) == 1
    assert (await articles.get_article(created.id)).folder_id == ids["misc"]

    await articles.move_to_folder(created.id, None)
    assert await articles.count_by_folder(ids["misc"]) == 0


@pytest.mark.asyncio
async def test_move_missing_article(db_session: AsyncSession):
    with pytest.raises(ArticleNotFoundError):
        await ArticleService(db_session).move_to_folder(999, None)


# ---------------------------------------------------------------------------
# aggregation_service over the real providers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_aggregation_over_database(db_session: AsyncSession):
    ids = await _tree(db_session)
    await _article(db_session, "Top", ids["docs"])
    deep = await _article(db_session, "Deep", ids["python"])
    await _article(db_session, "Elsewhere", ids["misc"])
    await _article(db_session, "Unfiled")
    service = ArticleFolderService(ArticleService(db_session), FolderService(db_session))

    detail = await service.get_article_with_folder(deep.id)
    assert [b.name for b in detail.folder.breadcrumb] == ["Docs", "Guides", "Python"]

    page = await service.list_articles_with_folder(1, 10, folder_id=ids["docs"])
    assert {r.title for r in page.records} == {"Top", "Deep"}
    assert all(r.folder is not None for r in page.records)

    assert await service.can_delete_folder(ids["api"]) == (True, 0)
    assert await service.can_delete_folder(ids["misc"]) == (False, 1)
