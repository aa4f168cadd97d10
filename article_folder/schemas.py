from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


# --- Folder ---

class FolderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    parent_id: int | None = None


class FolderRead(BaseModel):
    id: int
    name: str
    path: str
    parent_id: int | None = None
    model_config = ConfigDict(from_attributes=True)


class BreadcrumbItem(BaseModel):
    id: int
    name: str


class FolderInfo(BaseModel):
    """Folder context attached to an article; rebuilt on every request."""

    id: int
    name: str
    path: str
    breadcrumb: list[BreadcrumbItem] = []


class FolderDeletable(BaseModel):
    deletable: bool
    article_count: int


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(max_length=300)
    content: str = ""
    summary: str | None = Field(None, max_length=500)
    owner_id: int | None = None
    owner_type: str = Field("", max_length=50)
    article_type: str = Field("", max_length=50)
    folder_id: int | None = None


class ArticleRead(BaseModel):
    id: int
    title: str
    content: str
    summary: str | None = None
    owner_id: int | None = None
    owner_type: str = ""
    article_type: str = ""
    folder_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class ArticleWithFolder(ArticleRead):
    folder: FolderInfo | None = None


class MoveArticleRequest(BaseModel):
    folder_id: int | None = None


# --- Pagination ---

class _PageEnvelope(BaseModel):
    total: int
    size: int
    current: int
    pages: int
    has_previous: bool = Field(alias="hasPrevious")
    has_next: bool = Field(alias="hasNext")
    is_first: bool = Field(alias="isFirst")
    is_last: bool = Field(alias="isLast")
    model_config = ConfigDict(populate_by_name=True)


class PageResult(_PageEnvelope):
    """Article provider page."""

    records: list[ArticleRead]


class PageResultWithFolder(_PageEnvelope):
    records: list[ArticleWithFolder]


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_articles: int
    total_folders: int
    unfiled_articles: int
    cache_info: dict = {}
