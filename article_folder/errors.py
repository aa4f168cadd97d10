"""
Error taxonomy shared by the article and folder providers and the
aggregation layer.

- ``NotFoundError`` subclasses: a primary entity is absent.  Providers
  raise them and the aggregation layer lets them through untouched so
  callers can branch on the type.
- ``FolderHasArticlesError``: a folder that still houses articles cannot
  be deleted.
- ``FolderHasChildrenError``: a folder that still has sub-folders cannot
  be deleted.

Anything else raised by a provider is treated as a provider failure and
propagated as-is.
"""


class DomainError(Exception):
    """Base class for errors the HTTP layer knows how to render."""


class NotFoundError(DomainError):
    pass


class ArticleNotFoundError(NotFoundError):
    def __init__(self, article_id: int) -> None:
        self.article_id = article_id
        super().__init__(f"Article {article_id} not found")


class FolderNotFoundError(NotFoundError):
    def __init__(self, folder_id: int) -> None:
        self.folder_id = folder_id
        super().__init__(f"Folder {folder_id} not found")


class FolderHasArticlesError(DomainError):
    def __init__(self, folder_id: int, article_count: int) -> None:
        self.folder_id = folder_id
        self.article_count = article_count
        super().__init__(
            f"Folder {folder_id} still contains {article_count} article(s) and cannot be deleted"
        )


class FolderHasChildrenError(DomainError):
    def __init__(self, folder_id: int) -> None:
        self.folder_id = folder_id
        super().__init__(f"Folder {folder_id} has sub-folders and cannot be deleted")
