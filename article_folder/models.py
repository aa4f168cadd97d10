from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from article_folder.database import Base


# ---------------------------------------------------------------------------
# Folder
# ---------------------------------------------------------------------------
class Folder(Base):
    """
    A node in the folder hierarchy.

    ``path`` is a materialized path of ancestor ids, root first and the
    folder's own id last, e.g. ``/1/4/9/``.  Descendant lookups are a
    prefix match on it and ancestor lookups parse it.
    """

    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    path: Mapped[str] = mapped_column(String(1000), nullable=False, default="", index=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("folders.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships — lazy="raise"; services query explicitly.  passive_deletes
    # leaves the FK check to the database instead of loading the collection.
    articles: Mapped[List["Article"]] = relationship(
        "Article", back_populates="folder", lazy="raise", passive_deletes=True
    )


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------
class Article(Base):
    __tablename__ = "articles"

    __table_args__ = (
        # Folder listings sorted by date
        Index("ix_articles_folder_id_created_at", "folder_id", "created_at"),
        # Owner-scoped listings
        Index("ix_articles_owner", "owner_type", "owner_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    summary: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    owner_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    owner_type: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    article_type: Mapped[str] = mapped_column(String(50), nullable=False, default="", index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # Nullable: an article may be unfiled.
    folder_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("folders.id", ondelete="RESTRICT"), nullable=True
    )

    folder: Mapped[Optional["Folder"]] = relationship(
        "Folder", back_populates="articles", lazy="raise"
    )
