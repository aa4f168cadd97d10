"""Populate the database with a folder tree and articles spread across it."""
import argparse
import asyncio
import random
import time

from article_folder.database import Base, async_session, engine
from article_folder.models import Article
from article_folder.schemas import FolderCreate
from article_folder.services.folder_service import FolderService

TOP_LEVEL = ["Engineering", "Product", "Research", "Operations"]
ARTICLE_TYPES = ["post", "note", "report"]
OWNER_TYPES = ["user", "team"]


async def seed(depth: int, fanout: int, num_articles: int) -> None:
    print(f"Seeding: tree depth={depth} fanout={fanout}, {num_articles} articles")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        folders = FolderService(session)

        # Breadth-first so every parent exists before its children.
        folder_ids: list[int] = []
        level = []
        for name in TOP_LEVEL:
            level.append(await folders.create_folder(FolderCreate(name=name)))
        for d in range(1, depth):
            next_level = []
            for parent in level:
                for i in range(fanout):
                    child = await folders.create_folder(
                        FolderCreate(name=f"{parent.name} / {d}.{i}", parent_id=parent.id)
                    )
                    next_level.append(child)
            folder_ids.extend(f.id for f in level)
            level = next_level
        folder_ids.extend(f.id for f in level)
        print(f"  Created {len(folder_ids)} folders")

        for i in range(num_articles):
            session.add(
                Article(
                    title=f"Article {i}",
                    content=f"Body of article {i}. " * 10,
                    owner_id=random.randint(1, 20),
                    owner_type=random.choice(OWNER_TYPES),
                    article_type=random.choice(ARTICLE_TYPES),
                    # Roughly one in ten articles stays unfiled.
                    folder_id=random.choice(folder_ids) if random.random() > 0.1 else None,
                )
            )
        await session.commit()

    print(f"\nSeeding complete in {time.perf_counter() - start:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the article/folder database")
    parser.add_argument("--depth", type=int, default=3, help="Levels in the folder tree")
    parser.add_argument("--fanout", type=int, default=3, help="Children per folder")
    parser.add_argument("--articles", type=int, default=500, help="Number of articles")
    args = parser.parse_args()
    asyncio.run(seed(args.depth, args.fanout, args.articles))


if __name__ == "__main__":
    main()
