import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from article_folder.cache import cache
from article_folder.config import settings
from article_folder.errors import (
    FolderHasArticlesError,
    FolderHasChildrenError,
    NotFoundError,
)
from article_folder.middleware import TimingMiddleware
from article_folder.routers import articles, folders, metrics

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        await cache.connect()
    except Exception as exc:
        logger.warning("Cache unavailable, continuing without it: %s", exc)
    yield
    # Shutdown
    await cache.disconnect()


app = FastAPI(
    title="Article Folder API",
    description="Folder-aware article views composed from the article and folder domains",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error taxonomy -> HTTP
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(FolderHasArticlesError)
async def folder_has_articles_handler(request: Request, exc: FolderHasArticlesError):
    return JSONResponse(
        status_code=409,
        content={
            "detail": str(exc),
            "code": "folder_has_articles",
            "article_count": exc.article_count,
        },
    )


@app.exception_handler(FolderHasChildrenError)
async def folder_has_children_handler(request: Request, exc: FolderHasChildrenError):
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "code": "folder_has_children"},
    )


# Routers
app.include_router(articles.router)
app.include_router(folders.router)
app.include_router(metrics.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
