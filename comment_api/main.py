"""Comment API application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from comment_api.comments.router import router as comments_router
from comment_api.comments.service import CommentService
from comment_api.comments.store import (
    CassandraCommentStore,
    CommentStore,
    InMemoryCommentStore,
)
from comment_api.config import Settings, get_settings
from comment_api.core.database import init_async_cassandra, shutdown_async_cassandra
from comment_api.core.errors import register_exception_handlers
from comment_api.core.logging import configure_structlog, get_logger
from comment_api.core.middleware import RequestContextMiddleware
from comment_api.health import router as health_router


configure_structlog(get_settings())

logger = get_logger(__name__)


async def build_comment_store(settings: Settings) -> CommentStore:
    """Create the comment store selected by settings."""
    if settings.comment_store_backend == "memory":
        logger.warning("comment_store_in_memory", message="Data is not persisted")
        return InMemoryCommentStore()

    session = await init_async_cassandra(settings)
    return CassandraCommentStore(session=session, keyspace=settings.cassandra_keyspace)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the comment store unless one was injected, and close it after."""
    settings = get_settings()
    backend = settings.comment_store_backend
    owns_store = app.state.comment_service is None
    logger.info(
        "comment_api_starting",
        version=settings.app_version,
        environment=settings.environment,
        backend=backend if owns_store else "injected",
    )

    if owns_store:
        try:
            store = await build_comment_store(settings)
        except Exception as e:
            logger.error("comment_store_init_failed", backend=backend, error=str(e))
            raise
        app.state.comment_service = CommentService(store)

    yield

    logger.info("comment_api_stopping")
    if owns_store and backend == "cassandra":
        await shutdown_async_cassandra()


def create_app(comment_store: CommentStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        comment_store: Store to serve comments from. When omitted, the
            store named by ``COMMENT_STORE_BACKEND`` is built at startup.
    """
    settings = get_settings()
    expose_docs = settings.is_development

    # debug stays off so Starlette never renders a traceback
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Comment resource API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if expose_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if expose_docs else None,
    )
    app.state.comment_service = (
        CommentService(comment_store) if comment_store is not None else None
    )

    # Added before CORS, so CORS wraps it and preflights skip access logging
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(comments_router, prefix=settings.comments_base_path.rstrip("/"))

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str | None]:
        return {
            "message": "Comment API",
            "version": settings.app_version,
            "docs": f"{request.base_url}docs" if expose_docs else None,
        }

    return app


app = create_app()
