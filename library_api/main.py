from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import APIRouter, FastAPI
from library_api.core.config import Settings, get_settings
from library_api.core.middleware_correlation import CorrelationIdMiddleware
from library_api.core.logging import get_logger, setup_logging
from library_api.core.errors import register_exception_handlers
from library_api.db.session import Database
from library_api.notifications.email import EmailNotifier


# Routers
from library_api.api.routes.authors import router as authors_router
from library_api.api.routes.books import router as books_router
from library_api.api.routes.health import router as health_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application. The database handle is created and checked in
    the lifespan; the app refuses to start without a working one.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger = get_logger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        database.verify()
        if settings.AUTO_CREATE_TABLES:
            database.create_tables()

        app.state.database = database
        app.state.notifier = EmailNotifier.from_settings(settings)
        logger.info("Database ready at %s", database.engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="CRUD API for a library's authors and books.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)
    register_exception_handlers(app)

    # Mount routers
    api = APIRouter(prefix=settings.API_PREFIX)
    api.include_router(authors_router)
    api.include_router(books_router)
    app.include_router(api)
    app.include_router(health_router)

    return app


app = create_app()
