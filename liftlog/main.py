"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from liftlog.api.v1 import api_router
from liftlog.core.config import get_settings
from liftlog.db.seed import seed_definitions
from liftlog.db.session import async_session_maker, create_tables, engine
from liftlog.services.calendar_data import CalendarDataService
from liftlog.services.preferences import PreferenceManager, SqlPreferenceStore
from liftlog.services.storage import SqlWorkoutStorage

settings = get_settings()
logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: tables, seed data, preferences, calendar service; shutdown: flush and cleanup."""
    # Alembic owns schema changes; create_all only fills in a fresh database
    await create_tables(engine)
    if settings.seed_on_startup:
        async with async_session_maker() as db:
            await seed_definitions(db)
            await db.commit()

    preferences = PreferenceManager(SqlPreferenceStore(async_session_maker))
    await preferences.load()
    app.state.preferences = preferences
    app.state.calendar = CalendarDataService(SqlWorkoutStorage(async_session_maker), preferences)
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    await preferences.flush()
    await engine.dispose()


def create_application() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug, localhost in development, else CORS_ORIGINS (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8081"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
