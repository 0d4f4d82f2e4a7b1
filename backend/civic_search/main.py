"""
Main FastAPI application entry point.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import make_url

from .config import Settings, settings
from .database import create_db_engine, init_db, make_session_factory

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the application.  The engine is created in the lifespan, not here."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for startup and shutdown events.
        """
        # Startup
        configure_logging(app_settings.log_level)
        logger.info("Starting Civic Issue Search API...")
        logger.info("Database: %s", make_url(app_settings.database_url).render_as_string(hide_password=True))
        logger.info("CORS origins: %s", app_settings.cors_origins_list)

        _ensure_sqlite_dir(app_settings.database_url)
        engine = create_db_engine(
            app_settings.database_url,
            echo=app_settings.sql_echo,
            busy_timeout_ms=app_settings.sqlite_busy_timeout_ms,
        )
        init_db(engine)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        logger.info("Database initialized")

        if engine.dialect.name == "sqlite":
            with engine.connect() as conn:
                journal_mode = conn.execute(text("PRAGMA journal_mode")).scalar()
            logger.info("SQLite journal mode: %s", journal_mode)

        yield

        # Shutdown
        logger.info("Shutting down Civic Issue Search API...")
        engine.dispose()

    app = FastAPI(
        title="Civic Issue Search API",
        description="Filtered, faceted and paginated search over civic issues",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/livez")
    async def liveness():
        """Liveness probe - zero dependencies, confirms process is responsive."""
        return {"status": "ok"}

    @app.get("/readyz")
    async def readiness(request: Request):
        """Readiness probe - checks the issues table is reachable."""
        checks = {}
        healthy = True

        engine = getattr(request.app.state, "engine", None)
        if engine is None:
            checks["database"] = "error: not initialised"
            healthy = False
        else:
            # DB check — offloaded to thread pool (non-blocking)
            try:
                def _check_db():
                    with engine.connect() as conn:
                        conn.execute(text("SELECT count(*) FROM issues")).scalar()
                    return True

                await asyncio.to_thread(_check_db)
                checks["database"] = "ok"
            except Exception as e:
                checks["database"] = f"error: {type(e).__name__}"
                healthy = False

        return JSONResponse(
            content={"status": "ok" if healthy else "unhealthy", "checks": checks},
            status_code=200 if healthy else 503,
        )

    # Include API routers
    from .api.v1.router import router as api_router
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "civic_search.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
