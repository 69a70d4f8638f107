"""Main FastAPI application with modularized routes."""
import logging
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from prep_admin.config import (
    ADMIN_BOOTSTRAP_ENABLED,
    ADMIN_PRIMARY_UIDS,
    ADMIN_SECONDARY_UIDS,
    BUILDER_DRAFT_TTL_MINUTES,
    LOG_LEVEL,
    UPLOADS_DIR,
)
from prep_admin.database import SessionLocal, init_db
from prep_admin.errors import AdminError
from prep_admin.logging_setup import setup_console_logging
from prep_admin.routes import (
    ai,
    auth,
    breakdowns,
    builder,
    chapters,
    questions,
    tests,
    uploads,
    videos,
)
from prep_admin.services.ai_service import SuggestionClient
from prep_admin.services.cleanup_service import schedule_builder_cleanup
from prep_admin.services.document_store import DocumentStore
from prep_admin.services.permission_service import AdminDirectory
from prep_admin.services.test_builder import BuilderRegistry

logger = logging.getLogger(__name__)


def create_app(
    session_factory: sessionmaker | None = None,
    directory: AdminDirectory | None = None,
    suggestions: SuggestionClient | None = None,
    uploads_dir: Path | None = None,
    bootstrap_enabled: bool = ADMIN_BOOTSTRAP_ENABLED,
    background_cleanup: bool = True,
) -> FastAPI:
    """Assemble the application; collaborators default to the configured ones."""
    app = FastAPI(title="Exam Prep Admin API")

    app.state.session_factory = session_factory or SessionLocal
    app.state.store = DocumentStore(app.state.session_factory)
    app.state.directory = directory or AdminDirectory.from_uids(
        ADMIN_PRIMARY_UIDS, ADMIN_SECONDARY_UIDS
    )
    app.state.suggestions = suggestions or SuggestionClient()
    app.state.builders = BuilderRegistry(timedelta(minutes=BUILDER_DRAFT_TTL_MINUTES))
    app.state.uploads_dir = uploads_dir or UPLOADS_DIR
    app.state.bootstrap_enabled = bootstrap_enabled

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AdminError)
    async def admin_error_handler(request: Request, exc: AdminError) -> JSONResponse:
        """Typed service errors become JSON with their status code."""
        logger.warning(f"{exc.error_type} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "type": "server_error",
                "errors": {},
            },
        )

    # Startup events
    @app.on_event("startup")
    def startup_events() -> None:
        """Initialize database and schedule cleanup tasks on startup."""
        init_db(app.state.session_factory.kw.get("bind"))
        if background_cleanup:
            app.state.cleanup_stop = schedule_builder_cleanup(app.state.builders)

    @app.on_event("shutdown")
    def shutdown_events() -> None:
        stop = getattr(app.state, "cleanup_stop", None)
        if stop is not None:
            stop.set()

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # Include routers
    app.include_router(auth.router)
    app.include_router(chapters.router)
    app.include_router(chapters.skill_tags_router)
    app.include_router(questions.router)
    app.include_router(breakdowns.router)
    app.include_router(videos.router)
    app.include_router(tests.router)
    app.include_router(builder.router)
    app.include_router(ai.router)
    app.include_router(uploads.router)

    return app


setup_console_logging(LOG_LEVEL)

app = create_app()
