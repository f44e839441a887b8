"""
JobDesk Job Description Service
===============================
Backend for drafting, reviewing and publishing job descriptions

Flow:
1. HR creates a job description (optionally drafted by AI from the title)
2. Drafts can be checked for biased wording
3. An HR Manager approves the job
4. The approved job is formatted into a posting
5. The posting is published to the careers listing and job platforms

Run with ``uvicorn jobdesk.main:create_app --factory`` or gunicorn
(see gunicorn.conf.py).
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobdesk import __version__
from jobdesk.api import api_router
from jobdesk.core.config import Settings
from jobdesk.core.database import Database
from jobdesk.core.errors import setup_error_handlers
from jobdesk.core.logging import RequestLoggingMiddleware, configure_logging
from jobdesk.services.users import seed_default_admin

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.
    Raises ConfigurationError before anything starts when a required
    setting is missing.
    """
    settings = settings or Settings()
    settings.ensure_required()
    configure_logging(settings.LOG_LEVEL)
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize database and bootstrap admin on startup"""
        logger.info("Starting %s", settings.APP_NAME)
        database.init()
        db = database.SessionLocal()
        try:
            seed_default_admin(db, settings)
        finally:
            db.close()
        yield
        logger.info("Shutting down %s", settings.APP_NAME)
        database.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
## JobDesk API

Job description lifecycle with role-based access.

### Workflow:
1. Pending for Approval: created and edited by HR staff
2. Approved: signed off by an HR Manager or IT Admin
3. Formatted: rendered into a posting
4. Published: listed internally and on selected platforms
    """,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    setup_error_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": settings.APP_NAME}

    @app.get("/")
    def root():
        """Root endpoint with API info"""
        return {
            "service": settings.APP_NAME,
            "version": __version__,
            "docs": "/docs",
            "endpoints": {
                "auth": "/api/auth",
                "users": "/api/users",
                "jobDescriptions": "/api/job-descriptions",
                "ai": "/api/ai",
            },
        }

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("jobdesk.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
