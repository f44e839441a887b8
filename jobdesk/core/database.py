"""
Database connection and session management
One Database handle per process, created by the application factory
"""
import logging
import re
import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request

logger = logging.getLogger(__name__)

Base = declarative_base()

# Record ids are 24 lowercase hex characters
ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def generate_id() -> str:
    return uuid.uuid4().hex[:24]


def is_valid_id(value: str) -> bool:
    return bool(value) and bool(ID_PATTERN.match(value))


class Database:
    """Owns the SQLAlchemy engine and session factory"""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs = {"echo": echo}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases must share one connection across threads
            if url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True
            engine_kwargs["pool_recycle"] = 300

        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def init(self):
        """Create tables"""
        from jobdesk.models import job, user  # noqa: F401  (register tables)
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database initialized", extra={"backend": self.engine.dialect.name})

    def close(self):
        self.engine.dispose()
        logger.info("Database connections closed")


def get_db(request: Request):
    """Dependency to get a database session for the current request"""
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
