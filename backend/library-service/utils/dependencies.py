"""Database and service dependencies for the Library Service.

This module provides dependency injection functions for FastAPI,
including database session management and domain service factories.

Functions:
    - get_db: Database session factory with automatic cleanup
    - get_search_service / get_item_service / get_tag_service: Service factories
    - init_db: Create the database file location and tables

Architecture:
    These utilities are shared across all layers and provide clean dependency
    injection for database access. Services receive their repositories through
    their constructors; no store handle is kept globally inside the domain.
"""

import logging
import os
from typing import Generator

from domain.services.item_service import ItemService
from domain.services.search_service import SearchService
from domain.services.tag_service import TagService
from infrastructure.models.base import Base
from infrastructure.repositories.sqlalchemy_item_repository import (
    SqlAlchemyItemRepository,
)
from infrastructure.repositories.sqlalchemy_tag_repository import (
    SqlAlchemyTagRepository,
)
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from .config import DATABASE_URL, LOG_LEVEL, STL_ROOT_DIR

# Configure logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

_database_url = make_url(DATABASE_URL)
_is_sqlite = _database_url.get_backend_name() == "sqlite"

# Database setup
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on foreign key enforcement for a new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if _is_sqlite:
    event.listen(engine, "connect", enable_sqlite_foreign_keys)


def init_db() -> None:
    """Create the database tables, and the directory of a SQLite file.

    Safe to call repeatedly; existing tables are left untouched.
    """
    database = _database_url.database
    if _is_sqlite and database and database != ":memory:":
        directory = os.path.dirname(os.path.abspath(database))
        os.makedirs(directory, exist_ok=True)

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at {_database_url.render_as_string(hide_password=True)}")


def get_db() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup.

    Yields:
        Session: SQLAlchemy database session that automatically closes after use.

    Example:
        >>> @router.get("/items")
        ... async def list_items(db: Session = Depends(get_db)): ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_search_service() -> SearchService:
    """Create the search service with its store dependencies.

    The session is injected per-request in each endpoint method.

    Returns:
        SearchService: Configured domain service ready for use.
    """
    return SearchService(
        SqlAlchemyItemRepository(),
        SqlAlchemyTagRepository(),
        library_root=STL_ROOT_DIR,
    )


def get_item_service() -> ItemService:
    """Create the metadata service with its store dependencies."""
    return ItemService(SqlAlchemyItemRepository(), SqlAlchemyTagRepository())


def get_tag_service() -> TagService:
    """Create and configure the tag service with repository dependency.

    This factory function creates the domain service with its repository dependency.
    The session is injected per-request in each endpoint method.

    Returns:
        TagService: Configured domain service ready for use.
    """
    # Infrastructure layer: SQLAlchemy repository (no session stored)
    tag_repository = SqlAlchemyTagRepository()

    # Domain layer: Domain service with business logic
    return TagService(tag_repository)
