# employee_api/db.py
from __future__ import annotations

import logging
from urllib.parse import urlsplit

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def masked_url(url: str) -> str:
    """Return the URL with its password replaced, safe for logs."""
    parts = urlsplit(url)
    if not parts.password:
        return url
    return f"{parts.scheme}://{parts.username}:***@{parts.hostname}:{parts.port}{parts.path}"


def make_engine(url: str = DATABASE_URL) -> Engine:
    logger.info("Using database %s", masked_url(url))
    if url.startswith("sqlite"):
        # SQLite has no server pool to size; allow use from the store's worker threads.
        return create_engine(url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        future=True,
    )


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, future=True)


engine = make_engine()
SessionLocal = make_session_factory(engine)
