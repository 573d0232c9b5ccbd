# File: scopebufs/database/engine.py

from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from scopebufs.core.config import DATABASE_URL


@lru_cache(maxsize=None)
def get_engine(url: Optional[str] = None) -> Engine:
    """Return the SQLAlchemy engine for url (the configured database by default)."""
    return create_engine(url or DATABASE_URL, echo=False, future=True)
