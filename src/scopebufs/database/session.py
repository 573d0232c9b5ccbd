# scopebufs/src/scopebufs/database/session.py

import contextlib
from typing import Iterator, Optional

from sqlalchemy.orm import Session, sessionmaker

from scopebufs.database.engine import get_engine


def make_sessionmaker(url: Optional[str] = None) -> sessionmaker:
    return sessionmaker(bind=get_engine(url), autoflush=False, autocommit=False, future=True)


@contextlib.contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """
    Use as:
        with get_session() as session:
            ...
    """
    db = (factory or make_sessionmaker())()
    try:
        yield db
    finally:
        db.close()
