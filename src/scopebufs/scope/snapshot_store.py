"""
Snapshot Store for persisting captured window states.

Window states produced by the Snapshot Codec are stored under a name so a
scope's membership can be restored in a later session.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import sessionmaker

from scopebufs.core.exceptions import SnapshotNotFoundError
from scopebufs.database.engine import get_engine
from scopebufs.database.models import Base, WindowStateRecord
from scopebufs.database.session import get_session, make_sessionmaker
from scopebufs.scope.schemas import ScopeId

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Named window states in a SQL database.

    Args:
        url: SQLAlchemy database URL; the configured database if None
    """

    def __init__(self, url: Optional[str] = None):
        Base.metadata.create_all(get_engine(url))
        self._factory: sessionmaker = make_sessionmaker(url)

    def save(self, name: str, scope: ScopeId, window_state: Dict[str, Any]) -> WindowStateRecord:
        """
        Store a window state, replacing any earlier one with the same name.

        Args:
            name: The name to store it under
            scope: The scope it was captured from
            window_state: The captured blob

        Returns:
            The stored record
        """
        with get_session(self._factory) as session:
            record = session.query(WindowStateRecord).filter(WindowStateRecord.name == name).first()
            if record is None:
                record = WindowStateRecord(name=name)
                session.add(record)
            record.container = scope.container
            record.sub_index = scope.sub_index
            record.state = dict(window_state)
            record.updated_at = datetime.now()
            session.commit()
            session.refresh(record)
            session.expunge(record)
            logger.debug("Saved window state %s from %s", name, scope)
            return record

    def load(self, name: str) -> Dict[str, Any]:
        """
        Retrieve a stored window state by name.

        Raises:
            SnapshotNotFoundError: If nothing is stored under that name
        """
        with get_session(self._factory) as session:
            record = session.query(WindowStateRecord).filter(WindowStateRecord.name == name).first()
            if record is None:
                raise SnapshotNotFoundError(f"No window state named {name!r}")
            return dict(record.state)

    def list_records(self) -> List[WindowStateRecord]:
        """All stored window states, most recent first."""
        with get_session(self._factory) as session:
            records = session.query(WindowStateRecord).order_by(
                WindowStateRecord.updated_at.desc(), WindowStateRecord.name
            ).all()
            session.expunge_all()
            return records

    def delete(self, name: str) -> bool:
        with get_session(self._factory) as session:
            deleted = session.query(WindowStateRecord).filter(WindowStateRecord.name == name).delete()
            session.commit()
            return bool(deleted)
