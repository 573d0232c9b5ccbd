# src/scopebufs/database/models.py

import uuid

from sqlalchemy import JSON, Column, DateTime, Integer, String, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Create the base class for SQLAlchemy models
Base = declarative_base()


class WindowStateRecord(Base):
    """A named window-state blob, with the scope it was captured from."""
    __tablename__ = "window_states"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True)
    container = Column(String, nullable=False)
    sub_index = Column(Integer, nullable=False, default=0)
    state = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
