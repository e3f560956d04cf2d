"""Serialized planner snapshot, one row per user."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, func
from sqlalchemy.types import Uuid

from lunite.db.base import Base
from lunite.db.types import JSONBCompat


class PlannerState(Base):
    __tablename__ = "planner_states"
    __table_args__ = (Index("ix_planner_states_user_id", "user_id", unique=True),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    state = Column(JSONBCompat, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
