"""
Document model backing the hierarchical document store.

Each row is one document addressed by its collection path
(e.g. ``Chapters/abc/Kinematics-Test-Questions``) and a document id.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from prep_admin.database import Base
from prep_admin.utils.time_utils import utc_datetime


class DocumentRecord(Base):
    """A single JSON document inside a collection."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    collection: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    doc_id: Mapped[str] = mapped_column(String(64), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=utc_datetime,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=utc_datetime,
        onupdate=utc_datetime,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_collection_doc"),
    )

    def __repr__(self) -> str:
        return f"<DocumentRecord(collection='{self.collection}', doc_id='{self.doc_id}')>"
