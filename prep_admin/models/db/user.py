"""Admin account database model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from prep_admin.database import Base
from prep_admin.utils.time_utils import utc_datetime


class AdminAccount(Base):
    """Locally registered account; authorization comes from the allow-list."""

    __tablename__ = "admin_accounts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    uid: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_datetime,
        nullable=False
    )
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<AdminAccount(id={self.id}, uid='{self.uid}', email='{self.email}')>"
