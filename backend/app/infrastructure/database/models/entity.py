"""SQLAlchemy ORM model for the Entity record."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, false, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base


class EntityModel(Base):
    """ORM model — maps to the 'entities' table."""

    __tablename__ = "entities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    create_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    create_user: Mapped[str] = mapped_column(String(128), nullable=False)
    last_update_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_update_user: Mapped[str | None] = mapped_column(String(128), nullable=True)
    canceled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (
        # Code is unique among active rows only; canceled codes may be reused.
        Index(
            "uq_entities_code_active",
            "code",
            unique=True,
            postgresql_where=text("canceled = false"),
            sqlite_where=text("canceled = 0"),
        ),
        Index("ix_entities_canceled", "canceled"),
    )

    def __repr__(self) -> str:
        return (
            f"<EntityModel(id={self.id}, code='{self.code}', "
            f"canceled={self.canceled})>"
        )
