"""
Module: asset_kernel.db.base
Responsibility: Declarative base for the asset register tables.  Fixes the
    column types used for ids, money and timestamps, and adds creation and
    update audit columns to every register row.
Architecture position: Kernel > DB.  Imported by every ORM model.  MUST NOT
    import from engines, config, or modules.

Invariants enforced:
    - Ids are uuid4 values stored as 36-character strings, so the same
      schema works on SQLite and PostgreSQL.
    - Money columns are Numeric(38, 9); a float column is never declared.
    - Every row records who created it (created_by_id is NOT NULL).
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """``uuid.UUID`` in Python, ``VARCHAR(36)`` in the database."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """
    Declarative base for register tables.

    ``Mapped[Decimal]`` becomes Numeric(38, 9), ``Mapped[datetime]`` a
    timezone-aware DateTime and ``Mapped[UUID]`` a ``UUIDString``.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        UUID: UUIDString(),
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """Abstract base adding audit timestamps and actor ids."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False,
    )
    created_by_id: Mapped[UUID] = mapped_column(nullable=False)
    updated_by_id: Mapped[UUID | None] = mapped_column(nullable=True)
