"""
BaseService -- common base for kernel services.

Kernel services receive a Session from the caller and only ``flush()``;
the caller (the document or company operation boundary, or a test) owns
commit and rollback so multi-step operations stay atomic.
"""

from abc import ABC
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from tradedoc_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """Flush-only service bound to a caller-owned session."""

    def __init__(self, session: Session):
        self.session = session

    def _lock_row(self, model: type[ModelType], row_id: UUID) -> ModelType | None:
        """Load one row with SELECT ... FOR UPDATE, bypassing the identity map."""
        return self.session.execute(
            select(model)
            .where(model.id == row_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
