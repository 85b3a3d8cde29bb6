"""
Module: tradedoc_kernel.selectors.base
Responsibility: Base class for read-only query selectors.

Selectors take a caller-owned Session, never add, flush or commit, and
return DTOs rather than ORM instances.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from tradedoc_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):

    def __init__(self, session: Session):
        self.session = session
