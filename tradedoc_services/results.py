"""
Operation results returned at the service boundary.

Every public operation returns an ``OperationResult`` instead of raising:
the typed ``TradeDocError`` raised inside is mapped to one
``OperationStatus`` plus its machine-readable code, message and field.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tradedoc_kernel.domain.documents import ActionLogInfo, CompanyInfo, DocumentInfo
from tradedoc_kernel.domain.parties import AddressInfo, PartyInfo
from tradedoc_kernel.exceptions import (
    ConflictError,
    DocumentValidationError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    TradeDocError,
    UnauthenticatedError,
)


class OperationStatus(str, Enum):
    SUCCESS = "success"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"


_STATUS_BY_ERROR: tuple[tuple[type[TradeDocError], OperationStatus], ...] = (
    (UnauthenticatedError, OperationStatus.UNAUTHENTICATED),
    (ForbiddenError, OperationStatus.FORBIDDEN),
    (NotFoundError, OperationStatus.NOT_FOUND),
    (InvalidTransitionError, OperationStatus.INVALID_TRANSITION),
    (DocumentValidationError, OperationStatus.VALIDATION_ERROR),
    (ConflictError, OperationStatus.CONFLICT),
)


def status_for(error: TradeDocError) -> OperationStatus:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    raise TypeError(f"No operation status for {type(error).__name__}")


@dataclass(frozen=True)
class OperationResult:
    """Result of one document, company or directory operation."""

    status: OperationStatus
    document: DocumentInfo | None = None
    documents: tuple[DocumentInfo, ...] = ()
    company: CompanyInfo | None = None
    history: tuple[ActionLogInfo, ...] = ()
    party: PartyInfo | None = None
    parties: tuple[PartyInfo, ...] = ()
    address: AddressInfo | None = None
    addresses: tuple[AddressInfo, ...] = ()
    error_code: str | None = None
    message: str | None = None
    field: str | None = None
    # Structured attributes of the error (status, action, counts, ...)
    details: dict[str, Any] = dataclasses.field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status is OperationStatus.SUCCESS

    @classmethod
    def success(cls, **values) -> OperationResult:
        return cls(status=OperationStatus.SUCCESS, **values)

    @classmethod
    def failure(cls, error: TradeDocError) -> OperationResult:
        return cls(
            status=status_for(error),
            error_code=error.code,
            message=error.message,
            field=getattr(error, "field", None),
            details={
                key: value
                for key, value in vars(error).items()
                if key not in ("message", "field") and not key.startswith("_")
            },
        )
