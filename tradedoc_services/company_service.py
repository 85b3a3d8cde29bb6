"""
CompanyService -- company registration, profile edits and logo uploads.

Renaming a company never touches document snapshots; it only changes
which name-addressed documents the company resolves to as counter-party.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from tradedoc_config import TradeDocConfig, get_active_config
from tradedoc_kernel.domain.documents import ActingCompany, CompanyKind
from tradedoc_kernel.exceptions import (
    CompanyNotFoundError,
    InvalidFieldValueError,
    MissingFieldError,
    TradeDocError,
    UnauthenticatedError,
    UnknownFieldError,
)
from tradedoc_kernel.logging_config import LogContext, get_logger
from tradedoc_kernel.models.company import Company
from tradedoc_kernel.services.base import BaseService
from tradedoc_services.file_storage import FileStorage, LocalFileStorage, UploadedFile
from tradedoc_services.payload import parse_text
from tradedoc_services.results import OperationResult

logger = get_logger("services.companies")

PROFILE_FIELDS = ("name", "email", "phone", "address")


def _parse_kind(kind: CompanyKind | str) -> CompanyKind:
    if isinstance(kind, CompanyKind):
        return kind
    try:
        return CompanyKind(str(kind).strip().upper())
    except ValueError:
        raise InvalidFieldValueError("kind", "must be BUYER or SELLER") from None


class CompanyService(BaseService[Company]):

    def __init__(
        self,
        session: Session,
        config: TradeDocConfig | None = None,
        storage: FileStorage | None = None,
        auto_commit: bool = True,
    ):
        super().__init__(session)
        self._config = config or get_active_config()
        self._storage = storage or LocalFileStorage(self._config.storage.root_dir)
        self._auto_commit = auto_commit

    def _run(
        self,
        operation: str,
        company_id: Any,
        work: Callable[[], OperationResult],
    ) -> OperationResult:
        with LogContext.bind(company_id=company_id, action=operation):
            try:
                result = work()
                if self._auto_commit:
                    self.session.commit()
            except TradeDocError as exc:
                if self._auto_commit:
                    self.session.rollback()
                result = OperationResult.failure(exc)
                logger.warning(
                    "company_operation_rejected",
                    extra={
                        "operation": operation,
                        "status": result.status.value,
                        "error_code": exc.code,
                        "field": result.field,
                    },
                )
                return result
            except Exception:
                if self._auto_commit:
                    self.session.rollback()
                logger.exception("company_operation_failed", extra={"operation": operation})
                raise
            return result

    def _acting_company(self, acting: ActingCompany | None) -> Company:
        if acting is None:
            raise UnauthenticatedError()
        company = self._lock_row(Company, acting.company_id)
        if company is None or company.company_kind is not acting.kind:
            raise UnauthenticatedError(
                f"Acting company {acting.company_id} is not a registered {acting.kind.value}"
            )
        return company

    def register_company(
        self,
        name: str,
        kind: CompanyKind | str,
        email: str | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> OperationResult:
        """Register a buyer or seller; names need not be unique."""

        def work() -> OperationResult:
            company_name = parse_text("name", name)
            if company_name is None:
                raise MissingFieldError("name")
            company_kind = _parse_kind(kind)
            company_id = uuid4()
            company = Company(
                id=company_id,
                name=company_name,
                kind=company_kind.value,
                email=parse_text("email", email),
                phone=parse_text("phone", phone),
                address=parse_text("address", address),
                # Self-registered: the new id is its own creator
                created_by_id=company_id,
            )
            self.session.add(company)
            self.session.flush()
            logger.info(
                "company_registered",
                extra={"registered_company_id": company.id, "kind": company_kind.value},
            )
            return OperationResult.success(company=company.to_dto())

        return self._run("register", None, work)

    def get_company(self, company_id: UUID | str) -> OperationResult:
        def work() -> OperationResult:
            try:
                key = company_id if isinstance(company_id, UUID) else UUID(str(company_id))
            except ValueError:
                raise CompanyNotFoundError(str(company_id)) from None
            company = self.session.get(Company, key)
            if company is None:
                raise CompanyNotFoundError(str(key))
            return OperationResult.success(company=company.to_dto())

        return self._run("get", company_id, work)

    def update_profile(
        self,
        acting: ActingCompany | None,
        changes: Mapping[str, Any],
    ) -> OperationResult:
        """Edit the acting company's own name and contact fields."""

        def work() -> OperationResult:
            company = self._acting_company(acting)
            for key in changes:
                if key not in PROFILE_FIELDS:
                    raise UnknownFieldError(str(key))
            values = {key: parse_text(key, value) for key, value in changes.items()}
            if "name" in values and values["name"] is None:
                raise MissingFieldError("name")

            previous_name = company.name
            for key, value in values.items():
                setattr(company, key, value)
            company.updated_by_id = company.id
            self.session.flush()

            logger.info(
                "company_profile_updated",
                extra={
                    "updated_fields": sorted(values),
                    "renamed": company.name != previous_name,
                },
            )
            return OperationResult.success(company=company.to_dto())

        return self._run("update_profile", acting.company_id if acting else None, work)

    def upload_logo(
        self,
        acting: ActingCompany | None,
        upload: UploadedFile,
    ) -> OperationResult:
        """Store an image logo (images rule) and point the profile at it."""

        def work() -> OperationResult:
            company = self._acting_company(acting)
            stored = self._storage.store_file(
                upload, self._config.storage.images, "logos", "logo"
            )
            company.logo_ref = stored.ref
            company.updated_by_id = company.id
            self.session.flush()
            return OperationResult.success(company=company.to_dto())

        return self._run("upload_logo", acting.company_id if acting else None, work)
