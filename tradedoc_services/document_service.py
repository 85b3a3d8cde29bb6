"""
DocumentService -- the operation boundary for trade documents.

Contract:
    Six operations (fetch, list, create, update fields, apply action,
    delete) plus the action history read.  Each takes an explicit
    ``ActingCompany`` (None means unauthenticated) and returns an
    ``OperationResult``; typed ``TradeDocError``s raised inside are mapped
    to a status, never propagated.

Guarantees:
    - One transaction per operation: commit on success, rollback on any
      failure (when ``auto_commit`` is True).
    - Every mutation of an existing document happens under a row lock on
      that document.
    - Every successful create, action, update and delete writes an action
      log row in the same transaction.
    - A document the acting company holds no role on is reported as
      NOT_FOUND, whether or not it exists.

Non-goals:
    - No transport concerns (routing, HTTP status codes, sessions).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Mapping
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tradedoc_config import TradeDocConfig, get_active_config
from tradedoc_kernel.domain.clock import Clock, SystemClock
from tradedoc_kernel.domain.documents import (
    ActingCompany,
    DocumentType,
    Role,
    issuer_kind,
    role_for,
)
from tradedoc_kernel.domain.ownership import roles_held
from tradedoc_kernel.exceptions import (
    CompanyKindMismatchError,
    DocumentLockedError,
    DocumentNotFoundError,
    DocumentReferencedError,
    InvalidFieldValueError,
    NotDocumentIssuerError,
    TradeDocError,
    UnauthenticatedError,
)
from tradedoc_kernel.logging_config import LogContext, get_logger
from tradedoc_kernel.models.action_log import DocumentActionLog
from tradedoc_kernel.models.company import Company
from tradedoc_kernel.models.document import Document
from tradedoc_kernel.selectors.document_selector import DocumentSelector
from tradedoc_kernel.services.base import BaseService
from tradedoc_modules import all_definitions, get_definition
from tradedoc_modules.registry import DocumentTypeDefinition
from tradedoc_services.chain_linker import (
    ChainLinker,
    apply_pricing,
    build_line_items,
    check_document_dates,
    items_of,
)
from tradedoc_services.file_storage import FileStorage, LocalFileStorage
from tradedoc_services.payload import MONEY_FIELDS, parse_fields, parse_items
from tradedoc_services.results import OperationResult, OperationStatus
from tradedoc_services.transition_engine import TransitionEngine

logger = get_logger("services.documents")

_ZERO = Decimal("0")

# Fields whose change requires a price recomputation
_PRICING_FIELDS = frozenset({"discount_percentage", "additional_charges", "tax_percentage"})


def validate_config(config: TradeDocConfig) -> None:
    """Every registered type has a policy whose statuses exist in its workflow."""
    for definition in all_definitions():
        policy = config.policy_for(definition.document_type.value)
        unknown = [s for s in policy.deletable_statuses if not definition.has_status(s)]
        if unknown:
            raise ValueError(
                f"{definition.document_type.value}: deletable statuses {unknown} "
                f"are not workflow states"
            )


def _parse_document_type(document_type: DocumentType | str) -> DocumentType:
    if isinstance(document_type, DocumentType):
        return document_type
    try:
        return DocumentType(str(document_type).strip().lower())
    except ValueError:
        raise InvalidFieldValueError("document_type", f"unknown document type {document_type!r}") from None


def _parse_document_id(document_type: DocumentType, document_id: Any) -> UUID:
    if isinstance(document_id, UUID):
        return document_id
    try:
        return UUID(str(document_id))
    except ValueError:
        raise DocumentNotFoundError(document_type.value, str(document_id)) from None


class DocumentService(BaseService[Document]):
    """
    Trade document operations.

    Args:
        session: Session this service commits or rolls back.
        config: Defaults to ``get_active_config()``.
        clock: Defaults to ``SystemClock``.
        storage: Defaults to ``LocalFileStorage`` under the configured root.
        auto_commit: When False the caller owns commit and rollback.
    """

    def __init__(
        self,
        session: Session,
        config: TradeDocConfig | None = None,
        clock: Clock | None = None,
        storage: FileStorage | None = None,
        auto_commit: bool = True,
    ):
        super().__init__(session)
        self._config = config or get_active_config()
        validate_config(self._config)
        self._clock = clock or SystemClock()
        self._storage = storage or LocalFileStorage(self._config.storage.root_dir)
        self._auto_commit = auto_commit
        self._selector = DocumentSelector(session)
        self._linker = ChainLinker(session, self._config, self._clock, self._storage)
        self._engine = TransitionEngine(self._clock)

    # =========================================================================
    # Boundary plumbing
    # =========================================================================

    def _run(
        self,
        operation: str,
        acting: ActingCompany | None,
        work: Callable[[], OperationResult],
        document_type: DocumentType | str | None = None,
        document_id: Any = None,
    ) -> OperationResult:
        doc_type = document_type.value if isinstance(document_type, DocumentType) else document_type
        with LogContext.bind(
            company_id=acting.company_id if acting else None,
            document_type=doc_type,
            document_id=document_id,
            action=operation,
        ):
            logger.info("operation_started", extra={"operation": operation})
            try:
                result = work()
                if self._auto_commit:
                    self.session.commit()
            except TradeDocError as exc:
                if self._auto_commit:
                    self.session.rollback()
                result = OperationResult.failure(exc)
                logger.warning(
                    "operation_rejected",
                    extra={
                        "operation": operation,
                        "status": result.status.value,
                        "error_code": exc.code,
                        "field": result.field,
                        "error_message": exc.message,
                    },
                )
                return result
            except IntegrityError as exc:
                if self._auto_commit:
                    self.session.rollback()
                logger.warning(
                    "operation_conflict",
                    extra={"operation": operation, "error_message": str(exc.orig)},
                )
                return OperationResult(
                    status=OperationStatus.CONFLICT,
                    error_code="INTEGRITY_CONFLICT",
                    message="The change conflicts with a concurrent update",
                )
            except Exception:
                if self._auto_commit:
                    self.session.rollback()
                logger.exception("operation_failed", extra={"operation": operation})
                raise

            logger.info("operation_succeeded", extra={"operation": operation})
            return result

    def _authenticate(self, acting: ActingCompany | None) -> Company:
        if acting is None:
            raise UnauthenticatedError()
        company = self.session.get(Company, acting.company_id)
        if company is None or company.company_kind is not acting.kind:
            raise UnauthenticatedError(
                f"Acting company {acting.company_id} is not a registered {acting.kind.value}"
            )
        return company

    def _load_visible(
        self,
        definition: DocumentTypeDefinition,
        company: Company,
        document_id: Any,
        lock: bool,
    ) -> tuple[Document, frozenset[Role]]:
        doc_type = definition.document_type
        doc_id = _parse_document_id(doc_type, document_id)
        if lock:
            document = self._lock_row(Document, doc_id)
        else:
            document = self.session.get(Document, doc_id)
        if document is None or document.document_type != doc_type.value:
            raise DocumentNotFoundError(doc_type.value, str(doc_id))
        roles = roles_held(document, company.identity())
        if not roles:
            raise DocumentNotFoundError(doc_type.value, str(doc_id))
        return document, roles

    def _record(
        self,
        document: Document,
        action: str,
        company_id: UUID,
        from_status: str | None,
        to_status: str | None,
        reason: str | None = None,
        amount: Decimal | None = None,
    ) -> None:
        self.session.add(
            DocumentActionLog(
                document_id=document.id,
                entry_number=self._selector.next_history_entry(document.id),
                document_type=document.document_type,
                human_code=document.human_code,
                action=action,
                company_id=company_id,
                from_status=from_status,
                to_status=to_status,
                reason=reason,
                amount=amount,
                occurred_at=self._clock.now(),
            )
        )
        self.session.flush()

    # =========================================================================
    # Reads
    # =========================================================================

    def fetch_document(
        self,
        document_type: DocumentType | str,
        document_id: UUID | str,
        acting: ActingCompany | None,
    ) -> OperationResult:
        """Issuer or counter-party may read; anyone else gets NOT_FOUND."""

        def work() -> OperationResult:
            company = self._authenticate(acting)
            definition = get_definition(_parse_document_type(document_type))
            document, _ = self._load_visible(definition, company, document_id, lock=False)
            return OperationResult.success(document=document.to_dto())

        return self._run("fetch", acting, work, document_type, document_id)

    def list_documents(
        self,
        document_type: DocumentType | str,
        acting: ActingCompany | None,
        search: str | None = None,
        status: str | None = None,
    ) -> OperationResult:
        """
        Documents the acting company holds its kind's role on, newest first.

        ``status`` of None, blank or ``"ALL"`` means no status filter.
        """

        def work() -> OperationResult:
            company = self._authenticate(acting)
            doc_type = _parse_document_type(document_type)
            definition = get_definition(doc_type)

            status_filter = (status or "").strip().upper()
            if status_filter in ("", "ALL"):
                status_filter = None
            elif not definition.has_status(status_filter):
                raise InvalidFieldValueError(
                    "status", f"{status!r} is not a {doc_type.value} status"
                )

            documents = self._selector.list_for_company(
                doc_type,
                company.identity(),
                role_for(doc_type, company.company_kind),
                search=search,
                status=status_filter,
            )
            return OperationResult.success(documents=tuple(documents))

        return self._run("list", acting, work, document_type)

    def document_history(
        self,
        document_type: DocumentType | str,
        document_id: UUID | str,
        acting: ActingCompany | None,
    ) -> OperationResult:
        def work() -> OperationResult:
            company = self._authenticate(acting)
            definition = get_definition(_parse_document_type(document_type))
            document, _ = self._load_visible(definition, company, document_id, lock=False)
            return OperationResult.success(
                document=document.to_dto(),
                history=tuple(self._selector.action_history(document.id)),
            )

        return self._run("history", acting, work, document_type, document_id)

    # =========================================================================
    # Writes
    # =========================================================================

    def create_document(
        self,
        document_type: DocumentType | str,
        acting: ActingCompany | None,
        payload: Mapping[str, Any],
        parent_refs: Mapping[Any, Any] | None = None,
    ) -> OperationResult:
        """
        Create a document, optionally from parent documents.

        ``parent_refs`` maps a parent document type (or the link field, e.g.
        ``"quotation_id"``) to the parent's id; parent ids may equally be
        given in ``payload`` under the link field.
        """

        def work() -> OperationResult:
            company = self._authenticate(acting)
            doc_type = _parse_document_type(document_type)
            definition = get_definition(doc_type)

            required_kind = issuer_kind(doc_type)
            if company.company_kind is not required_kind:
                raise CompanyKindMismatchError(doc_type.value, required_kind.value, company.kind)

            data = self._merge_parent_refs(definition, payload, parent_refs)
            document = self._linker.create_child(definition, company, data)
            self._record(document, "create", company.id, None, document.status)

            logger.info(
                "document_created",
                extra={
                    "created_document_id": document.id,
                    "human_code": document.human_code,
                    "status": document.status,
                    "total_amount": document.total_amount,
                    "counter_company_id": document.counter_company_id,
                },
            )
            return OperationResult.success(document=document.to_dto())

        return self._run("create", acting, work, document_type)

    def _merge_parent_refs(
        self,
        definition: DocumentTypeDefinition,
        payload: Mapping[str, Any],
        parent_refs: Mapping[Any, Any] | None,
    ) -> dict[str, Any]:
        data = dict(payload or {})
        for key, value in (parent_refs or {}).items():
            link = None
            for candidate in definition.parents:
                if key in (candidate.field, candidate.parent_type, candidate.parent_type.value):
                    link = candidate
                    break
            if link is None:
                raise InvalidFieldValueError(
                    "parent_refs",
                    f"{key!r} is not a parent of {definition.document_type.value}",
                )
            existing = data.get(link.field)
            if existing is not None and str(existing) != str(value):
                raise InvalidFieldValueError(link.field, "given twice with different values")
            data[link.field] = value
        return data

    def update_document_fields(
        self,
        document_type: DocumentType | str,
        document_id: UUID | str,
        acting: ActingCompany | None,
        payload: Mapping[str, Any],
    ) -> OperationResult:
        """
        Edit whitelisted fields of a document the acting company issued.

        Item replacement renumbers serials; totals are recomputed when
        items or adjustments change.  Status never changes here.
        """

        def work() -> OperationResult:
            company = self._authenticate(acting)
            definition = get_definition(_parse_document_type(document_type))
            document, roles = self._load_visible(definition, company, document_id, lock=True)
            self._apply_field_update(definition, document, roles, company, payload)
            return OperationResult.success(document=document.to_dto())

        return self._run("update", acting, work, document_type, document_id)

    def _apply_field_update(
        self,
        definition: DocumentTypeDefinition,
        document: Document,
        roles: frozenset[Role],
        company: Company,
        payload: Mapping[str, Any],
    ) -> None:
        doc_type = definition.document_type.value
        if Role.ISSUER not in roles:
            raise NotDocumentIssuerError(doc_type, "update", Role.ISSUER.value)

        policy = self._config.policy_for(doc_type)
        if definition.workflow.is_terminal(document.status) and not policy.editable_in_terminal:
            raise DocumentLockedError(
                doc_type,
                document.status,
                "update",
                f"{doc_type} is {document.status} and can no longer be edited",
            )

        data = dict(payload or {})
        if not data:
            raise InvalidFieldValueError("payload", "nothing to update")
        signature = data.pop("signature", None)
        replace_items = "items" in data
        raw_items = data.pop("items", None)
        fields = parse_fields(definition, data, creating=False)

        touched = set(fields) | ({"items"} if replace_items else set())
        if definition.tracks_payments and (document.paid_amount or _ZERO) > _ZERO:
            frozen = sorted(touched & MONEY_FIELDS)
            if frozen:
                raise DocumentLockedError(
                    doc_type,
                    document.status,
                    "update",
                    f"{', '.join(frozen)} cannot change once a payment is recorded",
                )

        items = parse_items(raw_items, definition.weighed_items) if replace_items else None

        if "currency" in fields and fields["currency"] is None:
            raise InvalidFieldValueError("currency", "must not be blank")
        if "issue_date" in fields and fields["issue_date"] is None:
            raise InvalidFieldValueError("issue_date", "must not be blank")

        merged = {
            name: getattr(document, name)
            for name in definition.required_fields
            + tuple(r.field for r in definition.date_rules)
            + tuple(r.earlier for r in definition.date_rules)
            + ("issue_date",)
        }
        merged.update(fields)
        check_document_dates(
            definition,
            merged,
            self._clock.today(),
            check_future="issue_date" in fields,
        )

        for name, value in fields.items():
            setattr(document, name, value)

        if items is not None:
            # Old rows go first so the serial numbers can be reused
            document.items.clear()
            self.session.flush()
            document.items.extend(build_line_items(items))

        if items is not None or touched & _PRICING_FIELDS:
            apply_pricing(
                definition,
                document,
                items if items is not None else items_of(document, definition.weighed_items),
            )

        if signature is not None:
            stored = self._storage.store_file(
                signature, self._config.storage.images, "signatures", "signature"
            )
            document.signature_ref = stored.ref
            touched.add("signature_ref")

        document.updated_by_id = company.id
        self.session.flush()
        self._record(document, "update", company.id, document.status, document.status)

        logger.info(
            "document_updated",
            extra={"updated_fields": sorted(touched), "total_amount": document.total_amount},
        )

    def apply_action(
        self,
        document_type: DocumentType | str,
        document_id: UUID | str,
        acting: ActingCompany | None,
        action: str,
        action_payload: Mapping[str, Any] | None = None,
    ) -> OperationResult:
        """
        Fire a workflow action.

        ``action_payload`` may carry ``reason``, ``amount`` (partial
        payments), ``suggestions`` (contract change requests) and
        ``receipt`` (an ``UploadedFile`` for invoice payments).
        """

        def work() -> OperationResult:
            company = self._authenticate(acting)
            definition = get_definition(_parse_document_type(document_type))
            document, roles = self._load_visible(definition, company, document_id, lock=True)

            payload = dict(action_payload or {})
            receipt = payload.get("receipt")
            store_receipt = None
            if receipt is not None:
                def store_receipt() -> str:
                    stored = self._storage.store_file(
                        receipt, self._config.storage.receipts, "receipts", "receipt"
                    )
                    return stored.ref

            outcome = self._engine.apply(
                definition,
                document,
                roles,
                company.id,
                action,
                payload,
                store_receipt=store_receipt,
            )
            self.session.flush()
            self._record(
                document,
                outcome.action,
                company.id,
                outcome.from_status,
                outcome.to_status,
                reason=outcome.reason,
                amount=outcome.amount,
            )
            return OperationResult.success(document=document.to_dto())

        return self._run("action", acting, work, document_type, document_id)

    def delete_document(
        self,
        document_type: DocumentType | str,
        document_id: UUID | str,
        acting: ActingCompany | None,
    ) -> OperationResult:
        """Issuer only, while the status is deletable and nothing references it."""

        def work() -> OperationResult:
            company = self._authenticate(acting)
            doc_type = _parse_document_type(document_type)
            definition = get_definition(doc_type)
            document, roles = self._load_visible(definition, company, document_id, lock=True)

            if Role.ISSUER not in roles:
                raise NotDocumentIssuerError(doc_type.value, "delete", Role.ISSUER.value)

            policy = self._config.policy_for(doc_type.value)
            if document.status not in policy.deletable_statuses:
                raise DocumentLockedError(
                    doc_type.value,
                    document.status,
                    "delete",
                    f"{doc_type.value} in status {document.status} cannot be deleted",
                )

            referencing = self._selector.count_referencing(document.id)
            if referencing:
                raise DocumentReferencedError(doc_type.value, str(document.id), referencing)

            dto = document.to_dto()
            self._record(document, "delete", company.id, document.status, None)
            self.session.delete(document)
            self.session.flush()

            logger.info("document_deleted", extra={"human_code": dto.human_code})
            return OperationResult.success(document=dto)

        return self._run("delete", acting, work, document_type, document_id)
