"""
Module: tradedoc_kernel.models.document
Responsibility: The ``trade_documents`` table shared by all eight document
    types (single-table inheritance, discriminator ``document_type``).
    Type-specific columns are declared by the per-type ORM subclasses in
    ``tradedoc_modules.<type>.orm``.

Invariants enforced:
    - (issuing_company_id, document_type, human_code) is unique.
    - issuing_company_id is never null; counter_company_id may be.
    - Both party names are snapshots taken at creation.
    - Parent references point at other rows of this table.
"""

from datetime import date
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tradedoc_kernel.db.base import TrackedBase, UUIDString
from tradedoc_kernel.db.types import (
    CompanyName,
    Currency,
    HumanCode,
    LongText,
    Money,
    Percentage,
    StatusCode,
)
from tradedoc_kernel.domain.documents import DocumentInfo, DocumentType
from tradedoc_kernel.domain.ownership import normalize_name
from tradedoc_kernel.models.line_item import LineItem

# Parent reference columns, in chain order
PARENT_REF_COLUMNS: dict[DocumentType, str] = {
    DocumentType.RFQ: "rfq_ref_id",
    DocumentType.QUOTATION: "quotation_ref_id",
    DocumentType.CONTRACT: "contract_ref_id",
    DocumentType.PURCHASE_ORDER: "purchase_order_ref_id",
    DocumentType.SALES_ORDER: "sales_order_ref_id",
    DocumentType.DELIVERY_NOTE: "delivery_note_ref_id",
}

ISSUER_CONTACT_COLUMNS = (
    "issuer_contact_name",
    "issuer_email",
    "issuer_phone",
    "issuer_address",
)

COUNTER_CONTACT_COLUMNS = (
    "counter_contact_name",
    "counter_email",
    "counter_phone",
    "counter_address",
)


def _parent_fk() -> Any:
    return mapped_column(
        UUIDString(),
        ForeignKey("trade_documents.id"),
        nullable=True,
        index=True,
    )


class Document(TrackedBase):
    """
    Base row for every trade document.

    Subclasses set ``__mapper_args__ = {"polymorphic_identity": ...}`` and
    list their own columns in ``extra_fields`` so ``to_dto`` can expose
    them.
    """

    __tablename__ = "trade_documents"

    __table_args__ = (
        UniqueConstraint(
            "issuing_company_id",
            "document_type",
            "human_code",
            name="uq_document_human_code",
        ),
        Index("idx_document_issuer", "issuing_company_id", "document_type"),
        Index("idx_document_counter", "counter_company_id", "document_type"),
        Index("idx_document_counter_name", "counter_name_key", "document_type"),
        Index("idx_document_status", "document_type", "status"),
    )

    extra_fields: ClassVar[tuple[str, ...]] = ()

    document_type: Mapped[str] = mapped_column(String(30), nullable=False)

    human_code: Mapped[HumanCode] = mapped_column(nullable=False)

    status: Mapped[StatusCode] = mapped_column(nullable=False)

    # Parties
    issuing_company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("companies.id"),
        nullable=False,
    )
    issuing_company_name: Mapped[CompanyName] = mapped_column(nullable=False)

    counter_company_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("companies.id"),
        nullable=True,
    )
    counter_company_name: Mapped[CompanyName | None] = mapped_column(nullable=True)
    # normalize_name(counter_company_name) while no counter id is recorded
    counter_name_key: Mapped[CompanyName | None] = mapped_column(nullable=True)

    # Contact snapshots
    issuer_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    issuer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    issuer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    issuer_address: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    counter_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    counter_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    counter_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    counter_address: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    currency: Mapped[Currency] = mapped_column(String(3), nullable=False)

    issue_date: Mapped[date] = mapped_column(nullable=False)
    due_date: Mapped[date | None] = mapped_column(nullable=True)

    # Money
    discount_percentage: Mapped[Percentage | None] = mapped_column(nullable=True)
    additional_charges: Mapped[Money | None] = mapped_column(nullable=True)
    tax_percentage: Mapped[Percentage | None] = mapped_column(nullable=True)
    sub_total: Mapped[Money] = mapped_column(nullable=False, default=Decimal("0"))
    total_amount: Mapped[Money] = mapped_column(nullable=False)
    # total_amount was supplied explicitly instead of computed
    total_overridden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    notes: Mapped[LongText | None] = mapped_column(nullable=True)
    payment_terms: Mapped[LongText | None] = mapped_column(nullable=True)
    delivery_terms: Mapped[LongText | None] = mapped_column(nullable=True)

    signature_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    signature_ref: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Parent references
    rfq_ref_id: Mapped[UUID | None] = _parent_fk()
    quotation_ref_id: Mapped[UUID | None] = _parent_fk()
    contract_ref_id: Mapped[UUID | None] = _parent_fk()
    purchase_order_ref_id: Mapped[UUID | None] = _parent_fk()
    sales_order_ref_id: Mapped[UUID | None] = _parent_fk()
    delivery_note_ref_id: Mapped[UUID | None] = _parent_fk()

    items: Mapped[list[LineItem]] = relationship(
        LineItem,
        order_by=LineItem.serial_number,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __mapper_args__ = {
        "polymorphic_on": "document_type",
    }

    @property
    def kind(self) -> DocumentType:
        return DocumentType(self.document_type)

    def to_dto(self) -> DocumentInfo:
        parent_refs = {
            column: getattr(self, column)
            for column in PARENT_REF_COLUMNS.values()
            if getattr(self, column) is not None
        }
        contacts = {
            column: getattr(self, column)
            for column in ISSUER_CONTACT_COLUMNS + COUNTER_CONTACT_COLUMNS
            if getattr(self, column) is not None
        }
        return DocumentInfo(
            id=self.id,
            document_type=DocumentType(self.document_type),
            human_code=self.human_code,
            status=self.status,
            issuing_company_id=self.issuing_company_id,
            issuing_company_name=self.issuing_company_name,
            counter_company_id=self.counter_company_id,
            counter_company_name=self.counter_company_name,
            currency=self.currency,
            issue_date=self.issue_date,
            due_date=self.due_date,
            sub_total=self.sub_total,
            total_amount=self.total_amount,
            items=tuple(item.to_dto() for item in self.items),
            discount_percentage=self.discount_percentage,
            additional_charges=self.additional_charges,
            tax_percentage=self.tax_percentage,
            notes=self.notes,
            payment_terms=self.payment_terms,
            delivery_terms=self.delivery_terms,
            signature_name=self.signature_name,
            signature_ref=self.signature_ref,
            parent_refs=parent_refs,
            contacts=contacts,
            extra={name: getattr(self, name) for name in self.extra_fields},
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.human_code} [{self.status}]>"


@event.listens_for(Document, "before_insert", propagate=True)
@event.listens_for(Document, "before_update", propagate=True)
def _sync_counter_name_key(mapper, connection, target: Document) -> None:
    if target.counter_company_id is None:
        target.counter_name_key = normalize_name(target.counter_company_name)
    else:
        target.counter_name_key = None
