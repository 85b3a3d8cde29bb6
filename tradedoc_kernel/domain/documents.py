"""
Document domain values (``tradedoc_kernel.domain.documents``).

Pure, immutable types shared by every layer: document types, company
kinds, roles, the acting-company context, the counter-party union and the
read-only DTOs returned at the operation boundary.  Zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


class DocumentType(str, Enum):
    """The eight documents of the chain, in chain order."""

    RFQ = "rfq"
    QUOTATION = "quotation"
    CONTRACT = "contract"
    PURCHASE_ORDER = "purchase_order"
    SALES_ORDER = "sales_order"
    DELIVERY_NOTE = "delivery_note"
    PACKING_LIST = "packing_list"
    INVOICE = "invoice"


class CompanyKind(str, Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"

    @property
    def other(self) -> CompanyKind:
        return CompanyKind.SELLER if self is CompanyKind.BUYER else CompanyKind.BUYER


class Role(str, Enum):
    """Side of a document an acting company plays."""

    ISSUER = "ISSUER"
    COUNTER = "COUNTER"


ISSUER_KIND: dict[DocumentType, CompanyKind] = {
    DocumentType.RFQ: CompanyKind.BUYER,
    DocumentType.QUOTATION: CompanyKind.SELLER,
    DocumentType.CONTRACT: CompanyKind.SELLER,
    DocumentType.PURCHASE_ORDER: CompanyKind.BUYER,
    DocumentType.SALES_ORDER: CompanyKind.SELLER,
    DocumentType.DELIVERY_NOTE: CompanyKind.SELLER,
    DocumentType.PACKING_LIST: CompanyKind.SELLER,
    DocumentType.INVOICE: CompanyKind.SELLER,
}


def issuer_kind(document_type: DocumentType) -> CompanyKind:
    return ISSUER_KIND[document_type]


def counter_kind(document_type: DocumentType) -> CompanyKind:
    return ISSUER_KIND[document_type].other


def role_for(document_type: DocumentType, kind: CompanyKind) -> Role:
    """The role a company of ``kind`` plays on documents of ``document_type``."""
    return Role.ISSUER if ISSUER_KIND[document_type] is kind else Role.COUNTER


@dataclass(frozen=True)
class ActingCompany:
    """Authenticated caller context, passed explicitly into every operation."""

    company_id: UUID
    kind: CompanyKind


@dataclass(frozen=True)
class CompanyIdentity:
    """A company as the ownership resolver sees it: id plus current name."""

    company_id: UUID
    name: str


# ---------------------------------------------------------------------------
# Counter-party: addressed by registered id, or by name only
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CounterById:
    company_id: UUID


@dataclass(frozen=True)
class CounterByName:
    name: str


CounterParty = CounterById | CounterByName


def counter_party_of(company_id: UUID | None, name: str | None) -> CounterParty:
    """Build the counter-party union from the two stored columns."""
    if company_id is not None:
        return CounterById(company_id)
    return CounterByName(name or "")


# ---------------------------------------------------------------------------
# DTOs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompanyInfo:
    id: UUID
    name: str
    kind: CompanyKind
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    logo_ref: str | None = None


@dataclass(frozen=True)
class LineItemInfo:
    serial_number: int
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    sub_total: Decimal
    product_description: str | None = None
    sku: str | None = None
    uom: str | None = None
    gross_weight: Decimal | None = None
    net_weight: Decimal | None = None
    packages: int | None = None


@dataclass(frozen=True)
class DocumentInfo:
    """
    Read-only view of a stored document.

    Common fields are attributes; type-specific fields (validity_date,
    paid_amount, planned_ship_date, ...) live in ``extra`` and are also
    reachable through ``get()``.
    """

    id: UUID
    document_type: DocumentType
    human_code: str
    status: str
    issuing_company_id: UUID
    issuing_company_name: str
    counter_company_id: UUID | None
    counter_company_name: str | None
    currency: str
    issue_date: date
    sub_total: Decimal
    total_amount: Decimal
    items: tuple[LineItemInfo, ...] = ()
    due_date: date | None = None
    discount_percentage: Decimal | None = None
    additional_charges: Decimal | None = None
    tax_percentage: Decimal | None = None
    notes: str | None = None
    payment_terms: str | None = None
    delivery_terms: str | None = None
    signature_name: str | None = None
    signature_ref: str | None = None
    parent_refs: dict[str, UUID] = field(default_factory=dict)
    contacts: dict[str, str] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def counter_party(self) -> CounterParty:
        return counter_party_of(self.counter_company_id, self.counter_company_name)

    def get(self, name: str, default: Any = None) -> Any:
        if name in self.extra:
            return self.extra[name]
        if name in self.parent_refs:
            return self.parent_refs[name]
        if name in self.contacts:
            return self.contacts[name]
        return getattr(self, name, default)


@dataclass(frozen=True)
class ActionLogInfo:
    document_id: UUID
    entry_number: int
    document_type: DocumentType
    human_code: str
    action: str
    company_id: UUID
    from_status: str | None
    to_status: str | None
    reason: str | None = None
    amount: Decimal | None = None
    occurred_at: datetime | None = None
