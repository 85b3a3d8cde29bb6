"""
ChainLinker -- creates a document from its parents in the chain.

Responsibility:
    Validate a creation payload, load and authorize the parent documents it
    names, derive the counter-party and inherited defaults from them,
    compute totals, allocate the human code and insert the new row.

Architecture position:
    Services.  Flush-only: ``DocumentService.create_document`` owns the
    transaction, so a failure anywhere leaves nothing behind (the code
    counter increment rolls back with it).

Counter-party resolution, first match wins:
    1. The first parent, in the type's precedence order, whose relevant
       party carries a registered company id.
    2. An explicit ``counter_company_id`` naming a company of the right kind.
    3. When the type's policy allows it, the single registered company of
       the right kind whose name matches the counter name.
    4. Otherwise the document is addressed by name only.

    A ``counter_party_id`` names an entry of the issuer's own directory.
    It stands in for ``counter_company_name`` in steps 3 and 4, and the
    entry's contacts fill whatever the payload leaves empty.

Failure modes:
    - DocumentNotFoundError(field=...) for a parent that is missing, has
      the wrong type, or is not visible to the acting company in the role
      the link requires.  The three cases are indistinguishable.
    - PartyNotFoundError(field="counter_party_id") for a directory entry
      of another company.
    - DocumentValidationError subclasses for payload problems.
    - HumanCodeConflictError if the generated code already exists.  Any
      other IntegrityError propagates unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tradedoc_config.schema import TradeDocConfig
from tradedoc_engines.pricing import PriceCalculator
from tradedoc_kernel.db.types import round_money
from tradedoc_kernel.domain.clock import Clock
from tradedoc_kernel.domain.documents import counter_kind
from tradedoc_kernel.domain.identifiers import CodeFormat, format_human_code, sequence_name
from tradedoc_kernel.domain.ownership import OwnershipDecision, resolve
from tradedoc_kernel.exceptions import (
    DateOrderError,
    DocumentNotFoundError,
    HumanCodeConflictError,
    InvalidFieldValueError,
    MissingFieldError,
    PartyNotFoundError,
)
from tradedoc_kernel.domain.parties import PartyInfo, PartyStatus
from tradedoc_kernel.logging_config import get_logger
from tradedoc_kernel.models.company import Company
from tradedoc_kernel.models.document import (
    COUNTER_CONTACT_COLUMNS,
    ISSUER_CONTACT_COLUMNS,
    Document,
)
from tradedoc_kernel.models.line_item import LineItem
from tradedoc_kernel.selectors.document_selector import DocumentSelector
from tradedoc_kernel.selectors.party_selector import PartySelector
from tradedoc_kernel.services.base import BaseService
from tradedoc_kernel.services.sequence_service import SequenceService
from tradedoc_modules.registry import DocumentTypeDefinition, ParentLink, PartySide
from tradedoc_services.file_storage import FileStorage
from tradedoc_services.payload import ParsedItem, parse_fields, parse_items, parse_uuid

logger = get_logger("services.chain_linker")

# Copied from the primary parent when the payload leaves them out
INHERITED_FIELDS = (
    "currency",
    "discount_percentage",
    "additional_charges",
    "tax_percentage",
    "payment_terms",
    "delivery_terms",
    "delivery_address",
)

_ZERO = Decimal("0")

# PostgreSQL reports the constraint name, SQLite the constrained columns
_HUMAN_CODE_MARKERS = ("uq_document_human_code", "trade_documents.human_code")


@dataclass(frozen=True)
class LinkedParent:
    link: ParentLink
    document: Document


@dataclass(frozen=True)
class CounterResolution:
    company_id: UUID | None
    name: str
    # "parent", "payload", "name_lookup" or "name_only"
    source: str
    contacts: dict[str, str | None] = field(default_factory=dict)


def is_human_code_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in _HUMAN_CODE_MARKERS)


# ---------------------------------------------------------------------------
# Rules shared with in-place edits
# ---------------------------------------------------------------------------


def check_document_dates(
    definition: DocumentTypeDefinition,
    values: Mapping[str, Any],
    today: date,
    check_future: bool = True,
) -> None:
    """Required fields present, issue date not ahead of ``today``, dates ordered."""
    for name in definition.required_fields:
        if values.get(name) is None:
            raise MissingFieldError(name)

    issue_date = values.get("issue_date")
    if check_future and definition.issue_date_not_in_future and issue_date and issue_date > today:
        raise InvalidFieldValueError("issue_date", "must not be in the future")

    for rule in definition.date_rules:
        later = values.get(rule.field)
        earlier = values.get(rule.earlier)
        if later is not None and earlier is not None and not rule.holds(later, earlier):
            raise DateOrderError(rule.field, rule.earlier, rule.strict)


def build_line_items(items: Sequence[ParsedItem]) -> list[LineItem]:
    """Line rows numbered 1..N in payload order."""
    return [
        LineItem(
            serial_number=index,
            product_name=item.product_name,
            product_description=item.product_description,
            sku=item.sku,
            uom=item.uom,
            quantity=item.quantity,
            unit_price=item.unit_price,
            sub_total=item.sub_total,
            gross_weight=item.gross_weight,
            net_weight=item.net_weight,
            packages=item.packages,
        )
        for index, item in enumerate(items, start=1)
    ]


def apply_pricing(
    definition: DocumentTypeDefinition,
    document: Document,
    items: Sequence[ParsedItem],
    total_override: Decimal | None = None,
) -> None:
    """
    Recompute sub-total and total (and packing totals, and the open balance
    of a payment-tracked document) from ``items`` and the adjustments
    already set on ``document``.
    """
    calculator = PriceCalculator()
    breakdown = calculator.compute(
        [item.priced() for item in items],
        discount_percentage=document.discount_percentage,
        additional_charges=document.additional_charges,
        tax_percentage=document.tax_percentage,
    )
    document.sub_total = breakdown.sub_total
    if total_override is not None:
        if total_override < _ZERO:
            raise InvalidFieldValueError("total_amount", "must not be negative")
        document.total_amount = round_money(total_override)
        document.total_overridden = True
    else:
        document.total_amount = breakdown.total
        document.total_overridden = False

    if definition.weighed_items:
        totals = calculator.packing_totals([item.weighed() for item in items])
        document.total_gross_weight = totals.total_gross_weight
        document.total_net_weight = totals.total_net_weight
        document.total_packages = totals.total_packages

    if definition.tracks_payments:
        paid = document.paid_amount or _ZERO
        document.paid_amount = paid
        document.remaining_amount = round_money(document.total_amount - paid)


def items_of(document: Document, weighed: bool) -> list[ParsedItem]:
    return [
        ParsedItem(
            product_name=row.product_name,
            quantity=row.quantity,
            unit_price=row.unit_price,
            product_description=row.product_description,
            sku=row.sku,
            uom=row.uom,
            gross_weight=row.gross_weight if weighed else None,
            net_weight=row.net_weight if weighed else None,
            packages=row.packages if weighed else None,
        )
        for row in document.items
    ]


def _party_of(document: Document, side: PartySide) -> tuple[UUID | None, str | None, dict[str, Any]]:
    """(company id, name snapshot, contacts keyed by counter_* column)."""
    if side is PartySide.ISSUER:
        source_columns = ISSUER_CONTACT_COLUMNS
        party_id, name = document.issuing_company_id, document.issuing_company_name
    else:
        source_columns = COUNTER_CONTACT_COLUMNS
        party_id, name = document.counter_company_id, document.counter_company_name
    contacts = {
        target: getattr(document, source)
        for source, target in zip(source_columns, COUNTER_CONTACT_COLUMNS)
    }
    return party_id, name, contacts


def _company_contacts(company: Company, columns: tuple[str, ...]) -> dict[str, str | None]:
    _, email, phone, address = columns
    return {email: company.email, phone: company.phone, address: company.address}


def _directory_contacts(party: PartyInfo) -> dict[str, str | None]:
    address = party.primary_address()
    return {
        "counter_contact_name": party.contact_name,
        "counter_email": party.email,
        "counter_phone": party.phone,
        "counter_address": address.one_line() if address is not None else None,
    }


class ChainLinker(BaseService[Document]):

    def __init__(
        self,
        session: Session,
        config: TradeDocConfig,
        clock: Clock,
        storage: FileStorage,
    ):
        super().__init__(session)
        self._config = config
        self._clock = clock
        self._storage = storage
        self._selector = DocumentSelector(session)
        self._parties = PartySelector(session)
        self._sequences = SequenceService(session)

    # -- parents --------------------------------------------------------------

    def _load_parents(
        self,
        definition: DocumentTypeDefinition,
        company: Company,
        raw_refs: Mapping[str, Any],
    ) -> list[LinkedParent]:
        identity = company.identity()
        parents = []
        for link in definition.parents:
            parent_id = parse_uuid(link.field, raw_refs.get(link.field))
            if parent_id is None:
                if link.required:
                    raise MissingFieldError(link.field)
                continue

            # Locked so the parent cannot be deleted under the new child
            parent = self._lock_row(Document, parent_id)
            if (
                parent is None
                or parent.document_type != link.parent_type.value
                or resolve(parent, identity, link.acting_role) is not OwnershipDecision.AUTHORIZED
            ):
                raise DocumentNotFoundError(link.parent_type.value, str(parent_id), field=link.field)
            parents.append(LinkedParent(link, parent))
        return parents

    def _check_consistency(self, parents: Sequence[LinkedParent]) -> None:
        """A parent that records another supplied parent must record the same one."""
        for owner in parents:
            for other in parents:
                if other is owner:
                    continue
                recorded = getattr(owner.document, other.link.ref_column)
                if recorded is not None and recorded != other.document.id:
                    raise InvalidFieldValueError(
                        owner.link.field,
                        f"belongs to a different {other.link.parent_type.value}",
                    )

    def _collect_refs(
        self,
        definition: DocumentTypeDefinition,
        parents: Sequence[LinkedParent],
    ) -> dict[str, UUID]:
        """Supplied parent ids plus declared ancestors recorded on them."""
        refs = {p.link.ref_column: p.document.id for p in parents}
        for link in definition.parents:
            if link.ref_column in refs:
                continue
            for parent in parents:
                inherited = getattr(parent.document, link.ref_column)
                if inherited is not None:
                    refs[link.ref_column] = inherited
                    break
        return refs

    # -- counter-party --------------------------------------------------------

    def _resolve_counter(
        self,
        definition: DocumentTypeDefinition,
        parents: Sequence[LinkedParent],
        raw_counter_id: Any,
        payload_name: str | None,
        directory: PartyInfo | None = None,
    ) -> CounterResolution:
        wanted_kind = counter_kind(definition.document_type)

        fallback_name = None
        fallback_contacts: dict[str, Any] = {}
        if directory is not None:
            payload_name = directory.name
            fallback_contacts = _directory_contacts(directory)
        for parent in parents:
            party_id, party_name, contacts = _party_of(parent.document, parent.link.counter_source)
            if party_id is not None:
                row = self.session.get(Company, party_id)
                if row is not None:
                    for column, value in _company_contacts(row, COUNTER_CONTACT_COLUMNS).items():
                        if contacts.get(column) is None:
                            contacts[column] = value
                return CounterResolution(
                    company_id=party_id,
                    name=row.name if row is not None else party_name,
                    source="parent",
                    contacts=contacts,
                )
            if fallback_name is None and party_name:
                fallback_name, fallback_contacts = party_name, contacts

        counter_id = parse_uuid("counter_company_id", raw_counter_id)
        if counter_id is not None:
            row = self.session.get(Company, counter_id)
            if row is None or row.company_kind is not wanted_kind:
                raise InvalidFieldValueError(
                    "counter_company_id",
                    f"must be a registered {wanted_kind.value.lower()} company",
                )
            return CounterResolution(
                company_id=row.id,
                name=row.name,
                source="payload",
                contacts=_company_contacts(row, COUNTER_CONTACT_COLUMNS),
            )

        name = fallback_name or payload_name
        if not name:
            raise MissingFieldError("counter_company_name")

        policy = self._config.policy_for(definition.document_type.value)
        if policy.counter_lookup_by_name:
            matches = self._selector.find_companies_by_name(name, wanted_kind)
            if len(matches) == 1:
                match = matches[0]
                contacts = dict(fallback_contacts)
                for column, value in (
                    ("counter_email", match.email),
                    ("counter_phone", match.phone),
                    ("counter_address", match.address),
                ):
                    if contacts.get(column) is None:
                        contacts[column] = value
                return CounterResolution(match.id, match.name, "name_lookup", contacts)
            if len(matches) > 1:
                logger.warning(
                    "counter_name_ambiguous",
                    extra={
                        "document_type": definition.document_type.value,
                        "match_count": len(matches),
                    },
                )

        return CounterResolution(None, name, "name_only", fallback_contacts)

    def _directory_entry(
        self,
        company: Company,
        raw_party_id: Any,
        raw_counter_id: Any,
        payload_name: str | None,
    ) -> PartyInfo | None:
        party_id = parse_uuid("counter_party_id", raw_party_id)
        if party_id is None:
            return None
        if raw_counter_id not in (None, "") or payload_name is not None:
            raise InvalidFieldValueError(
                "counter_party_id",
                "cannot be combined with counter_company_id or counter_company_name",
            )
        party = self._parties.owned_party(company.id, party_id)
        if party is None:
            raise PartyNotFoundError(str(party_id), field="counter_party_id")
        if party.status is PartyStatus.INACTIVE:
            raise InvalidFieldValueError("counter_party_id", "directory entry is inactive")
        return party

    # -- creation -------------------------------------------------------------

    def _next_human_code(self, definition: DocumentTypeDefinition, company: Company) -> str:
        policy = self._config.policy_for(definition.document_type.value)
        value = self._sequences.next_value(
            sequence_name(company.id, definition.document_type.value)
        )
        return format_human_code(
            company.name,
            CodeFormat(prefix=policy.code_prefix, width=policy.code_width),
            value,
        )

    def create_child(
        self,
        definition: DocumentTypeDefinition,
        company: Company,
        payload: Mapping[str, Any],
    ) -> Document:
        """
        Build, validate and insert a document issued by ``company``.

        The caller has already checked that ``company`` is of the issuing
        kind for the type.  Parent ids arrive in the payload under each
        link's ``field`` (``rfq_id``, ``purchase_order_id``, ...).

        Returns:
            The flushed document (status is the type's initial status).
        """
        doc_type = definition.document_type.value
        data = dict(payload)
        raw_refs = {link.field: data.pop(link.field) for link in definition.parents if link.field in data}
        raw_counter_id = data.pop("counter_company_id", None)
        raw_party_id = data.pop("counter_party_id", None)
        signature = data.pop("signature", None)
        raw_items = data.pop("items", None)

        fields = parse_fields(definition, data, creating=True)
        payload_name = fields.pop("counter_company_name", None)
        total_override = fields.pop("total_amount", None)
        directory = self._directory_entry(company, raw_party_id, raw_counter_id, payload_name)

        parents = self._load_parents(definition, company, raw_refs)
        self._check_consistency(parents)
        refs = self._collect_refs(definition, parents)
        primary = parents[0].document if parents else None

        if primary is not None:
            for name in INHERITED_FIELDS:
                if name in fields or not hasattr(definition.model, name):
                    continue
                value = getattr(primary, name, None)
                if value is not None:
                    fields[name] = value

        counter = self._resolve_counter(definition, parents, raw_counter_id, payload_name, directory)

        if raw_items is not None:
            items = parse_items(raw_items, definition.weighed_items)
        elif primary is not None and primary.items:
            items = items_of(primary, definition.weighed_items)
        else:
            raise MissingFieldError("items")

        today = self._clock.today()
        if fields.get("issue_date") is None:
            if "issue_date" in definition.required_fields and not definition.issue_date_defaults_today:
                raise MissingFieldError("issue_date")
            fields["issue_date"] = today
        check_document_dates(definition, fields, today)

        currency = fields.pop("currency", None) or self._config.default_currency
        document = definition.model(
            status=definition.initial_status({p.link.parent_type for p in parents}),
            issuing_company_id=company.id,
            issuing_company_name=company.name,
            counter_company_id=counter.company_id,
            counter_company_name=counter.name,
            currency=currency,
            created_by_id=company.id,
            **refs,
        )
        for name, value in fields.items():
            setattr(document, name, value)
        for column, value in _company_contacts(company, ISSUER_CONTACT_COLUMNS).items():
            if getattr(document, column) is None:
                setattr(document, column, value)
        for column, value in counter.contacts.items():
            if getattr(document, column) is None:
                setattr(document, column, value)

        document.items = build_line_items(items)
        apply_pricing(definition, document, items, total_override)

        if signature is not None:
            stored = self._storage.store_file(
                signature, self._config.storage.images, "signatures", "signature"
            )
            document.signature_ref = stored.ref

        document.human_code = self._next_human_code(definition, company)
        self.session.add(document)
        try:
            self.session.flush()
        except IntegrityError as exc:
            if is_human_code_conflict(exc):
                raise HumanCodeConflictError(doc_type, document.human_code) from exc
            raise

        logger.info(
            "document_linked",
            extra={
                "document_type": doc_type,
                "document_id": str(document.id),
                "human_code": document.human_code,
                "parent_types": [p.link.parent_type.value for p in parents],
                "counter_source": counter.source,
                "status": document.status,
            },
        )
        return document
