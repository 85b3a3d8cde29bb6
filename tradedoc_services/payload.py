"""
Payload parsing for document operations.

Turns loosely typed mappings (as a web layer would hand them over) into
typed values, raising a ``DocumentValidationError`` that names the
offending field.  Also decides which fields an operation may write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping
from uuid import UUID

from tradedoc_engines.pricing import PricedLine, WeighedLine, validate_line
from tradedoc_kernel.db.types import to_decimal
from tradedoc_kernel.exceptions import (
    InvalidFieldValueError,
    MissingFieldError,
    UnknownFieldError,
)
from tradedoc_modules.registry import DocumentTypeDefinition, FieldKind

COMMON_FIELDS: dict[str, FieldKind] = {
    "currency": FieldKind.TEXT,
    "issue_date": FieldKind.DATE,
    "notes": FieldKind.TEXT,
    "payment_terms": FieldKind.TEXT,
    "delivery_terms": FieldKind.TEXT,
    "signature_name": FieldKind.TEXT,
    "discount_percentage": FieldKind.DECIMAL,
    "additional_charges": FieldKind.MONEY,
    "tax_percentage": FieldKind.DECIMAL,
    "issuer_contact_name": FieldKind.TEXT,
    "issuer_email": FieldKind.TEXT,
    "issuer_phone": FieldKind.TEXT,
    "issuer_address": FieldKind.TEXT,
    "counter_contact_name": FieldKind.TEXT,
    "counter_email": FieldKind.TEXT,
    "counter_phone": FieldKind.TEXT,
    "counter_address": FieldKind.TEXT,
}

# Only meaningful when the document is created
CREATE_ONLY_FIELDS: dict[str, FieldKind] = {
    "counter_company_name": FieldKind.TEXT,
    "total_amount": FieldKind.MONEY,
}

# Parsed separately: counter ids, items, signature
SPECIAL_FIELDS = frozenset({"counter_company_id", "counter_party_id", "items", "signature"})

# Changing any of these changes the money on the document
MONEY_FIELDS = frozenset({
    "items",
    "discount_percentage",
    "additional_charges",
    "tax_percentage",
    "currency",
    "total_amount",
})

ACTION_FIELDS = frozenset({"reason", "amount", "receipt", "suggestions"})


@dataclass(frozen=True)
class ParsedItem:
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    product_description: str | None = None
    sku: str | None = None
    uom: str | None = None
    gross_weight: Decimal | None = None
    net_weight: Decimal | None = None
    packages: int | None = None

    @property
    def sub_total(self) -> Decimal:
        return self.quantity * self.unit_price

    def priced(self) -> PricedLine:
        return PricedLine(self.quantity, self.unit_price)

    def weighed(self) -> WeighedLine:
        return WeighedLine(self.gross_weight, self.net_weight, self.packages)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def parse_text(field: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidFieldValueError(field, "must be text")
    value = value.strip()
    return value or None


def parse_decimal(field: str, value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        return to_decimal(value)
    except ValueError:
        raise InvalidFieldValueError(field, "must be a number") from None


def parse_date(field: str, value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            raise InvalidFieldValueError(field, "must be an ISO date (YYYY-MM-DD)") from None
    raise InvalidFieldValueError(field, "must be a date")


def parse_uuid(field: str, value: Any) -> UUID | None:
    if value is None or value == "":
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidFieldValueError(field, "must be a UUID") from None


def parse_currency(value: Any) -> str | None:
    text = parse_text("currency", value)
    if text is None:
        return None
    if len(text) != 3 or not text.isalpha():
        raise InvalidFieldValueError("currency", "must be a 3-letter currency code")
    return text.upper()


def parse_value(field: str, kind: FieldKind, value: Any) -> Any:
    if field == "currency":
        return parse_currency(value)
    if kind is FieldKind.TEXT:
        return parse_text(field, value)
    if kind is FieldKind.DATE:
        return parse_date(field, value)
    return parse_decimal(field, value)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


def _parse_packages(field: str, value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidFieldValueError(field, "must be a whole number")
    number = parse_decimal(field, value)
    if number is None or number != number.to_integral_value():
        raise InvalidFieldValueError(field, "must be a whole number")
    return int(number)


def parse_items(raw: Any, weighed: bool) -> list[ParsedItem]:
    """
    Parse line items; serial numbers are assigned by position later.

    Raises:
        MissingFieldError: ``items`` empty or absent.
        InvalidFieldValueError: naming ``items[i].<field>``.
    """
    if raw is None:
        raise MissingFieldError("items")
    if isinstance(raw, (str, bytes)) or not hasattr(raw, "__iter__"):
        raise InvalidFieldValueError("items", "must be a list of line items")
    entries = list(raw)
    if not entries:
        raise MissingFieldError("items")

    items = []
    for index, entry in enumerate(entries):
        prefix = f"items[{index}]"
        if not isinstance(entry, Mapping):
            raise InvalidFieldValueError(prefix, "must be a mapping")

        name = parse_text(f"{prefix}.product_name", entry.get("product_name"))
        if name is None:
            raise MissingFieldError(f"{prefix}.product_name")
        quantity = parse_decimal(f"{prefix}.quantity", entry.get("quantity"))
        if quantity is None:
            raise MissingFieldError(f"{prefix}.quantity")
        unit_price = parse_decimal(f"{prefix}.unit_price", entry.get("unit_price"))
        if unit_price is None:
            raise MissingFieldError(f"{prefix}.unit_price")
        validate_line(index, quantity, unit_price)

        item = ParsedItem(
            product_name=name,
            quantity=quantity,
            unit_price=unit_price,
            product_description=parse_text(f"{prefix}.product_description", entry.get("product_description")),
            sku=parse_text(f"{prefix}.sku", entry.get("sku")),
            uom=parse_text(f"{prefix}.uom", entry.get("uom")),
        )
        if weighed:
            item = ParsedItem(
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                product_description=item.product_description,
                sku=item.sku,
                uom=item.uom,
                gross_weight=parse_decimal(f"{prefix}.gross_weight", entry.get("gross_weight")),
                net_weight=parse_decimal(f"{prefix}.net_weight", entry.get("net_weight")),
                packages=_parse_packages(f"{prefix}.packages", entry.get("packages")),
            )
        items.append(item)
    return items


# ---------------------------------------------------------------------------
# Whole payloads
# ---------------------------------------------------------------------------


def writable_fields(definition: DocumentTypeDefinition, creating: bool) -> dict[str, FieldKind]:
    fields = dict(COMMON_FIELDS)
    fields.update(definition.extra_fields)
    if creating:
        fields.update(CREATE_ONLY_FIELDS)
    return fields


def check_field_names(
    definition: DocumentTypeDefinition,
    payload: Mapping[str, Any],
    creating: bool,
) -> None:
    """Reject status writes and anything the operation cannot write."""
    allowed = set(writable_fields(definition, creating)) | {"items", "signature"}
    if creating:
        allowed.update(("counter_company_id", "counter_party_id"))
    for name in payload:
        if name == "status":
            raise UnknownFieldError("status", "status changes only through actions")
        if name not in allowed:
            raise UnknownFieldError(str(name))


def parse_fields(
    definition: DocumentTypeDefinition,
    payload: Mapping[str, Any],
    creating: bool,
) -> dict[str, Any]:
    """Typed values for every scalar field present in ``payload``."""
    check_field_names(definition, payload, creating)
    kinds = writable_fields(definition, creating)
    return {
        name: parse_value(name, kind, payload[name])
        for name, kind in kinds.items()
        if name in payload
    }


def check_action_fields(payload: Mapping[str, Any]) -> None:
    for name in payload:
        if name == "status":
            raise UnknownFieldError("status", "status changes only through actions")
        if name not in ACTION_FIELDS:
            raise UnknownFieldError(str(name), "is not an action parameter")
