"""
Counter-party directory values (``tradedoc_kernel.domain.parties``).

Each company keeps its own directory of the companies it trades with: a
buyer lists sellers, a seller lists buyers.  Entries need not be
registered companies; they are how documents get addressed by name to a
company that has no account yet.  Zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from tradedoc_kernel.domain.documents import CompanyKind


class PartyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    INACTIVE = "INACTIVE"


class AddressType(str, Enum):
    COMPANY = "COMPANY"
    HEADQUARTERS = "HEADQUARTERS"
    BILLING = "BILLING"
    SHIPPING = "SHIPPING"
    WAREHOUSE = "WAREHOUSE"
    OTHER = "OTHER"


@dataclass(frozen=True)
class AddressInfo:
    id: UUID
    address_type: AddressType
    line1: str
    postal_code: str
    line2: str | None = None
    # Exactly one of the two owners is set
    company_id: UUID | None = None
    party_id: UUID | None = None

    def one_line(self) -> str:
        """``line1, line2, postal_code`` with blanks skipped."""
        return ", ".join(part for part in (self.line1, self.line2, self.postal_code) if part)


@dataclass(frozen=True)
class PartyInfo:
    id: UUID
    owner_company_id: UUID
    kind: CompanyKind
    name: str
    status: PartyStatus
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    addresses: tuple[AddressInfo, ...] = ()
    created_at: datetime | None = None

    def primary_address(self) -> AddressInfo | None:
        """The first COMPANY address, else the first address of any type."""
        for address in self.addresses:
            if address.address_type is AddressType.COMPANY:
                return address
        return self.addresses[0] if self.addresses else None
