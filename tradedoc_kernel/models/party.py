"""
Module: tradedoc_kernel.models.party
Responsibility: ORM persistence for the per-company counter-party
    directory and for typed addresses.

Invariants enforced:
    - A party belongs to exactly one owning company and is of the kind
      opposite to its owner (a buyer's parties are sellers).
    - An address belongs to exactly one owner: a registered company (its
      address book) or a directory party.
    - Deleting a party deletes its addresses.
"""

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tradedoc_kernel.db.base import TrackedBase, UUIDString
from tradedoc_kernel.db.types import CompanyName, LongText
from tradedoc_kernel.domain.documents import CompanyKind
from tradedoc_kernel.domain.parties import AddressInfo, AddressType, PartyInfo, PartyStatus


class Address(TrackedBase):
    __tablename__ = "addresses"

    __table_args__ = (
        CheckConstraint(
            "(company_id IS NULL) <> (party_id IS NULL)",
            name="ck_address_single_owner",
        ),
        Index("idx_address_company", "company_id"),
        Index("idx_address_party", "party_id"),
    )

    company_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
    )
    party_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("parties.id", ondelete="CASCADE"),
        nullable=True,
    )

    address_type: Mapped[str] = mapped_column(String(20), nullable=False)
    line1: Mapped[str] = mapped_column(String(255), nullable=False)
    line2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)

    def to_dto(self) -> AddressInfo:
        return AddressInfo(
            id=self.id,
            address_type=AddressType(self.address_type),
            line1=self.line1,
            line2=self.line2,
            postal_code=self.postal_code,
            company_id=self.company_id,
            party_id=self.party_id,
        )


class Party(TrackedBase):
    """A company in another company's directory; need not be registered."""

    __tablename__ = "parties"

    __table_args__ = (
        Index("idx_party_owner", "owner_company_id", "status"),
    )

    owner_company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Kind of the listed company, opposite to the owner's
    kind: Mapped[str] = mapped_column(String(10), nullable=False)

    name: Mapped[CompanyName] = mapped_column(nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    status: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=PartyStatus.ACTIVE.value,
    )

    notes: Mapped[LongText | None] = mapped_column(nullable=True)

    addresses: Mapped[list[Address]] = relationship(
        Address,
        order_by=[Address.created_at, Address.id],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dto(self) -> PartyInfo:
        return PartyInfo(
            id=self.id,
            owner_company_id=self.owner_company_id,
            kind=CompanyKind(self.kind),
            name=self.name,
            status=PartyStatus(self.status),
            contact_name=self.contact_name,
            email=self.email,
            phone=self.phone,
            notes=self.notes,
            addresses=tuple(address.to_dto() for address in self.addresses),
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<Party {self.name} ({self.kind}) of {self.owner_company_id}>"
