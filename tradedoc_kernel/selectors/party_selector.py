"""
PartySelector -- read paths for the counter-party directory and address books.

Every query is scoped to the owning company; a party or address of another
company is indistinguishable from a missing one.
"""

from uuid import UUID

from sqlalchemy import select

from tradedoc_kernel.domain.parties import AddressInfo, PartyInfo, PartyStatus
from tradedoc_kernel.models.party import Address, Party
from tradedoc_kernel.selectors.base import BaseSelector


class PartySelector(BaseSelector[Party]):

    def list_parties(self, owner_company_id: UUID, status: PartyStatus | None = None) -> list[PartyInfo]:
        """The owner's directory, newest first."""
        stmt = select(Party).where(Party.owner_company_id == owner_company_id)
        if status is not None:
            stmt = stmt.where(Party.status == status.value)
        stmt = stmt.order_by(Party.created_at.desc(), Party.name)
        return [party.to_dto() for party in self.session.execute(stmt).scalars()]

    def owned_party(self, owner_company_id: UUID, party_id: UUID) -> PartyInfo | None:
        party = self.session.get(Party, party_id)
        if party is None or party.owner_company_id != owner_company_id:
            return None
        return party.to_dto()

    def company_addresses(self, company_id: UUID) -> list[AddressInfo]:
        rows = self.session.execute(
            select(Address)
            .where(Address.company_id == company_id)
            .order_by(Address.created_at, Address.id)
        ).scalars()
        return [row.to_dto() for row in rows]
