"""
PartyService -- each company's counter-party directory and address book.

A buyer keeps a directory of sellers and a seller one of buyers.  Entries
are private to the owning company; every read and write is scoped to it,
and an entry or address of another company reports NOT_FOUND exactly like
a missing one.  Directory entries feed document creation through
``counter_party_id`` (see ``ChainLinker``); documents copy the entry's
name and contacts, so later edits here never touch issued documents.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping
from uuid import UUID

from sqlalchemy.orm import Session

from tradedoc_kernel.domain.documents import ActingCompany
from tradedoc_kernel.domain.parties import AddressType, PartyStatus
from tradedoc_kernel.exceptions import (
    AddressNotFoundError,
    InvalidFieldValueError,
    MissingFieldError,
    PartyNotFoundError,
    TradeDocError,
    UnauthenticatedError,
    UnknownFieldError,
)
from tradedoc_kernel.logging_config import LogContext, get_logger
from tradedoc_kernel.models.company import Company
from tradedoc_kernel.models.party import Address, Party
from tradedoc_kernel.selectors.party_selector import PartySelector
from tradedoc_kernel.services.base import BaseService
from tradedoc_services.payload import parse_text
from tradedoc_services.results import OperationResult

logger = get_logger("services.parties")

PARTY_FIELDS = ("name", "contact_name", "email", "phone", "status", "notes")
ADDRESS_FIELDS = ("address_type", "line1", "line2", "postal_code")
_REQUIRED_ADDRESS_FIELDS = ("line1", "postal_code")


def _field(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _parse_choice(field: str, enum_type, value: Any):
    if value is None:
        return None
    if isinstance(value, enum_type):
        return value
    text = parse_text(field, value)
    if text is None:
        return None
    try:
        return enum_type(text.upper())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise InvalidFieldValueError(field, f"must be one of {choices}") from None


def parse_status(value: Any) -> PartyStatus | None:
    return _parse_choice("status", PartyStatus, value)


def _check_names(payload: Mapping[str, Any], allowed: tuple[str, ...], prefix: str = "") -> None:
    for key in payload:
        if key not in allowed:
            raise UnknownFieldError(_field(prefix, str(key)))


def parse_address(payload: Any, prefix: str = "", partial: bool = False) -> dict[str, Any]:
    """
    Column values for an address payload.

    With ``partial`` only the keys present are returned, but the required
    lines still cannot be cleared.

    Raises:
        UnknownFieldError / MissingFieldError / InvalidFieldValueError,
        each naming ``<prefix>.<field>``.
    """
    if not isinstance(payload, Mapping):
        raise InvalidFieldValueError(prefix or "address", "must be a mapping")
    _check_names(payload, ADDRESS_FIELDS, prefix)

    values: dict[str, Any] = {}
    for name in ("line1", "line2", "postal_code"):
        if name in payload or not partial:
            values[name] = parse_text(_field(prefix, name), payload.get(name))
    if "address_type" in payload or not partial:
        address_type = _parse_choice(
            _field(prefix, "address_type"), AddressType, payload.get("address_type")
        )
        if address_type is None and not partial:
            address_type = AddressType.COMPANY
        if address_type is not None:
            values["address_type"] = address_type.value
        elif "address_type" in payload:
            raise MissingFieldError(_field(prefix, "address_type"))

    for name in _REQUIRED_ADDRESS_FIELDS:
        if name in values and values[name] is None:
            raise MissingFieldError(_field(prefix, name))
    return values


class PartyService(BaseService[Party]):

    def __init__(self, session: Session, auto_commit: bool = True):
        super().__init__(session)
        self._selector = PartySelector(session)
        self._auto_commit = auto_commit

    def _run(
        self,
        operation: str,
        acting: ActingCompany | None,
        work: Callable[[], OperationResult],
    ) -> OperationResult:
        company_id = acting.company_id if acting else None
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
                    "party_operation_rejected",
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
                logger.exception("party_operation_failed", extra={"operation": operation})
                raise
            return result

    def _acting_company(self, acting: ActingCompany | None) -> Company:
        if acting is None:
            raise UnauthenticatedError()
        company = self.session.get(Company, acting.company_id)
        if company is None or company.company_kind is not acting.kind:
            raise UnauthenticatedError(
                f"Acting company {acting.company_id} is not a registered {acting.kind.value}"
            )
        return company

    def _owned_party(self, company: Company, party_id: Any) -> Party:
        try:
            key = party_id if isinstance(party_id, UUID) else UUID(str(party_id))
        except ValueError:
            raise PartyNotFoundError(str(party_id)) from None
        party = self._lock_row(Party, key)
        if party is None or party.owner_company_id != company.id:
            raise PartyNotFoundError(str(key))
        return party

    def _owned_address(self, company: Company, address_id: Any) -> tuple[Address, Party | None]:
        """The address and, for a directory entry's address, its party."""
        try:
            key = address_id if isinstance(address_id, UUID) else UUID(str(address_id))
        except ValueError:
            raise AddressNotFoundError(str(address_id)) from None
        address = self._lock_row(Address, key)
        if address is None:
            raise AddressNotFoundError(str(key))
        party = None
        if address.company_id is not None:
            owner_id = address.company_id
        else:
            party = self.session.get(Party, address.party_id)
            owner_id = party.owner_company_id if party is not None else None
        if owner_id != company.id:
            raise AddressNotFoundError(str(key))
        return address, party

    # -- directory ------------------------------------------------------------

    def create_party(
        self,
        acting: ActingCompany | None,
        payload: Mapping[str, Any],
    ) -> OperationResult:
        """
        Add an entry to the acting company's directory.

        ``payload`` takes the party fields plus an optional ``addresses``
        list; each address is validated as ``addresses[i].<field>``.
        """

        def work() -> OperationResult:
            company = self._acting_company(acting)
            _check_names(payload, PARTY_FIELDS + ("addresses",))
            name = parse_text("name", payload.get("name"))
            if name is None:
                raise MissingFieldError("name")

            raw_addresses = payload.get("addresses") or []
            if isinstance(raw_addresses, (str, bytes, Mapping)) or not hasattr(raw_addresses, "__iter__"):
                raise InvalidFieldValueError("addresses", "must be a list of addresses")
            addresses = [
                Address(created_by_id=company.id, **parse_address(entry, f"addresses[{index}]"))
                for index, entry in enumerate(raw_addresses)
            ]

            party = Party(
                owner_company_id=company.id,
                kind=company.company_kind.other.value,
                name=name,
                contact_name=parse_text("contact_name", payload.get("contact_name")),
                email=parse_text("email", payload.get("email")),
                phone=parse_text("phone", payload.get("phone")),
                status=(parse_status(payload.get("status")) or PartyStatus.ACTIVE).value,
                notes=parse_text("notes", payload.get("notes")),
                created_by_id=company.id,
                addresses=addresses,
            )
            self.session.add(party)
            self.session.flush()
            logger.info(
                "party_created",
                extra={
                    "party_id": party.id,
                    "kind": party.kind,
                    "address_count": len(addresses),
                },
            )
            return OperationResult.success(party=party.to_dto())

        return self._run("create_party", acting, work)

    def list_parties(
        self,
        acting: ActingCompany | None,
        status: PartyStatus | str | None = None,
    ) -> OperationResult:
        """The acting company's directory, newest first."""

        def work() -> OperationResult:
            company = self._acting_company(acting)
            parties = self._selector.list_parties(company.id, parse_status(status))
            return OperationResult.success(parties=tuple(parties))

        return self._run("list_parties", acting, work)

    def get_party(self, acting: ActingCompany | None, party_id: UUID | str) -> OperationResult:
        def work() -> OperationResult:
            company = self._acting_company(acting)
            return OperationResult.success(party=self._owned_party(company, party_id).to_dto())

        return self._run("get_party", acting, work)

    def update_party(
        self,
        acting: ActingCompany | None,
        party_id: UUID | str,
        changes: Mapping[str, Any],
    ) -> OperationResult:
        """Edit an entry's fields; addresses change through the address operations."""

        def work() -> OperationResult:
            company = self._acting_company(acting)
            party = self._owned_party(company, party_id)
            _check_names(changes, PARTY_FIELDS)

            values: dict[str, Any] = {}
            for key, value in changes.items():
                if key == "status":
                    status = parse_status(value)
                    if status is None:
                        raise MissingFieldError("status")
                    values[key] = status.value
                else:
                    values[key] = parse_text(key, value)
            if "name" in values and values["name"] is None:
                raise MissingFieldError("name")

            for key, value in values.items():
                setattr(party, key, value)
            party.updated_by_id = company.id
            self.session.flush()
            logger.info(
                "party_updated",
                extra={"party_id": party.id, "updated_fields": sorted(values)},
            )
            return OperationResult.success(party=party.to_dto())

        return self._run("update_party", acting, work)

    def delete_party(self, acting: ActingCompany | None, party_id: UUID | str) -> OperationResult:
        """Remove an entry and its addresses.  Issued documents keep their copies."""

        def work() -> OperationResult:
            company = self._acting_company(acting)
            party = self._owned_party(company, party_id)
            removed = party.to_dto()
            self.session.delete(party)
            self.session.flush()
            logger.info("party_deleted", extra={"party_id": removed.id})
            return OperationResult.success(party=removed)

        return self._run("delete_party", acting, work)

    # -- addresses ------------------------------------------------------------

    def add_party_address(
        self,
        acting: ActingCompany | None,
        party_id: UUID | str,
        payload: Mapping[str, Any],
    ) -> OperationResult:
        def work() -> OperationResult:
            company = self._acting_company(acting)
            party = self._owned_party(company, party_id)
            address = Address(created_by_id=company.id, **parse_address(payload))
            party.addresses.append(address)
            self.session.flush()
            return OperationResult.success(address=address.to_dto())

        return self._run("add_party_address", acting, work)

    def add_company_address(
        self,
        acting: ActingCompany | None,
        payload: Mapping[str, Any],
    ) -> OperationResult:
        """Add to the acting company's own address book."""

        def work() -> OperationResult:
            company = self._acting_company(acting)
            address = Address(company_id=company.id, created_by_id=company.id, **parse_address(payload))
            self.session.add(address)
            self.session.flush()
            return OperationResult.success(address=address.to_dto())

        return self._run("add_company_address", acting, work)

    def list_company_addresses(self, acting: ActingCompany | None) -> OperationResult:
        def work() -> OperationResult:
            company = self._acting_company(acting)
            return OperationResult.success(
                addresses=tuple(self._selector.company_addresses(company.id))
            )

        return self._run("list_company_addresses", acting, work)

    def update_address(
        self,
        acting: ActingCompany | None,
        address_id: UUID | str,
        changes: Mapping[str, Any],
    ) -> OperationResult:
        """Edit any address the acting company owns, its own or a directory entry's."""

        def work() -> OperationResult:
            company = self._acting_company(acting)
            address, _ = self._owned_address(company, address_id)
            values = parse_address(changes, partial=True)
            for key, value in values.items():
                setattr(address, key, value)
            address.updated_by_id = company.id
            self.session.flush()
            return OperationResult.success(address=address.to_dto())

        return self._run("update_address", acting, work)

    def delete_address(self, acting: ActingCompany | None, address_id: UUID | str) -> OperationResult:
        def work() -> OperationResult:
            company = self._acting_company(acting)
            address, party = self._owned_address(company, address_id)
            removed = address.to_dto()
            if party is not None:
                party.addresses.remove(address)
            else:
                self.session.delete(address)
            self.session.flush()
            return OperationResult.success(address=removed)

        return self._run("delete_address", acting, work)
