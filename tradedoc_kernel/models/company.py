"""
Company -- a registered buyer or seller.

Company names are not unique.  Documents keep their own snapshot of both
party names, so renaming a company never rewrites issued documents; it
only changes which name-addressed documents the company resolves to.
"""

from sqlalchemy import Index, String, event
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import TrackedBase
from tradedoc_kernel.db.types import CompanyName
from tradedoc_kernel.domain.documents import CompanyIdentity, CompanyInfo, CompanyKind
from tradedoc_kernel.domain.ownership import normalize_name


class Company(TrackedBase):
    __tablename__ = "companies"

    __table_args__ = (
        Index("idx_company_name", "name"),
        Index("idx_company_kind", "kind"),
        Index("idx_company_name_key", "kind", "name_key"),
    )

    name: Mapped[CompanyName] = mapped_column(nullable=False)

    # normalize_name(name); lets name lookups filter in SQL
    name_key: Mapped[CompanyName] = mapped_column(nullable=False)

    kind: Mapped[str] = mapped_column(String(10), nullable=False)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Stored-file reference of the uploaded logo
    logo_ref: Mapped[str | None] = mapped_column(String(500), nullable=True)

    @property
    def company_kind(self) -> CompanyKind:
        return CompanyKind(self.kind)

    def identity(self) -> CompanyIdentity:
        return CompanyIdentity(company_id=self.id, name=self.name)

    def to_dto(self) -> CompanyInfo:
        return CompanyInfo(
            id=self.id,
            name=self.name,
            kind=CompanyKind(self.kind),
            email=self.email,
            phone=self.phone,
            address=self.address,
            logo_ref=self.logo_ref,
        )

    def __repr__(self) -> str:
        return f"<Company {self.name} ({self.kind})>"


@event.listens_for(Company, "before_insert")
@event.listens_for(Company, "before_update")
def _sync_name_key(mapper, connection, target: Company) -> None:
    target.name_key = normalize_name(target.name) or ""
