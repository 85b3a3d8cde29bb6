"""
DocumentSelector -- read paths for document listings, history and references.

Listing by the counter side narrows candidates in SQL on the counter id or
the stored ``normalize_name`` key, then applies ``ownership.resolve`` to
each row, so listings and single-document checks never disagree about
name-addressed documents.
"""

from uuid import UUID

from sqlalchemy import and_, func, or_, select

from tradedoc_kernel.domain.documents import (
    ActionLogInfo,
    CompanyIdentity,
    CompanyInfo,
    CompanyKind,
    DocumentInfo,
    DocumentType,
    Role,
)
from tradedoc_kernel.domain.ownership import (
    OwnershipDecision,
    names_match,
    normalize_name,
    resolve,
)
from tradedoc_kernel.models.action_log import DocumentActionLog
from tradedoc_kernel.models.company import Company
from tradedoc_kernel.models.document import PARENT_REF_COLUMNS, Document
from tradedoc_kernel.selectors.base import BaseSelector


def _matches_search(doc: Document, needle: str) -> bool:
    needle = needle.casefold()
    return any(
        value and needle in value.casefold()
        for value in (doc.human_code, doc.issuing_company_name, doc.counter_company_name)
    )


class DocumentSelector(BaseSelector[Document]):

    def list_for_company(
        self,
        document_type: DocumentType,
        company: CompanyIdentity,
        role: Role,
        search: str | None = None,
        status: str | None = None,
    ) -> list[DocumentInfo]:
        """
        Documents of ``document_type`` where ``company`` holds ``role``.

        Args:
            search: Case-insensitive substring over human code and both
                party names.  Blank means no filter.
            status: Exact status value; None means no filter.

        Returns:
            Newest first.
        """
        stmt = select(Document).where(Document.document_type == document_type.value)

        if role is Role.ISSUER:
            stmt = stmt.where(Document.issuing_company_id == company.company_id)
        else:
            stmt = stmt.where(
                or_(
                    Document.counter_company_id == company.company_id,
                    and_(
                        Document.counter_company_id.is_(None),
                        Document.counter_name_key == normalize_name(company.name),
                    ),
                )
            )

        if status is not None:
            stmt = stmt.where(Document.status == status)

        stmt = stmt.order_by(Document.created_at.desc(), Document.human_code.desc())

        needle = (search or "").strip()
        results = []
        for doc in self.session.execute(stmt).scalars():
            if resolve(doc, company, role) is not OwnershipDecision.AUTHORIZED:
                continue
            if needle and not _matches_search(doc, needle):
                continue
            results.append(doc.to_dto())
        return results

    def action_history(self, document_id: UUID) -> list[ActionLogInfo]:
        rows = self.session.execute(
            select(DocumentActionLog)
            .where(DocumentActionLog.document_id == document_id)
            .order_by(DocumentActionLog.entry_number)
        ).scalars()
        return [row.to_dto() for row in rows]

    def next_history_entry(self, document_id: UUID) -> int:
        """Entry number for the next log row; call with the document row locked."""
        current = self.session.execute(
            select(func.max(DocumentActionLog.entry_number))
            .where(DocumentActionLog.document_id == document_id)
        ).scalar_one()
        return (current or 0) + 1

    def count_referencing(self, document_id: UUID) -> int:
        """Number of documents that name ``document_id`` as a parent."""
        conditions = [
            getattr(Document, column) == document_id
            for column in PARENT_REF_COLUMNS.values()
        ]
        return self.session.execute(
            select(func.count(Document.id)).where(or_(*conditions))
        ).scalar_one()

    def find_companies_by_name(self, name: str, kind: CompanyKind) -> list[CompanyInfo]:
        """Registered companies of ``kind`` whose name matches case-insensitively."""
        key = normalize_name(name)
        if key is None:
            return []
        rows = self.session.execute(
            select(Company)
            .where(Company.kind == kind.value, Company.name_key == key)
            .order_by(Company.created_at)
        ).scalars()
        return [row.to_dto() for row in rows if names_match(row.name, name)]
