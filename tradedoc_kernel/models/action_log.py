"""
Document action log -- one row per successful create, action, edit and delete.

``document_id`` is not a foreign key: the row survives the
deletion of the document it describes.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import Base, UUIDString
from tradedoc_kernel.db.types import HumanCode, LongText, Money
from tradedoc_kernel.domain.documents import ActionLogInfo, DocumentType


class DocumentActionLog(Base):
    __tablename__ = "document_action_log"

    __table_args__ = (
        UniqueConstraint("document_id", "entry_number", name="uq_action_log_entry"),
        Index("idx_action_log_document", "document_id", "occurred_at"),
        Index("idx_action_log_company", "company_id"),
    )

    document_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    # 1-based position in the document's history, assigned under the document row lock
    entry_number: Mapped[int] = mapped_column(Integer, nullable=False)
    document_type: Mapped[str] = mapped_column(String(30), nullable=False)
    human_code: Mapped[HumanCode] = mapped_column(nullable=False)

    # "create", "update", "delete" or a workflow action name
    action: Mapped[str] = mapped_column(String(40), nullable=False)

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    from_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    to_status: Mapped[str | None] = mapped_column(String(30), nullable=True)

    reason: Mapped[LongText | None] = mapped_column(nullable=True)
    amount: Mapped[Money | None] = mapped_column(nullable=True)

    occurred_at: Mapped[datetime] = mapped_column(nullable=False)

    def to_dto(self) -> ActionLogInfo:
        return ActionLogInfo(
            document_id=self.document_id,
            entry_number=self.entry_number,
            document_type=DocumentType(self.document_type),
            human_code=self.human_code,
            action=self.action,
            company_id=self.company_id,
            from_status=self.from_status,
            to_status=self.to_status,
            reason=self.reason,
            amount=self.amount,
            occurred_at=self.occurred_at,
        )
