"""Invoice columns on the shared ``trade_documents`` table.

``due_date`` (base column) is the payment due date.
"""

from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class Invoice(Document):

    extra_fields = ("paid_amount", "remaining_amount", "payment_receipt_ref")

    # paid_amount + remaining_amount == total_amount
    paid_amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    remaining_amount: Mapped[Decimal | None] = mapped_column(nullable=True)

    # Latest stored receipt
    payment_receipt_ref: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __mapper_args__ = {"polymorphic_identity": "invoice"}
