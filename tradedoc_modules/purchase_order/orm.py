"""Purchase order columns on the shared ``trade_documents`` table."""

from datetime import date

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class PurchaseOrder(Document):

    extra_fields = ("expected_delivery_date", "delivery_address")

    expected_delivery_date: Mapped[date | None] = mapped_column(nullable=True)
    delivery_address: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    __mapper_args__ = {"polymorphic_identity": "purchase_order"}
