"""Delivery note columns on the shared ``trade_documents`` table.

``issue_date`` is the delivery date.
"""

from datetime import date

from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class DeliveryNote(Document):

    extra_fields = ("shipping_date",)

    shipping_date: Mapped[date | None] = mapped_column(nullable=True)

    __mapper_args__ = {"polymorphic_identity": "delivery_note"}
