"""Quotation columns on the shared ``trade_documents`` table."""

from datetime import date

from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class Quotation(Document):

    extra_fields = ("validity_date",)

    # Offer expires after this date
    validity_date: Mapped[date | None] = mapped_column(nullable=True)

    __mapper_args__ = {"polymorphic_identity": "quotation"}
