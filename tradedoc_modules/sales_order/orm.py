"""Sales order columns on the shared ``trade_documents`` table."""

from datetime import date

from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class SalesOrder(Document):

    extra_fields = ("planned_ship_date",)

    planned_ship_date: Mapped[date | None] = mapped_column(nullable=True)

    __mapper_args__ = {"polymorphic_identity": "sales_order"}
