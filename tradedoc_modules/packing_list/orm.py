"""Packing list columns on the shared ``trade_documents`` table.

``issue_date`` is the packing date.  The three totals are derived from the
line items on every write and are never set directly.
"""

from decimal import Decimal

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class PackingList(Document):

    extra_fields = (
        "shipment_tracking_id",
        "total_gross_weight",
        "total_net_weight",
        "total_packages",
    )

    shipment_tracking_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    total_gross_weight: Mapped[Decimal | None] = mapped_column(nullable=True)
    total_net_weight: Mapped[Decimal | None] = mapped_column(nullable=True)
    total_packages: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "packing_list"}
