"""Contract columns on the shared ``trade_documents`` table.

``issue_date`` is the effective date.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class Contract(Document):

    extra_fields = (
        "end_date",
        "agreed_total_value",
        "counter_suggestions",
        "counter_response_date",
    )

    end_date: Mapped[date | None] = mapped_column(nullable=True)
    agreed_total_value: Mapped[Decimal | None] = mapped_column(nullable=True)

    # Written by the buyer's actions, never by edits
    counter_suggestions: Mapped[str | None] = mapped_column(Text, nullable=True)
    counter_response_date: Mapped[date | None] = mapped_column(nullable=True)

    __mapper_args__ = {"polymorphic_identity": "contract"}
