"""RFQ columns on the shared ``trade_documents`` table."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.models.document import Document


class RFQ(Document):
    """Buyer's request.  ``due_date`` (base column) is the reply deadline."""

    extra_fields = ("project_name", "project_description")

    project_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    project_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "rfq"}
