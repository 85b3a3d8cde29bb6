"""Document line items, ordered by serial number 1..N."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tradedoc_kernel.db.base import Base, UUIDString
from tradedoc_kernel.db.types import LongText, Money, Quantity
from tradedoc_kernel.domain.documents import LineItemInfo


class LineItem(Base):
    __tablename__ = "document_line_items"

    __table_args__ = (
        UniqueConstraint("document_id", "serial_number", name="uq_line_item_serial"),
        Index("idx_line_item_document", "document_id"),
    )

    document_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("trade_documents.id", ondelete="CASCADE"),
        nullable=False,
    )

    serial_number: Mapped[int] = mapped_column(Integer, nullable=False)

    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_description: Mapped[LongText | None] = mapped_column(nullable=True)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    uom: Mapped[str | None] = mapped_column(String(30), nullable=True)

    quantity: Mapped[Quantity] = mapped_column(nullable=False)
    unit_price: Mapped[Money] = mapped_column(nullable=False)

    # quantity * unit_price, exact
    sub_total: Mapped[Money] = mapped_column(nullable=False)

    # Packing lists only
    gross_weight: Mapped[Decimal | None] = mapped_column(nullable=True)
    net_weight: Mapped[Decimal | None] = mapped_column(nullable=True)
    packages: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def to_dto(self) -> LineItemInfo:
        return LineItemInfo(
            serial_number=self.serial_number,
            product_name=self.product_name,
            product_description=self.product_description,
            sku=self.sku,
            uom=self.uom,
            quantity=self.quantity,
            unit_price=self.unit_price,
            sub_total=self.sub_total,
            gross_weight=self.gross_weight,
            net_weight=self.net_weight,
            packages=self.packages,
        )
