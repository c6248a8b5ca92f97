from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wishrift.db.base import Base


class PriceHistory(Base):
    """Append-only price timeline of an item."""

    __tablename__ = "price_history"

    id: Mapped[int] = mapped_column(primary_key=True)

    item_id: Mapped[int] = mapped_column(
        ForeignKey("wishlist_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    price: Mapped[int] = mapped_column(Integer, nullable=False)  # cents
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    item = relationship("WishListItem", back_populates="history")


Index("ix_price_history_item_date", PriceHistory.item_id, PriceHistory.date)
