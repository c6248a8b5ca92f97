from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wishrift.db.base import Base


class PriceAlert(Base):
    __tablename__ = "price_alerts"
    __table_args__ = (
        CheckConstraint("target_price > 0", name="ck_alerts_target_price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # several alerts per item are allowed
    item_id: Mapped[int] = mapped_column(
        ForeignKey("wishlist_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    target_price: Mapped[int] = mapped_column(Integer, nullable=False)  # cents
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    item = relationship("WishListItem", back_populates="alerts")

    def is_triggered_by(self, price: int) -> bool:
        return bool(self.is_active) and price <= self.target_price
