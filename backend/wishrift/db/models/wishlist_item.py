from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wishrift.db.base import Base


class WishListItem(Base):
    __tablename__ = "wishlist_items"
    __table_args__ = (
        CheckConstraint("current_price >= 0", name="ck_items_current_price"),
        CheckConstraint(
            "original_price IS NULL OR original_price >= 0",
            name="ck_items_original_price",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    wishlist_id: Mapped[int] = mapped_column(
        ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # cents
    current_price: Mapped[int] = mapped_column(Integer, nullable=False)
    original_price: Mapped[int | None] = mapped_column(Integer, nullable=True)

    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    product_url: Mapped[str] = mapped_column(Text, nullable=False)
    store: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    wishlist = relationship("WishList", back_populates="items")
    history = relationship(
        "PriceHistory", back_populates="item", cascade="all, delete-orphan"
    )
    alerts = relationship(
        "PriceAlert", back_populates="item", cascade="all, delete-orphan"
    )
    listings = relationship(
        "ProductListing", back_populates="item", cascade="all, delete-orphan"
    )
