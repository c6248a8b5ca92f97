from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wishrift.db.base import Base


class WishList(Base):
    __tablename__ = "wishlists"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # capability token for the public share link, never reassigned
    share_id: Mapped[str] = mapped_column(
        String(32), unique=True, index=True, nullable=False
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

    owner = relationship("User", back_populates="wishlists")
    items = relationship(
        "WishListItem", back_populates="wishlist", cascade="all, delete-orphan"
    )
    shared_with = relationship(
        "SharedAccess", back_populates="wishlist", cascade="all, delete-orphan"
    )
