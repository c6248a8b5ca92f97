from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from wishrift.db.base import Base


class SharedAccess(Base):
    __tablename__ = "shared_access"
    __table_args__ = (
        UniqueConstraint("wishlist_id", "user_id", name="uq_shared_access_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    wishlist_id: Mapped[int] = mapped_column(
        ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    wishlist = relationship("WishList", back_populates="shared_with")
    user = relationship("User")
