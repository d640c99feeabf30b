import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Index, Integer, String, func, text
from sqlalchemy.orm import relationship

from storefront.db import Base


class CartStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    ABANDONED = "ABANDONED"


class Cart(Base):
    __tablename__ = "carts"
    id = Column(Integer, primary_key=True, index=True)
    session_token = Column(String(32), unique=True, index=True, nullable=False)
    user_id = Column(Integer, nullable=True, index=True)
    status = Column(
        Enum(CartStatus, name="cart_status"),
        nullable=False,
        default=CartStatus.ACTIVE,
    )
    abandoned_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )

    __table_args__ = (
        # one active cart per owner; abandoned carts keep their user_id
        Index(
            "uq_carts_active_user",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'ACTIVE'"),
            postgresql_where=text("status = 'ACTIVE'"),
        ),
    )

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_quantity(self) -> int:
        return sum(it.quantity for it in self.items)

    @property
    def total_price_cents(self) -> int:
        return sum(it.total_price_cents for it in self.items)

    def mark_abandoned(self, now=None):
        self.status = CartStatus.ABANDONED
        self.abandoned_at = now or datetime.now(timezone.utc)

    def __repr__(self):
        return f"<Cart id={self.id} user={self.user_id} status={self.status}>"
