from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Boolean
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    #snapshot of the cart totals at checkout
    num_items = Column(Integer, nullable=False)
    cart_total = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), nullable=False)
    shipping = Column(Numeric(10, 2), nullable=False)
    order_total = Column(Numeric(10, 2), nullable=False)

    email = Column(String(255), nullable=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
