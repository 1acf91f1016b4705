#storefront/data/models/cart.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    tax_rate = Column(Numeric(5, 4), nullable=False)
    shipping = Column(Numeric(10, 2), nullable=False)

    #derived by the pricing engine, never written directly
    num_items = Column(Integer, nullable=False, default=0)
    cart_total = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    tax = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    order_total = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
    )
