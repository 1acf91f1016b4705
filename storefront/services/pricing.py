# storefront/services/pricing.py
"""
Cart pricing.

``compute_totals`` is the pure part: given a cart's tax rate, its flat
shipping fee and its line items, it derives

    num_items   = sum(quantity)
    cart_total  = sum(quantity * unit price)
    tax         = cart_total * tax_rate        (ROUND_HALF_UP, 2 places)
    shipping    = shipping if cart_total > 0 else 0
    order_total = cart_total + tax + shipping

``PricingEngine.recompute`` reads the current line items of a cart, runs
``compute_totals`` and writes the result back onto the cart row. It never
commits; callers run it inside the same transaction as the mutation that
made it necessary.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import Conflict
from storefront.repos.cart_repo import CartRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CartTotals:
    num_items: int
    cart_total: Decimal
    tax: Decimal
    shipping: Decimal
    order_total: Decimal

    def as_dict(self) -> dict:
        return {
            "num_items": self.num_items,
            "cart_total": self.cart_total,
            "tax": self.tax,
            "order_total": self.order_total,
        }


def compute_totals(
    tax_rate: Decimal,
    shipping: Decimal,
    lines: Iterable[Tuple[int, Decimal]],
) -> CartTotals:
    """lines are (quantity, unit price) pairs"""
    num_items = 0
    cart_total = ZERO

    for quantity, price in lines:
        num_items += quantity
        cart_total += Decimal(quantity) * Decimal(str(price))

    cart_total = to_money(cart_total)
    tax = to_money(cart_total * Decimal(str(tax_rate)))
    #no shipping charge on an empty cart
    shipping_cost = to_money(shipping) if cart_total > ZERO else ZERO
    order_total = to_money(cart_total + tax + shipping_cost)

    return CartTotals(
        num_items=num_items,
        cart_total=cart_total,
        tax=tax,
        shipping=shipping_cost,
        order_total=order_total,
    )


class PricingEngine:
    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    def recompute(self, cart: CartModel) -> Tuple[list[CartItemModel], CartModel]:
        #always the full current item set, never an incremental delta
        items = self.repo.get_cart_items(cart.id)
        totals = compute_totals(
            cart.tax_rate,
            cart.shipping,
            ((i.quantity, i.product.price) for i in items),
        )

        old_version = cart.version
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=old_version,
            new_data={
                **totals.as_dict(),
                "version": old_version + 1,
                "updated_at": datetime.now(timezone.utc),
            },
        )

        if rowcount == 0:
            logger.warning(f"Cart {cart.id} changed under us (version {old_version})")
            raise Conflict("Cart was modified by another request")

        cart = self.repo.refresh(cart)

        logger.info(
            f"Cart {cart.id} recomputed: items={totals.num_items} "
            f"subtotal={totals.cart_total} tax={totals.tax} total={totals.order_total}"
        )
        return items, cart
