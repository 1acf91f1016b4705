# storefront/services/cart_service.py
from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFound, ValidationFailed
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.lock_service import LockService
from storefront.services.pricing import PricingEngine
from storefront.utils.settings import DEFAULT_TAX_RATE, DEFAULT_SHIPPING
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def cart_to_dict(cart: CartModel, items: list[CartItemModel]) -> Dict[str, Any]:
    shipping = cart.shipping if cart.cart_total > 0 else Decimal("0.00")
    return {
        "cart_id": cart.id,
        "user_id": cart.user_id,
        "num_items": cart.num_items,
        "cart_total": cart.cart_total,
        "tax_rate": cart.tax_rate,
        "tax": cart.tax,
        "shipping": shipping,
        "order_total": cart.order_total,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "quantity": i.quantity,
                "name": i.product.name,
                "company": i.product.company,
                "image": i.product.image,
                "price": i.product.price,
            }
            for i in items
        ],
    }


class CartService:
    """
    Cart use cases.

    Every command runs under the caller's cart lock and inside a single
    transaction: mutate line items, recompute totals, commit. Any error
    rolls the whole thing back.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.pricing = PricingEngine(db)
        self.lock_service = lock_service

    @contextmanager
    def _transaction(self, user_id: str):
        with self.lock_service.cart_lock(user_id):
            try:
                yield
                self.repo.commit()
            except Exception as e:
                logger.error(f"Cart operation for user {user_id} failed: {e}")
                self.repo.rollback()
                raise

    #query
    def fetch_cart_item_count(self, user_id: str | None) -> int:
        if not user_id:
            return 0
        cart = self.repo.get_cart_by_user(user_id)
        return cart.num_items if cart else 0

    def fetch_or_create_cart(self, user_id: str, error_on_failure: bool = False) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)

        if cart:
            return cart

        if error_on_failure:
            raise NotFound("Cart not found")

        cart = self.repo.create_cart(
            CartModel(
                user_id=user_id,
                tax_rate=DEFAULT_TAX_RATE,
                shipping=DEFAULT_SHIPPING,
                version=1,
            )
        )
        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    #commands
    def view_cart(self, user_id: str) -> Dict[str, Any]:
        #recompute on view so catalog price changes show up
        with self._transaction(user_id):
            cart = self.fetch_or_create_cart(user_id)
            items, cart = self.pricing.recompute(cart)
        return cart_to_dict(cart, items)

    def add_to_cart(self, user_id: str, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationFailed("Quantity must be greater than 0")

        if not self.products.get_product(product_id):
            raise NotFound("Product not found")

        with self._transaction(user_id):
            cart = self.fetch_or_create_cart(user_id)

            existing_item = self.repo.get_cart_item(cart.id, product_id)
            if existing_item:
                logger.info(
                    f"Product {product_id} already in cart {cart.id}, quantity "
                    f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
                self.repo.add_cart_item(existing_item)
            else:
                logger.info(f"Adding product {product_id} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        quantity=quantity,
                    )
                )

            items, cart = self.pricing.recompute(cart)

        return cart_to_dict(cart, items)

    def update_cart_item(self, user_id: str, cart_item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationFailed("Quantity must be greater than 0")

        with self._transaction(user_id):
            cart = self.fetch_or_create_cart(user_id, error_on_failure=True)

            rowcount = self.repo.set_item_quantity(cart.id, cart_item_id, quantity)
            if rowcount == 0:
                raise NotFound("Cart item not found")

            items, cart = self.pricing.recompute(cart)

        logger.info(f"Cart item {cart_item_id} in cart {cart.id} set to {quantity}")
        return cart_to_dict(cart, items)

    def remove_cart_item(self, user_id: str, cart_item_id: int) -> Dict[str, Any]:
        with self._transaction(user_id):
            cart = self.fetch_or_create_cart(user_id, error_on_failure=True)

            rowcount = self.repo.delete_cart_item(cart.id, cart_item_id)
            if rowcount == 0:
                raise NotFound("Cart item not found")

            items, cart = self.pricing.recompute(cart)

        logger.info(f"Cart item {cart_item_id} removed from cart {cart.id}")
        return cart_to_dict(cart, items)
