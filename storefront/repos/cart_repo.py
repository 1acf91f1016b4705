# storefront/repos/cart_repo.py
from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Data access for carts and their line items.
    Nothing here commits: the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_carts_holding_product(self, product_id: int) -> list[CartModel]:
        return list(
            self.db.execute(
                select(CartModel)
                .join(CartItemModel, CartItemModel.cart_id == CartModel.id)
                .where(CartItemModel.product_id == product_id)
                .order_by(CartModel.id.asc())
            ).scalars().unique().all()
        )

    def delete_items_for_product(self, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def get_cart_by_user(self, user_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .order_by(CartModel.created_at.asc(), CartModel.id.asc())
            .limit(1)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def delete_cart(self, cart: CartModel) -> None:
        self.db.delete(cart)
        self.db.flush()

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        #creation order keeps recomputation deterministic
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.created_at.asc(), CartItemModel.id.asc())
                .execution_options(populate_existing=True)
            ).scalars().unique().all()
        )

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalars().first()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def set_item_quantity(self, cart_id: int, item_id: int, quantity: int) -> int:
        #cart_id in the predicate keeps users away from other carts' items
        result = self.db.execute(
            update(CartItemModel)
            .where(CartItemModel.id == item_id, CartItemModel.cart_id == cart_id)
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cart_item(self, cart_id: int, item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.id == item_id, CartItemModel.cart_id == cart_id)
            .execution_options(synchronize_session=False)
        )
        cart = self.db.get(CartModel, cart_id)
        if cart is not None:
            self.db.expire(cart, ["items"])
        return result.rowcount

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        #compare-and-set on version, 0 rows means someone else got there first
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def refresh(self, cart: CartModel) -> CartModel:
        self.db.refresh(cart)
        return cart

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
