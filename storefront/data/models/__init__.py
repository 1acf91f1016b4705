#all models are imported here so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.review import ReviewModel
from storefront.data.models.favorite import FavoriteModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "ReviewModel",
    "FavoriteModel",
]
