# storefront/services/favorite_service.py
from sqlalchemy.orm import Session

from storefront.data.models.favorite import FavoriteModel
from storefront.domain.errors import NotFound
from storefront.repos.favorite_repo import FavoriteRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class FavoriteService:
    def __init__(self, db: Session):
        self.repo = FavoriteRepo(db)
        self.products = ProductRepo(db)

    def fetch_favorite_id(self, user_id: str, product_id: int) -> int | None:
        favorite = self.repo.find_favorite(user_id, product_id)
        return favorite.id if favorite else None

    def toggle_favorite(self, user_id: str, product_id: int) -> bool:
        """Returns membership after the toggle."""
        if not self.products.get_product(product_id):
            raise NotFound("Product not found")

        favorite = self.repo.find_favorite(user_id, product_id)
        if favorite:
            self.repo.delete_favorite(favorite)
            logger.info(f"User {user_id} removed product {product_id} from favorites")
            return False

        self.repo.create_favorite(FavoriteModel(user_id=user_id, product_id=product_id))
        logger.info(f"User {user_id} added product {product_id} to favorites")
        return True

    def fetch_user_favorites(self, user_id: str) -> list[FavoriteModel]:
        return self.repo.list_by_user(user_id)
