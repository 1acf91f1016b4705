# storefront/services/product_service.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFound, UpstreamFailure
from storefront.domain.schemas import ProductIn, ImageIn, validate_with_schema
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.pricing import PricingEngine
from storefront.services.storage_client import StorageClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Catalog queries (public) and product management (admin).

    Images go to object storage first; the database row is only written
    once the upload returned a public URL.
    """

    def __init__(self, db: Session, storage: StorageClient):
        self.repo = ProductRepo(db)
        self.carts = CartRepo(db)
        self.pricing = PricingEngine(db)
        self.storage = storage

    #queries
    def fetch_featured_products(self) -> list[ProductModel]:
        return self.repo.list_featured()

    def fetch_all_products(self, search: str = "") -> list[ProductModel]:
        return self.repo.search(search.strip())

    def fetch_single_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def fetch_admin_products(self) -> list[ProductModel]:
        return self.repo.search()

    def fetch_admin_product_details(self, product_id: int) -> ProductModel:
        return self.fetch_single_product(product_id)

    #commands
    def _upload(self, image: dict) -> str:
        validated = validate_with_schema(
            ImageIn,
            {
                "filename": image.get("filename"),
                "content_type": image.get("content_type"),
                "size": len(image.get("content") or b""),
            },
        )
        return self.storage.upload(validated.filename, image["content"], validated.content_type)

    def create_product(self, user_id: str, fields: dict, image: dict) -> ProductModel:
        validated = validate_with_schema(ProductIn, fields)
        image_url = self._upload(image)

        try:
            product = self.repo.create_product(
                ProductModel(
                    **validated.model_dump(),
                    image=image_url,
                    created_by=user_id,
                )
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Saving product '{validated.name}' failed: {e}")
            self.storage.delete(image_url)
            raise UpstreamFailure("Could not save product") from e

        logger.info(f"Product {product.id} '{product.name}' created by {user_id}")
        return product

    def update_product(self, product_id: int, fields: dict) -> ProductModel:
        validated = validate_with_schema(ProductIn, fields)
        product = self.fetch_single_product(product_id)

        for key, value in validated.model_dump().items():
            setattr(product, key, value)

        product = self.repo.save(product)
        logger.info(f"Product {product.id} updated")
        return product

    def update_product_image(self, product_id: int, image: dict, old_url: str | None = None) -> ProductModel:
        product = self.fetch_single_product(product_id)
        image_url = self._upload(image)

        self.storage.delete(old_url or product.image)
        product.image = image_url
        product = self.repo.save(product)

        logger.info(f"Product {product.id} image replaced")
        return product

    def delete_product(self, product_id: int) -> ProductModel:
        """
        Removes the product and its cart lines, then reprices every cart that
        held it so no cart keeps totals for items it no longer has.
        """
        product = self.fetch_single_product(product_id)

        try:
            carts = self.carts.get_carts_holding_product(product_id)
            self.carts.delete_items_for_product(product_id)
            self.repo.delete_product(product)
            for cart in carts:
                self.pricing.recompute(cart)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Deleting product {product_id} failed: {e}")
            self.repo.rollback()
            raise

        #best-effort, the row is already gone
        self.storage.delete(product.image)

        logger.info(f"Product {product_id} deleted, {len(carts)} cart(s) repriced")
        return product
