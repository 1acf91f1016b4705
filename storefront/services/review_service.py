# storefront/services/review_service.py
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel
from storefront.domain.errors import NotFound, ValidationFailed
from storefront.domain.schemas import ReviewIn, validate_with_schema
from storefront.repos.product_repo import ProductRepo
from storefront.repos.review_repo import ReviewRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.repo = ReviewRepo(db)
        self.products = ProductRepo(db)

    def create_review(self, user_id: str, payload: dict) -> ReviewModel:
        validated = validate_with_schema(ReviewIn, payload)

        if not self.products.get_product(validated.product_id):
            raise NotFound("Product not found")

        #one review per user and product
        if self.find_existing_review(user_id, validated.product_id):
            raise ValidationFailed("You have already reviewed this product")

        review = self.repo.create_review(ReviewModel(**validated.model_dump(), user_id=user_id))
        logger.info(f"Review {review.id} by {user_id} for product {review.product_id}")
        return review

    def find_existing_review(self, user_id: str, product_id: int) -> ReviewModel | None:
        return self.repo.find_review(user_id, product_id)

    def fetch_product_reviews(self, product_id: int) -> list[ReviewModel]:
        return self.repo.list_by_product(product_id)

    def fetch_product_rating(self, product_id: int) -> Dict[str, Any]:
        avg, count = self.repo.rating_stats(product_id)
        return {
            "rating": round(avg, 1) if avg is not None else 0,
            "count": count,
        }

    def fetch_reviews_by_user(self, user_id: str) -> list[Dict[str, Any]]:
        return [
            {
                "id": r.id,
                "rating": r.rating,
                "comment": r.comment,
                "product_name": r.product.name,
                "product_image": r.product.image,
            }
            for r in self.repo.list_by_user(user_id)
        ]

    def delete_review(self, user_id: str, review_id: int) -> None:
        #owner check lives in the delete predicate
        rowcount = self.repo.delete_review(review_id, user_id)
        if rowcount == 0:
            raise NotFound("Review not found")
        logger.info(f"Review {review_id} deleted by {user_id}")
