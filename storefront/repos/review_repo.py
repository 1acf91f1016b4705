# storefront/repos/review_repo.py
from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def find_review(self, user_id: str, product_id: int) -> ReviewModel | None:
        return self.db.execute(
            select(ReviewModel).where(ReviewModel.user_id == user_id, ReviewModel.product_id == product_id)
        ).scalars().first()

    def list_by_product(self, product_id: int) -> list[ReviewModel]:
        return list(
            self.db.execute(
                select(ReviewModel)
                .where(ReviewModel.product_id == product_id)
                .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
            ).scalars().all()
        )

    def list_by_user(self, user_id: str) -> list[ReviewModel]:
        return list(
            self.db.execute(
                select(ReviewModel)
                .where(ReviewModel.user_id == user_id)
                .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
            ).scalars().all()
        )

    def rating_stats(self, product_id: int) -> tuple[float | None, int]:
        avg, count = self.db.execute(
            select(func.avg(ReviewModel.rating), func.count(ReviewModel.id)).where(
                ReviewModel.product_id == product_id
            )
        ).one()
        return (float(avg) if avg is not None else None), count

    def delete_review(self, review_id: int, user_id: str) -> int:
        result = self.db.execute(
            delete(ReviewModel)
            .where(ReviewModel.id == review_id, ReviewModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount
