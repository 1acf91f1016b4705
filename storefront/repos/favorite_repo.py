# storefront/repos/favorite_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.favorite import FavoriteModel


class FavoriteRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_favorite(self, user_id: str, product_id: int) -> FavoriteModel | None:
        return self.db.execute(
            select(FavoriteModel).where(FavoriteModel.user_id == user_id, FavoriteModel.product_id == product_id)
        ).scalars().first()

    def list_by_user(self, user_id: str) -> list[FavoriteModel]:
        return list(
            self.db.execute(
                select(FavoriteModel)
                .where(FavoriteModel.user_id == user_id)
                .order_by(FavoriteModel.created_at.desc(), FavoriteModel.id.desc())
            ).scalars().unique().all()
        )

    def create_favorite(self, favorite: FavoriteModel) -> FavoriteModel:
        self.db.add(favorite)
        self.db.commit()
        self.db.refresh(favorite)
        return favorite

    def delete_favorite(self, favorite: FavoriteModel) -> None:
        self.db.delete(favorite)
        self.db.commit()
