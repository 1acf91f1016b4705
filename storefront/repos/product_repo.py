# storefront/repos/product_repo.py
from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_featured(self) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.featured.is_(True))
                .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            ).scalars().all()
        )

    def search(self, search: str = "") -> list[ProductModel]:
        stmt = select(ProductModel)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(ProductModel.name.ilike(pattern), ProductModel.company.ilike(pattern)))
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
