# storefront/data/seed.py
"""
Local data helpers.

    python -m storefront.data.seed                # demo products
    python -m storefront.data.seed admin <uid>    # grant admin role
"""
import sys
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models.product import ProductModel
from storefront.data.models.user import UserModel, ROLE_ADMIN
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {
        "name": "avant-garde lamp",
        "company": "Modenza",
        "price": Decimal("179.99"),
        "featured": True,
        "image": "https://images.example.com/avant-garde-lamp.jpg",
        "description": "A sculptural floor lamp that throws warm light across any living room or reading corner.",
    },
    {
        "name": "chic chair",
        "company": "Luxora",
        "price": Decimal("339.00"),
        "featured": True,
        "image": "https://images.example.com/chic-chair.jpg",
        "description": "An upholstered lounge chair with a solid oak frame, made for long evenings and good books.",
    },
    {
        "name": "comfy bed",
        "company": "Homestead",
        "price": Decimal("1290.00"),
        "featured": False,
        "image": "https://images.example.com/comfy-bed.jpg",
        "description": "A queen size bed frame with a padded headboard and slatted base for any standard mattress.",
    },
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        #only seed an empty catalog
        if db.query(ProductModel).first():
            logger.info("Catalog not empty, skipping seed")
            return
        for data in DEMO_PRODUCTS:
            db.add(ProductModel(**data))
        db.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} products")
    finally:
        db.close()


def grant_admin(user_id: str):
    init_db()
    db = SessionLocal()
    try:
        user = db.get(UserModel, user_id)
        if user is None:
            user = UserModel(id=user_id)
            db.add(user)
        user.role = ROLE_ADMIN
        db.commit()
        logger.info(f"User {user_id} is now an admin")
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) == 3 and sys.argv[1] == "admin":
        grant_admin(sys.argv[2])
    else:
        seed()
