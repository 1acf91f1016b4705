# storefront/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from storefront.api.deps import get_admin_user, get_current_user, get_storage_client
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import ProductOut, ReviewOut, RatingOut, MessageOut
from storefront.services.favorite_service import FavoriteService
from storefront.services.product_service import ProductService
from storefront.services.review_service import ReviewService
from storefront.services.storage_client import StorageClient

router = APIRouter(prefix="/products", tags=["products"])
admin_router = APIRouter(prefix="/products", tags=["admin"])


def get_service(
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
) -> ProductService:
    return ProductService(db, storage)


async def _read_image(upload: UploadFile) -> dict:
    return {
        "filename": upload.filename,
        "content_type": upload.content_type,
        "content": await upload.read(),
    }


# ---------------------------------------------------------------- public

@router.get("", response_model=List[ProductOut])
def list_products(search: str = Query(""), svc: ProductService = Depends(get_service)):
    return svc.fetch_all_products(search)


@router.get("/featured", response_model=List[ProductOut])
def featured_products(svc: ProductService = Depends(get_service)):
    return svc.fetch_featured_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: ProductService = Depends(get_service)):
    return svc.fetch_single_product(product_id)


@router.get("/{product_id}/reviews", response_model=List[ReviewOut])
def product_reviews(product_id: int, db: Session = Depends(get_db)):
    return ReviewService(db).fetch_product_reviews(product_id)


@router.get("/{product_id}/rating", response_model=RatingOut)
def product_rating(product_id: int, db: Session = Depends(get_db)):
    return ReviewService(db).fetch_product_rating(product_id)


@router.get("/{product_id}/favorite")
def favorite_id(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"favorite_id": FavoriteService(db).fetch_favorite_id(user.id, product_id)}


# ---------------------------------------------------------------- admin

@admin_router.get("", response_model=List[ProductOut])
def admin_list_products(
    _: UserModel = Depends(get_admin_user),
    svc: ProductService = Depends(get_service),
):
    return svc.fetch_admin_products()


@admin_router.post("", response_model=ProductOut, status_code=201)
async def create_product(
    name: str = Form(...),
    company: str = Form(...),
    price: str = Form(...),
    description: str = Form(...),
    featured: bool = Form(False),
    image: UploadFile = File(...),
    admin: UserModel = Depends(get_admin_user),
    svc: ProductService = Depends(get_service),
):
    fields = {
        "name": name,
        "company": company,
        "price": price,
        "description": description,
        "featured": featured,
    }
    return svc.create_product(admin.id, fields, await _read_image(image))


@admin_router.get("/{product_id}", response_model=ProductOut)
def admin_product_details(
    product_id: int,
    _: UserModel = Depends(get_admin_user),
    svc: ProductService = Depends(get_service),
):
    return svc.fetch_admin_product_details(product_id)


@admin_router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    name: str = Form(...),
    company: str = Form(...),
    price: str = Form(...),
    description: str = Form(...),
    featured: bool = Form(False),
    _: UserModel = Depends(get_admin_user),
    svc: ProductService = Depends(get_service),
):
    fields = {
        "name": name,
        "company": company,
        "price": price,
        "description": description,
        "featured": featured,
    }
    return svc.update_product(product_id, fields)


@admin_router.put("/{product_id}/image", response_model=ProductOut)
async def update_product_image(
    product_id: int,
    image: UploadFile = File(...),
    url: Optional[str] = Form(None),
    _: UserModel = Depends(get_admin_user),
    svc: ProductService = Depends(get_service),
):
    return svc.update_product_image(product_id, await _read_image(image), url)


@admin_router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    _: UserModel = Depends(get_admin_user),
    svc: ProductService = Depends(get_service),
):
    svc.delete_product(product_id)
    return {"message": "product removed"}
