#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_optional_user, get_lock_service
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    ItemIn,
    ItemQuantityIn,
    CartOut,
    CartCountOut,
)
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, lock_service=lock_service)


@router.get("", response_model=CartOut)
def view_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    return svc.view_cart(user.id)


@router.get("/count", response_model=CartCountOut)
def cart_count(
    user: UserModel | None = Depends(get_optional_user),
    svc: CartService = Depends(get_service),
):
    return {"num_items": svc.fetch_cart_item_count(user.id if user else None)}


@router.post("/items", status_code=303)
def add_item(
    payload: ItemIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    svc.add_to_cart(user.id, payload.product_id, payload.quantity)
    return RedirectResponse("/cart", status_code=303)


@router.patch("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: ItemQuantityIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    return svc.update_cart_item(user.id, item_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    return svc.remove_cart_item(user.id, item_id)
