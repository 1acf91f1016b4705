# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_admin_user,
    get_current_user,
    get_lock_service,
    get_notification_service,
    require_payment_step,
)
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CheckoutOut, OrderOut
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/orders", tags=["admin"], dependencies=[Depends(get_admin_user)])
payment_router = APIRouter(prefix="/orders", tags=["payments"], dependencies=[Depends(require_payment_step)])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(db, lock_service, notification_service)


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    """
    Turns the caller's cart into an unpaid order.
    The returned ids are handed to the payment step.
    """
    return svc.checkout(user.id, user.email)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.fetch_user_orders(user.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.get_order(order_id, user.id)


@payment_router.post("/{order_id}/confirm", response_model=OrderOut)
def confirm_payment(order_id: int, svc: OrderService = Depends(get_service)):
    return svc.confirm_payment(order_id)


@admin_router.get("", response_model=List[OrderOut])
def list_all_orders(svc: OrderService = Depends(get_service)):
    return svc.fetch_admin_orders()
