# storefront/api/deps.py
import hmac
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import Unauthenticated
from storefront.services.identity_client import IdentityClient
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.storage_client import StorageClient
from storefront.services.user_service import UserService
from storefront.utils.settings import PAYMENT_WEBHOOK_SECRET


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_storage_client() -> StorageClient:
    return StorageClient()


@lru_cache
def get_identity_client() -> IdentityClient:
    return IdentityClient()


def get_notification_service() -> NotificationService:
    return NotificationService()


def _extract_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
) -> UserModel | None:
    token = _extract_bearer_token(request)
    if not token:
        return None
    profile = identity.fetch_profile(token)
    return UserService(db).sync_user(profile)


def get_current_user(user: UserModel | None = Depends(get_optional_user)) -> UserModel:
    if user is None:
        raise Unauthenticated("Missing Authorization header")
    return user


def get_admin_user(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserModel:
    return UserService(db).require_admin(user)


def require_payment_step(request: Request) -> None:
    """Only the payment step knows the shared secret; customer tokens never pass."""
    supplied = request.headers.get("X-Payment-Secret", "")
    if not PAYMENT_WEBHOOK_SECRET or not hmac.compare_digest(supplied, PAYMENT_WEBHOOK_SECRET):
        raise Unauthenticated("Invalid payment credentials")
