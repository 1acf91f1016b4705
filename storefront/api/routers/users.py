from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_admin_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import UserRead, RoleIn
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(prefix="/users", tags=["admin"], dependencies=[Depends(get_admin_user)])


@router.get("/me", response_model=UserRead)
def get_me(user: UserModel = Depends(get_current_user)):
    return user


@admin_router.put("/{user_id}/role", response_model=UserRead)
def set_role(user_id: str, payload: RoleIn, db: Session = Depends(get_db)):
    return UserService(db).set_role(user_id, payload.role)
