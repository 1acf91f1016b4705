from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import FavoriteOut, FavoriteToggleOut
from storefront.services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=List[FavoriteOut])
def my_favorites(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return FavoriteService(db).fetch_user_favorites(user.id)


@router.post("/{product_id}/toggle", response_model=FavoriteToggleOut)
def toggle_favorite(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    favorite = FavoriteService(db).toggle_favorite(user.id, product_id)
    return {
        "product_id": product_id,
        "favorite": favorite,
        "message": "added to favorites" if favorite else "removed from favorites",
    }
