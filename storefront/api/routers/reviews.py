from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import ReviewIn, ReviewOut, UserReviewOut, MessageOut
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewOut, status_code=201)
def create_review(
    payload: ReviewIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReviewService(db).create_review(user.id, payload.model_dump())


@router.get("", response_model=List[UserReviewOut])
def my_reviews(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return ReviewService(db).fetch_reviews_by_user(user.id)


@router.delete("/{review_id}", response_model=MessageOut)
def delete_review(
    review_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ReviewService(db).delete_review(user.id, review_id)
    return {"message": "Review deleted successfully"}
