from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel


class UserRepo:
    """Local mirror of identity-provider users plus their storefront role."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def create_user(self, profile: dict) -> UserModel:
        user = UserModel(id=profile["id"], email=profile.get("email"), image_url=profile.get("image_url"))
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_profile(self, user: UserModel, email: str | None, image_url: str | None) -> UserModel:
        user.email = email
        user.image_url = image_url
        self.db.commit()
        return user

    def update_role(self, user: UserModel, role: str) -> UserModel:
        user.role = role
        self.db.commit()
        self.db.refresh(user)
        return user
