from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.repos.user_repo import UserRepo
from storefront.domain.errors import Forbidden, NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def sync_user(self, profile: dict) -> UserModel:
        """Create or refresh the local record for an identity-provider profile."""
        existing = self.repo.get_user(profile["id"])
        if not existing:
            user = self.repo.create_user(profile)
            logger.info(f"Registered user {user.id}")
            return user

        email, image_url = profile.get("email"), profile.get("image_url")
        if existing.email != email or existing.image_url != image_url:
            return self.repo.update_profile(existing, email, image_url)

        return existing

    def get_user(self, user_id: str) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def require_admin(self, user: UserModel) -> UserModel:
        if not user.is_admin:
            raise Forbidden("Admin access required")
        return user

    def set_role(self, user_id: str, role: str) -> UserModel:
        user = self.repo.update_role(self.get_user(user_id), role)
        logger.info(f"User {user_id} role set to {role}")
        return user
