from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime

from storefront.data.database import Base

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"


class UserModel(Base):
    __tablename__ = "users"

    #id comes from the identity provider
    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=True)
    image_url = Column(String(1024), nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_CUSTOMER)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
