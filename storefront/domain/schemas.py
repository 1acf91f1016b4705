# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_validator
from typing import List, Literal, Optional, Type, TypeVar
from decimal import Decimal
from datetime import datetime

from storefront.domain.errors import ValidationFailed
from storefront.utils.settings import MAX_IMAGE_BYTES

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_with_schema(schema: Type[SchemaT], data: dict) -> SchemaT:
    """Validate raw input and turn pydantic errors into a single ValidationFailed message."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        messages = [err["msg"] for err in e.errors()]
        raise ValidationFailed("; ".join(messages)) from e


# ---------------------------------------------------------------- users

class UserRead(BaseModel):
    id: str
    email: Optional[str] = None
    image_url: Optional[str] = None
    role: str

    model_config = ConfigDict(from_attributes=True)


class RoleIn(BaseModel):
    role: Literal["customer", "admin"]


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------- products

class ProductIn(BaseModel):
    """Fields an admin submits when creating or updating a product."""

    name: str = Field(..., min_length=2, max_length=100)
    company: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: str
    featured: bool = False

    @field_validator("description")
    @classmethod
    def description_word_count(cls, value: str) -> str:
        words = len(value.split())
        if words < 10 or words > 1000:
            raise ValueError("description must be between 10 and 1000 words")
        return value


class ImageIn(BaseModel):
    filename: str = Field(..., min_length=1)
    content_type: str
    size: int = Field(..., ge=0)

    @field_validator("content_type")
    @classmethod
    def must_be_image(cls, value: str) -> str:
        if not value or not value.startswith("image/"):
            raise ValueError("File must be an image")
        return value

    @field_validator("size")
    @classmethod
    def max_size(cls, value: int) -> int:
        if value > MAX_IMAGE_BYTES:
            raise ValueError("File size must be less than 1 MB")
        return value


class ProductOut(BaseModel):
    id: int
    name: str
    company: str
    description: str
    price: Decimal
    image: str
    featured: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- cart

class ItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class ItemQuantityIn(BaseModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    name: str
    company: str
    image: str
    price: Decimal


class CartOut(BaseModel):
    cart_id: int
    user_id: str
    num_items: int
    cart_total: Decimal
    tax_rate: Decimal
    tax: Decimal
    shipping: Decimal
    order_total: Decimal
    items: List[CartItemOut]


class CartCountOut(BaseModel):
    num_items: int


# ---------------------------------------------------------------- orders

class CheckoutOut(BaseModel):
    order_id: int
    cart_id: int
    redirect_url: str


class OrderOut(BaseModel):
    id: int
    user_id: str
    num_items: int
    cart_total: Decimal
    tax: Decimal
    shipping: Decimal
    order_total: Decimal
    email: Optional[str] = None
    is_paid: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- reviews

class ReviewIn(BaseModel):
    product_id: int = Field(..., gt=0)
    author_name: str = Field(..., min_length=1, max_length=100)
    author_image_url: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=10, max_length=1000)


class ReviewOut(BaseModel):
    id: int
    product_id: int
    author_name: str
    author_image_url: Optional[str] = None
    rating: int
    comment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserReviewOut(BaseModel):
    id: int
    rating: int
    comment: str
    product_name: str
    product_image: str


class RatingOut(BaseModel):
    rating: float
    count: int


# ---------------------------------------------------------------- favorites

class FavoriteOut(BaseModel):
    id: int
    product: ProductOut

    model_config = ConfigDict(from_attributes=True)


class FavoriteToggleOut(BaseModel):
    product_id: int
    favorite: bool
    message: str
