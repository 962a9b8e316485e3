# ===================================
# babobamboo/schemas/order.py
# ===================================
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, validator

from babobamboo.models.order import PriceType


class CartItem(BaseModel):
    product_id: int
    quantity: int = Field(ge=1, description="Quantité doit être positive")
    type: PriceType = Field(default=PriceType.RETAIL, description="retail ou wholesale")


class OrderCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None
    address_id: Optional[int] = None
    cart_items: List[CartItem] = Field(min_length=1)

    @validator("full_name")
    def validate_full_name(cls, v):
        if not v.strip():
            raise ValueError("Le nom complet est requis")
        return v.strip()


class OrderCreated(BaseModel):
    order_id: int


class OrderCreatedResponse(BaseModel):
    success: bool = True
    message: str
    data: OrderCreated


class OrdersListResponse(BaseModel):
    success: bool = True
    data: List[dict]
    total: int
    page: int
    per_page: int
    has_more: bool


class RatingOrderResponse(BaseModel):
    success: bool = True
    data: dict
