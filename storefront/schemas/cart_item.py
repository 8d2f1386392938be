from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CartItemCreate(BaseModel):
    # Presence is checked by the service so missing fields answer 400, not 422
    product_id: Optional[str] = Field(None, alias="productId")
    quantity: Optional[int] = None
    session_id: Optional[str] = Field(None, alias="sessionId")

    class Config:
        populate_by_name = True


class CartItemUpdate(BaseModel):
    quantity: Optional[int] = None


class CartItem(BaseModel):
    id: str
    session_id: str
    product_id: str
    quantity: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CartItemMutation(BaseModel):
    message: str
    data: CartItem
