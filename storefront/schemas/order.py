from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class CheckoutRequest(BaseModel):
    customer_name: Optional[str] = Field(None, alias="customerName")
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    session_id: Optional[str] = Field(None, alias="sessionId")

    class Config:
        populate_by_name = True


class OrderLine(BaseModel):
    product_id: str = Field(alias="productId")
    name: str
    price: float
    quantity: int
    subtotal: float

    class Config:
        populate_by_name = True


class Receipt(BaseModel):
    order_id: str = Field(alias="orderId")
    total: float
    timestamp: datetime
    items: List[OrderLine]
    customer_name: str = Field(alias="customerName")
    customer_email: str = Field(alias="customerEmail")

    class Config:
        populate_by_name = True


class CheckoutResponse(BaseModel):
    message: str
    receipt: Receipt


class OrderResponse(BaseModel):
    id: str
    customer_name: str
    customer_email: str
    total: float
    items: List[OrderLine]
    session_id: str
    created_at: datetime

    class Config:
        from_attributes = True
