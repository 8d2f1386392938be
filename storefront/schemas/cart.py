from pydantic import BaseModel, Field
from typing import List, Optional


class CartLine(BaseModel):
    """A cart row joined with its product and priced at the current price"""

    id: str
    product_id: str = Field(alias="productId")
    name: str
    price: float
    image_url: Optional[str] = None
    quantity: int
    subtotal: float

    class Config:
        populate_by_name = True


class CartSummary(BaseModel):
    items: List[CartLine]
    total: float
