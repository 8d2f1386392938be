from pydantic import BaseModel
from typing import Optional


class Product(BaseModel):
    id: str
    name: str
    price: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    stock: int

    class Config:
        from_attributes = True
