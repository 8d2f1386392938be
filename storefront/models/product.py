import uuid

from sqlalchemy import Column, String, Integer, Numeric, Text, DateTime, CheckConstraint, func
from ..database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    stock = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=func.now(), nullable=False)
