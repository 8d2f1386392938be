import uuid

from sqlalchemy import Column, String, Numeric, DateTime, JSON, func
from ..database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)

    total = Column(Numeric(10, 2), nullable=False)
    # Line items frozen at checkout time; never updated afterwards
    items = Column(JSON, nullable=False)

    session_id = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
