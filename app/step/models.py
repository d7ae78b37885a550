# app/step/models.py
from sqlalchemy import Column, DateTime, Integer, String, func
from app.core.database import Base

class Step(Base):
    __tablename__ = "steps"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, default="")
    order_index = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime, server_default=func.now())
