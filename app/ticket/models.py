# app/ticket/models.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from app.core.database import Base

class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    ticket_number = Column(Integer, unique=True, index=True, nullable=False)
    color = Column(String, nullable=False, default="white")
    notes = Column(Text, nullable=False, default="")
    current_step_id = Column(Integer, ForeignKey("steps.id", ondelete="SET NULL"), nullable=True)
    order_index = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
