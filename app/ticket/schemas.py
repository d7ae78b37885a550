# app/ticket/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.ticket.colors import DEFAULT_COLOR, normalize_color

class TicketBase(BaseModel):
    ticket_number: int = Field(..., gt=0)
    color: str = DEFAULT_COLOR
    notes: str = ""
    current_step_id: int | None = None

    @field_validator("color")
    @classmethod
    def check_color(cls, value: str) -> str:
        return normalize_color(value)

class TicketCreate(TicketBase):
    order_index: int | None = Field(default=None, ge=0)

class TicketUpdate(BaseModel):
    ticket_number: int | None = Field(default=None, gt=0)
    color: str | None = None
    notes: str | None = None
    current_step_id: int | None = None
    order_index: int | None = Field(default=None, ge=0)

    @field_validator("color")
    @classmethod
    def check_color(cls, value: str | None) -> str | None:
        return None if value is None else normalize_color(value)

class TicketOut(TicketBase):
    id: int
    order_index: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
