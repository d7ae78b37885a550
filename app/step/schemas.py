# app/step/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field

class StepBase(BaseModel):
    name: str = ""

class StepCreate(StepBase):
    order_index: int | None = Field(default=None, ge=0)

class StepUpdate(BaseModel):
    name: str | None = None
    order_index: int | None = Field(default=None, ge=0)

class StepOut(StepBase):
    id: int
    order_index: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
