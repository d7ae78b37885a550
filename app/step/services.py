# app/step/services.py
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.step.models import Step
from app.step.schemas import StepCreate, StepUpdate
from app.ticket.models import Ticket

def get_all_steps(db: Session) -> list[Step]:
    return db.query(Step).order_by(Step.order_index.asc(), Step.id.asc()).all()

def get_step(db: Session, step_id: int) -> Step | None:
    return db.query(Step).filter(Step.id == step_id).first()

def next_order_index(db: Session) -> int:
    current = db.query(func.max(Step.order_index)).scalar()
    return 0 if current is None else current + 1

def create_step(db: Session, payload: StepCreate) -> Step:
    data = payload.model_dump()
    if data["order_index"] is None:
        data["order_index"] = next_order_index(db)
    db_step = Step(**data)
    db.add(db_step)
    db.commit()
    db.refresh(db_step)
    return db_step

def update_step(db: Session, step_id: int, payload: StepUpdate) -> Step | None:
    db_step = get_step(db, step_id)
    if not db_step:
        return None
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(db_step, field, value)
    db.commit()
    db.refresh(db_step)
    return db_step

def delete_step(db: Session, step_id: int) -> Step | None:
    db_step = get_step(db, step_id)
    if not db_step:
        return None
    # SQLite does not enforce ON DELETE SET NULL without the foreign_keys pragma
    db.query(Ticket).filter(Ticket.current_step_id == step_id).update(
        {Ticket.current_step_id: None}, synchronize_session=False
    )
    db.delete(db_step)
    db.commit()
    return db_step
