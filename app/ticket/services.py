# app/ticket/services.py
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.step.models import Step
from app.ticket.models import Ticket
from app.ticket.schemas import TicketCreate, TicketUpdate

# only the step reference may be cleared through an update
NULLABLE_FIELDS = {"current_step_id"}


class DuplicateTicketNumberError(Exception):
    pass


class UnknownStepError(Exception):
    pass


def _check_step(db: Session, step_id: int | None) -> None:
    if step_id is not None and db.get(Step, step_id) is None:
        raise UnknownStepError(step_id)


def _commit(db: Session, ticket_number: int | None) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateTicketNumberError(ticket_number) from exc


def get_all_tickets(db: Session) -> list[Ticket]:
    return db.query(Ticket).order_by(Ticket.order_index.asc(), Ticket.ticket_number.asc()).all()

def get_ticket(db: Session, ticket_id: int) -> Ticket | None:
    return db.query(Ticket).filter(Ticket.id == ticket_id).first()

def next_order_index(db: Session) -> int:
    current = db.query(func.max(Ticket.order_index)).scalar()
    return 0 if current is None else current + 1

def create_ticket(db: Session, payload: TicketCreate) -> Ticket:
    _check_step(db, payload.current_step_id)
    data = payload.model_dump()
    if data["order_index"] is None:
        data["order_index"] = next_order_index(db)
    db_ticket = Ticket(**data)
    db.add(db_ticket)
    _commit(db, payload.ticket_number)
    db.refresh(db_ticket)
    return db_ticket

def update_ticket(db: Session, ticket_id: int, payload: TicketUpdate) -> Ticket | None:
    db_ticket = get_ticket(db, ticket_id)
    if not db_ticket:
        return None
    changes = payload.model_dump(exclude_unset=True)
    if "current_step_id" in changes:
        _check_step(db, changes["current_step_id"])
    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(db_ticket, field, value)
    _commit(db, changes.get("ticket_number"))
    db.refresh(db_ticket)
    return db_ticket

def delete_ticket(db: Session, ticket_id: int) -> Ticket | None:
    db_ticket = get_ticket(db, ticket_id)
    if not db_ticket:
        return None
    db.delete(db_ticket)
    db.commit()
    return db_ticket
