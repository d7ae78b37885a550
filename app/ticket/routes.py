# app/ticket/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.ticket.schemas import TicketCreate, TicketOut, TicketUpdate
from app.ticket import services as ticket_service
router = APIRouter(prefix="/tickets", tags=["Tickets"])


def _conflict(exc: ticket_service.DuplicateTicketNumberError) -> HTTPException:
    return HTTPException(status_code=409, detail="Ticket number already in use")


def _bad_step(exc: ticket_service.UnknownStepError) -> HTTPException:
    return HTTPException(status_code=422, detail=f"Step {exc.args[0]} does not exist")


@router.post("/", response_model=TicketOut, status_code=201)
def create(ticket: TicketCreate, db: Session = Depends(get_db)):
    try:
        return ticket_service.create_ticket(db, ticket)
    except ticket_service.DuplicateTicketNumberError as exc:
        raise _conflict(exc)
    except ticket_service.UnknownStepError as exc:
        raise _bad_step(exc)


@router.get("/", response_model=list[TicketOut])
def list_all(db: Session = Depends(get_db)):
    return ticket_service.get_all_tickets(db)


@router.get("/{ticket_id}", response_model=TicketOut)
def get(ticket_id: int, db: Session = Depends(get_db)):
    ticket = ticket_service.get_ticket(db, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.put("/{ticket_id}", response_model=TicketOut)
def update(ticket_id: int, ticket: TicketUpdate, db: Session = Depends(get_db)):
    try:
        updated = ticket_service.update_ticket(db, ticket_id, ticket)
    except ticket_service.DuplicateTicketNumberError as exc:
        raise _conflict(exc)
    except ticket_service.UnknownStepError as exc:
        raise _bad_step(exc)
    if not updated:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return updated


@router.delete("/{ticket_id}", response_model=TicketOut)
def delete(ticket_id: int, db: Session = Depends(get_db)):
    deleted = ticket_service.delete_ticket(db, ticket_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return deleted
