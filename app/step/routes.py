# app/step/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.step.schemas import StepCreate, StepOut, StepUpdate
from app.step import services as step_service
router = APIRouter(prefix="/steps", tags=["Steps"])


@router.post("/", response_model=StepOut, status_code=201)
def create(step: StepCreate, db: Session = Depends(get_db)):
    return step_service.create_step(db, step)


@router.get("/", response_model=list[StepOut])
def list_all(db: Session = Depends(get_db)):
    return step_service.get_all_steps(db)


@router.get("/{step_id}", response_model=StepOut)
def get(step_id: int, db: Session = Depends(get_db)):
    step = step_service.get_step(db, step_id)
    if not step:
        raise HTTPException(status_code=404, detail="Step not found")
    return step


@router.put("/{step_id}", response_model=StepOut)
def update(step_id: int, step: StepUpdate, db: Session = Depends(get_db)):
    updated = step_service.update_step(db, step_id, step)
    if not updated:
        raise HTTPException(status_code=404, detail="Step not found")
    return updated


@router.delete("/{step_id}", response_model=StepOut)
def delete(step_id: int, db: Session = Depends(get_db)):
    deleted = step_service.delete_step(db, step_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Step not found")
    return deleted
