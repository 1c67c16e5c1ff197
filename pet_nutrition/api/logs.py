"""Weight log and vet visit API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pet_nutrition.core.database import get_db
from pet_nutrition.models.models import Pet, VetVisit, WeightLog
from pet_nutrition.schemas.schemas import (
    VetVisitCreate,
    VetVisitResponse,
    WeightLogCreate,
    WeightLogResponse,
)

router = APIRouter(prefix="/log", tags=["logs"])


def _get_pet_or_404(db: Session, pet_id: int) -> Pet:
    pet = db.query(Pet).filter(Pet.id == pet_id).first()
    if not pet:
        raise HTTPException(status_code=404, detail="Pet not found")
    return pet


# ==================== Weight Logs ====================

@router.post("/weight", response_model=WeightLogResponse, status_code=201)
def create_weight_log(log: WeightLogCreate, db: Session = Depends(get_db)):
    """Log a weight measurement for a pet."""
    pet = _get_pet_or_404(db, log.pet_id)

    weight_log = WeightLog(
        pet_id=log.pet_id,
        weight_kg=log.weight_kg,
        recorded_on=log.recorded_on or date.today(),
        notes=log.notes,
    )
    db.add(weight_log)

    # Also update the pet's current weight
    pet.weight_kg = log.weight_kg

    db.commit()
    db.refresh(weight_log)
    return weight_log


@router.get("/weight/pet/{pet_id}", response_model=list[WeightLogResponse])
def get_weight_logs_for_pet(
    pet_id: int,
    limit: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db)
):
    """Get weight history for a pet, newest first."""
    _get_pet_or_404(db, pet_id)

    return (
        db.query(WeightLog)
        .filter(WeightLog.pet_id == pet_id)
        .order_by(WeightLog.recorded_on.desc(), WeightLog.id.desc())
        .limit(limit)
        .all()
    )


@router.delete("/weight/{log_id}", status_code=204)
def delete_weight_log(log_id: int, db: Session = Depends(get_db)):
    """Delete a weight log entry."""
    log = db.query(WeightLog).filter(WeightLog.id == log_id).first()
    if not log:
        raise HTTPException(status_code=404, detail="Weight log not found")

    db.delete(log)
    db.commit()
    return None


# ==================== Vet Visits ====================

@router.post("/vet-visit", response_model=VetVisitResponse, status_code=201)
def create_vet_visit(visit: VetVisitCreate, db: Session = Depends(get_db)):
    """Record a veterinary visit for a pet."""
    _get_pet_or_404(db, visit.pet_id)

    vet_visit = VetVisit(
        pet_id=visit.pet_id,
        visit_date=visit.visit_date,
        reason=visit.reason,
        notes=visit.notes,
    )
    db.add(vet_visit)
    db.commit()
    db.refresh(vet_visit)
    return vet_visit


@router.get("/vet-visit/pet/{pet_id}", response_model=list[VetVisitResponse])
def get_vet_visits_for_pet(pet_id: int, db: Session = Depends(get_db)):
    """Get vet visits for a pet, most recent first."""
    _get_pet_or_404(db, pet_id)

    return (
        db.query(VetVisit)
        .filter(VetVisit.pet_id == pet_id)
        .order_by(VetVisit.visit_date.desc())
        .all()
    )


@router.delete("/vet-visit/{visit_id}", status_code=204)
def delete_vet_visit(visit_id: int, db: Session = Depends(get_db)):
    """Delete a vet visit record."""
    visit = db.query(VetVisit).filter(VetVisit.id == visit_id).first()
    if not visit:
        raise HTTPException(status_code=404, detail="Vet visit not found")

    db.delete(visit)
    db.commit()
    return None
