"""Pet API endpoints."""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pet_nutrition.api.nutrition import macros_payload
from pet_nutrition.core.calculations import (
    adjust_for_weight_goal,
    compute_energy,
    compute_macros,
    infer_weight_goal,
)
from pet_nutrition.core.database import get_db
from pet_nutrition.core.pets import (
    parse_activity_level,
    parse_body_condition,
    parse_spay_neuter,
    parse_species,
)
from pet_nutrition.models.models import Pet, WeightLog
from pet_nutrition.schemas.schemas import (
    HealthScoreResponse,
    PetCreate,
    PetResponse,
    PetUpdate,
    PetWithCalculations,
)
from pet_nutrition.services.pet_records import (
    HealthScoreService,
    PetNotFoundError,
    SqlPetRecordRepository,
    snapshot_from_pet,
)

router = APIRouter(prefix="/pet", tags=["pets"])


def _normalised_fields(data: dict) -> dict:
    """Store enum-like fields in their canonical spelling."""
    if data.get("species") is not None:
        data["species"] = parse_species(data["species"]).value
    if data.get("activity_level") is not None:
        data["activity_level"] = parse_activity_level(data["activity_level"]).value
    if data.get("spay_neuter") is not None:
        data["spay_neuter"] = parse_spay_neuter(data["spay_neuter"]).value
    if data.get("body_condition") is not None:
        data["body_condition"] = parse_body_condition(data["body_condition"])[0].value
    return data


def _get_pet_or_404(db: Session, pet_id: int) -> Pet:
    try:
        return SqlPetRecordRepository(db).get_pet(pet_id)
    except PetNotFoundError:
        raise HTTPException(status_code=404, detail="Pet not found")


@router.post("", response_model=PetResponse, status_code=201)
def create_pet(pet: PetCreate, db: Session = Depends(get_db)):
    """Create a new pet profile."""
    db_pet = Pet(**_normalised_fields(pet.model_dump()))
    db.add(db_pet)
    db.commit()
    db.refresh(db_pet)

    # Create initial weight log entry
    db.add(WeightLog(pet_id=db_pet.id, weight_kg=pet.weight_kg, notes="Initial weight"))
    db.commit()

    return db_pet


@router.get("", response_model=list[PetResponse])
def list_pets(db: Session = Depends(get_db)):
    """List all pets."""
    return db.query(Pet).order_by(Pet.name).all()


@router.get("/{pet_id}", response_model=PetWithCalculations)
def get_pet(pet_id: int, db: Session = Depends(get_db)):
    """Get a pet profile with calculated energy needs and macros."""
    pet = _get_pet_or_404(db, pet_id)
    snapshot = snapshot_from_pet(pet)

    energy = compute_energy(snapshot)
    macros = compute_macros(snapshot, energy.der)
    goal = infer_weight_goal(snapshot)

    response = PetResponse.model_validate(pet).model_dump()
    return PetWithCalculations(
        **response,
        rer=energy.rer,
        der=energy.der,
        life_stage=energy.life_stage.value,
        weight_goal=goal,
        target_daily_kcal=adjust_for_weight_goal(energy.der, goal),
        macros=macros_payload(macros),
    )


@router.put("/{pet_id}", response_model=PetResponse)
def update_pet(pet_id: int, pet_update: PetUpdate, db: Session = Depends(get_db)):
    """Update a pet profile."""
    pet = _get_pet_or_404(db, pet_id)

    old_weight = pet.weight_kg
    update_data = _normalised_fields(pet_update.model_dump(exclude_unset=True))

    for field, value in update_data.items():
        if field == "ideal_weight_kg" and value == 0:
            # Allow clearing the ideal weight by setting it to 0
            setattr(pet, field, None)
        else:
            setattr(pet, field, value)

    # If weight changed, create a weight log entry
    if "weight_kg" in update_data and update_data["weight_kg"] != old_weight:
        db.add(WeightLog(pet_id=pet.id, weight_kg=update_data["weight_kg"], notes="Weight updated"))

    db.commit()
    db.refresh(pet)
    return pet


@router.delete("/{pet_id}", status_code=204)
def delete_pet(pet_id: int, db: Session = Depends(get_db)):
    """Delete a pet profile and its logs and plans."""
    pet = _get_pet_or_404(db, pet_id)
    db.delete(pet)
    db.commit()
    return None


@router.get("/{pet_id}/health-score", response_model=HealthScoreResponse)
def get_health_score(pet_id: int, db: Session = Depends(get_db)):
    """Score the pet's health and report the change since the last score."""
    service = HealthScoreService(repository=SqlPetRecordRepository(db))
    try:
        result, change = service.score_pet(pet_id, today=date.today())
    except PetNotFoundError:
        raise HTTPException(status_code=404, detail="Pet not found")

    return HealthScoreResponse(
        pet_id=pet_id,
        score=result.score,
        score_change=change,
        factors=list(result.factors),
        alerts=[asdict(alert) for alert in result.alerts],
        weight_trend=asdict(result.trend) if result.trend else None,
    )
