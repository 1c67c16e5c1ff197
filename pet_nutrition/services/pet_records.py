"""
Pet record lookups for the engine.

The calculators never touch the database. Handlers reach pet rows, weight
history and vet visits through a PetRecordRepository and turn rows into
PetSnapshots here.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from pet_nutrition.core.health_score import (
    HealthScoreResult,
    WeightEntry,
    estimate_health_score,
    score_change,
)
from pet_nutrition.core.pets import PetSnapshot
from pet_nutrition.models.models import HealthScoreSnapshot, Pet, VetVisit, WeightLog

logger = logging.getLogger(__name__)


class PetNotFoundError(LookupError):
    """No pet with the requested id."""

    def __init__(self, pet_id: int):
        super().__init__(f"Pet {pet_id} not found")
        self.pet_id = pet_id


class PetRecordRepository(Protocol):
    """Persistence interface for pet records."""

    def get_pet(self, pet_id: int) -> Pet:
        """Return a pet row or raise PetNotFoundError."""

    def weight_history(self, pet_id: int) -> list[WeightEntry]:
        """Return logged weights, oldest first."""

    def last_vet_visit(self, pet_id: int) -> Optional[date]:
        """Return the date of the most recent vet visit."""

    def previous_health_score(self, pet_id: int) -> Optional[int]:
        """Return the last cached health score."""

    def save_health_score(self, pet_id: int, score: int) -> None:
        """Cache a freshly computed health score."""


class SqlPetRecordRepository:
    """PetRecordRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get_pet(self, pet_id: int) -> Pet:
        pet = self.db.query(Pet).filter(Pet.id == pet_id).first()
        if not pet:
            raise PetNotFoundError(pet_id)
        return pet

    def weight_history(self, pet_id: int) -> list[WeightEntry]:
        logs = (
            self.db.query(WeightLog)
            .filter(WeightLog.pet_id == pet_id)
            .order_by(WeightLog.recorded_on, WeightLog.id)
            .all()
        )
        return [WeightEntry(recorded_on=log.recorded_on, weight_kg=log.weight_kg) for log in logs]

    def last_vet_visit(self, pet_id: int) -> Optional[date]:
        visit = (
            self.db.query(VetVisit)
            .filter(VetVisit.pet_id == pet_id)
            .order_by(VetVisit.visit_date.desc())
            .first()
        )
        return visit.visit_date if visit else None

    def previous_health_score(self, pet_id: int) -> Optional[int]:
        snapshot = (
            self.db.query(HealthScoreSnapshot)
            .filter(HealthScoreSnapshot.pet_id == pet_id)
            .order_by(HealthScoreSnapshot.computed_at.desc(), HealthScoreSnapshot.id.desc())
            .first()
        )
        return snapshot.score if snapshot else None

    def save_health_score(self, pet_id: int, score: int) -> None:
        self.db.add(HealthScoreSnapshot(pet_id=pet_id, score=score))
        self.db.commit()


def snapshot_from_pet(pet: Pet) -> PetSnapshot:
    """Build the engine's view of a stored pet."""
    body_condition = pet.body_condition_score if pet.body_condition_score else pet.body_condition
    return PetSnapshot.build(
        species=pet.species,
        weight_kg=pet.weight_kg,
        age_years=pet.age_years,
        activity_level=pet.activity_level,
        body_condition=body_condition,
        spay_neuter=pet.spay_neuter,
        ideal_weight_kg=pet.ideal_weight_kg,
        health_conditions=pet.health_conditions or (),
        allergies=pet.allergies or (),
    )


def snapshot_from_request(request) -> PetSnapshot:
    """Build a snapshot from a NutritionRequest body."""
    return PetSnapshot.build(
        species=request.species,
        weight_kg=request.weight,
        age_years=request.age,
        activity_level=request.activity_level,
        body_condition=request.body_condition,
        spay_neuter=request.spay_neuter,
        ideal_weight_kg=request.ideal_weight,
        health_conditions=request.health_conditions,
        allergies=request.allergies,
    )


@dataclass
class HealthScoreService:
    """Scores a stored pet and tracks the change since the last score."""

    repository: PetRecordRepository

    def score_pet(self, pet_id: int, today: date) -> tuple[HealthScoreResult, int]:
        """Return the fresh score and its clamped change, caching the new score."""
        pet = self.repository.get_pet(pet_id)
        result = estimate_health_score(
            snapshot_from_pet(pet),
            weight_history=self.repository.weight_history(pet_id),
            last_vet_visit=self.repository.last_vet_visit(pet_id),
            today=today,
        )
        change = score_change(result.score, self.repository.previous_health_score(pet_id))
        self.repository.save_health_score(pet_id, result.score)
        logger.info("Health score for pet %s: %s (%+d)", pet_id, result.score, change)
        return result, change
