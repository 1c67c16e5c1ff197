"""
Heuristic 0-100 health score.

Starts at 100 and subtracts fixed penalties for weight against ideal weight,
body condition score, age, vet visit recency and activity. Best effort only:
the tiers carry no veterinary validity.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from pet_nutrition.core.calculations import get_life_stage
from pet_nutrition.core.pets import ActivityLevel, LifeStage, PetSnapshot, Species

MAX_SCORE = 100
MAX_SCORE_CHANGE = 20
RAPID_CHANGE_PCT = 10.0
TREND_CHANGE_PCT = 5.0


@dataclass(frozen=True)
class WeightEntry:
    recorded_on: date
    weight_kg: float


@dataclass(frozen=True)
class WeightTrend:
    first_weight_kg: float
    last_weight_kg: float
    change_pct: float
    direction: str
    previous_weight_kg: float
    recent_change_pct: float


@dataclass(frozen=True)
class HealthAlert:
    code: str
    priority: str
    title: str
    description: str


@dataclass(frozen=True)
class HealthScoreResult:
    score: int
    factors: tuple[str, ...] = field(default_factory=tuple)
    alerts: tuple[HealthAlert, ...] = field(default_factory=tuple)
    trend: Optional[WeightTrend] = None


def weight_trend(history: Iterable[WeightEntry]) -> Optional[WeightTrend]:
    """
    Summarise weight readings by date.

    `change_pct` and `direction` compare the earliest and latest readings.
    `recent_change_pct` compares the latest reading with the one before it
    and drives the rapid gain and loss alerts. Returns None with fewer than
    two usable readings. Direction is "increasing" above +5%, "decreasing"
    below -5%, else "stable".
    """
    entries = sorted((e for e in history if e.weight_kg and e.weight_kg > 0), key=lambda e: e.recorded_on)
    if len(entries) < 2:
        return None

    first, last = entries[0].weight_kg, entries[-1].weight_kg
    previous = entries[-2].weight_kg
    change_pct = (last - first) / first * 100
    if change_pct > TREND_CHANGE_PCT:
        direction = "increasing"
    elif change_pct < -TREND_CHANGE_PCT:
        direction = "decreasing"
    else:
        direction = "stable"
    return WeightTrend(
        first_weight_kg=first,
        last_weight_kg=last,
        change_pct=round(change_pct, 1),
        direction=direction,
        previous_weight_kg=previous,
        recent_change_pct=round((last - previous) / previous * 100, 1),
    )


def _weight_penalty(pet: PetSnapshot, factors: list, alerts: list) -> int:
    if not pet.weight_kg or pet.weight_kg <= 0:
        factors.append("No current weight recorded (-15)")
        return 15
    if not pet.ideal_weight_kg:
        factors.append("No ideal weight set (-5)")
        return 5

    ratio = pet.weight_kg / pet.ideal_weight_kg
    if ratio > 1.25:
        factors.append("Severely overweight (-30)")
        alerts.append(HealthAlert(
            "weight_critical", "critical", "Critical Weight Issue",
            "Pet is severely overweight - immediate veterinary consultation recommended",
        ))
        return 30
    if ratio > 1.15:
        factors.append("Significantly overweight (-20)")
        alerts.append(HealthAlert(
            "weight_high", "high", "Weight Management Needed", "Pet is significantly overweight",
        ))
        return 20
    if ratio > 1.05:
        factors.append("Slightly overweight (-10)")
        return 10
    if ratio < 0.85:
        factors.append("Significantly underweight (-25)")
        alerts.append(HealthAlert(
            "weight_low", "high", "Underweight Concern", "Pet is significantly underweight",
        ))
        return 25
    if ratio < 0.95:
        factors.append("Slightly underweight (-10)")
        return 10
    factors.append("Healthy weight (+0)")
    return 0


def _body_condition_penalty(pet: PetSnapshot, factors: list) -> int:
    bcs = pet.body_condition_score
    if bcs is None:
        factors.append("No body condition score recorded (-10)")
        return 10
    if bcs <= 3:
        factors.append("Poor body condition - underweight (-20)")
        return 20
    if bcs >= 7:
        factors.append("Poor body condition - overweight (-15)")
        return 15
    if bcs in (4, 5):
        factors.append("Ideal body condition (+0)")
        return 0
    factors.append("Slightly off ideal body condition (-5)")
    return 5


def _days_since(visit: Optional[date], today: date) -> Optional[int]:
    if visit is None:
        return None
    return (today - visit).days


def _visited_within(visit: Optional[date], today: date, days: int) -> bool:
    elapsed = _days_since(visit, today)
    return elapsed is not None and elapsed <= days


def _age_penalty(pet: PetSnapshot, last_vet_visit, today, factors: list, alerts: list) -> int:
    if pet.age_years is None:
        factors.append("Age not recorded (-5)")
        return 5
    # Only dogs and cats are scored as seniors
    stage = get_life_stage(pet.species, pet.age_years)
    senior = stage == LifeStage.SENIOR and pet.species in (Species.DOG, Species.CAT)
    if senior and not _visited_within(last_vet_visit, today, 180):
        factors.append("Senior pet without recent vet visit (-15)")
        alerts.append(HealthAlert(
            "senior_checkup", "high", "Senior Pet Checkup Due",
            "Senior pets should see a veterinarian every 6 months",
        ))
        return 15
    return 0


def _vet_care_penalty(last_vet_visit, today, factors: list, alerts: list) -> int:
    if not _visited_within(last_vet_visit, today, 365):
        factors.append("No vet visit in past year (-15)")
        alerts.append(HealthAlert(
            "checkup_overdue", "high", "Annual Checkup Overdue",
            "Pet has not had a veterinary checkup in over a year",
        ))
        return 15
    if not _visited_within(last_vet_visit, today, 180):
        factors.append("Vet visit due soon (-5)")
        return 5
    factors.append("Recent vet visit recorded (+0)")
    return 0


def _activity_penalty(pet: PetSnapshot, factors: list) -> int:
    """Young pets with low activity lose 5, low activity dogs lose 3.

    The dog rule is applied last and replaces the young pet penalty, so a
    young low activity dog loses 3.
    """
    if pet.activity_level != ActivityLevel.LOW:
        return 0
    penalty = 0
    if pet.age_years is not None and pet.age_years < 2:
        penalty = 5
        factors.append("Young pet with low activity (-5)")
    if pet.species == Species.DOG:
        penalty = 3
        factors.append("Low activity for dog breed (-3)")
    return penalty


def estimate_health_score(
    pet: PetSnapshot,
    *,
    weight_history: Iterable[WeightEntry] = (),
    last_vet_visit: Optional[date] = None,
    today: date,
) -> HealthScoreResult:
    """
    Score a pet's overall health from 0 to 100.

    Args:
        pet: Pet snapshot
        weight_history: Logged weights, any order
        last_vet_visit: Date of the most recent vet visit, if any
        today: Reference date for visit recency

    Returns:
        HealthScoreResult with the score, the factors that moved it,
        alerts and the weight trend
    """
    factors: list[str] = []
    alerts: list[HealthAlert] = []

    penalty = _weight_penalty(pet, factors, alerts)
    penalty += _body_condition_penalty(pet, factors)
    penalty += _age_penalty(pet, last_vet_visit, today, factors, alerts)
    penalty += _vet_care_penalty(last_vet_visit, today, factors, alerts)
    penalty += _activity_penalty(pet, factors)

    trend = weight_trend(weight_history)
    if trend is not None:
        if trend.recent_change_pct > RAPID_CHANGE_PCT:
            alerts.append(HealthAlert(
                "weight_gain_rapid", "medium", "Rapid Weight Gain",
                "Pet has gained significant weight recently",
            ))
        elif trend.recent_change_pct < -RAPID_CHANGE_PCT:
            alerts.append(HealthAlert(
                "weight_loss_rapid", "high", "Rapid Weight Loss",
                "Pet has lost significant weight recently",
            ))

    return HealthScoreResult(
        score=max(0, MAX_SCORE - penalty),
        factors=tuple(factors),
        alerts=tuple(alerts),
        trend=trend,
    )


def score_change(current: int, previous: Optional[int]) -> int:
    """Difference from the previous score, clamped to ±20. Zero on first run."""
    if previous is None:
        return 0
    return max(-MAX_SCORE_CHANGE, min(MAX_SCORE_CHANGE, current - previous))
