"""
Pet snapshot and the enumerations the nutrition engine understands.

A PetSnapshot is built once at the boundary (API request, database row) and
handed to the calculators unchanged. Loose strings coming from the outside
are normalised here: unknown values fall back to a neutral member and the
fallback is logged.
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)


class NutritionInputError(ValueError):
    """Input the nutrition engine cannot work with."""


class InvalidPetDataError(NutritionInputError):
    """Required pet data (such as body weight) is missing or out of range."""


class InvalidPlanInputError(NutritionInputError):
    """Meal plan preferences contradict each other."""


class Species(str, enum.Enum):
    DOG = "dog"
    CAT = "cat"
    RABBIT = "rabbit"
    BIRD = "bird"
    OTHER = "other"


class ActivityLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BodyCondition(str, enum.Enum):
    UNDERWEIGHT = "underweight"
    IDEAL = "ideal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


class SpayNeuterStatus(str, enum.Enum):
    INTACT = "intact"
    ALTERED = "altered"
    UNKNOWN = "unknown"


class LifeStage(str, enum.Enum):
    PUPPY = "puppy"
    KITTEN = "kitten"
    YOUNG = "young"
    ADULT = "adult"
    SENIOR = "senior"

    @property
    def is_growing(self) -> bool:
        return self in (LifeStage.PUPPY, LifeStage.KITTEN, LifeStage.YOUNG)


class WeightGoal(str, enum.Enum):
    WEIGHT_LOSS = "weight_loss"
    WEIGHT_GAIN = "weight_gain"
    MAINTENANCE = "maintenance"


ACTIVITY_ALIASES = {
    "moderate": ActivityLevel.MEDIUM,
    "normal": ActivityLevel.MEDIUM,
}

SPAY_NEUTER_ALIASES = {
    "spayed": SpayNeuterStatus.ALTERED,
    "neutered": SpayNeuterStatus.ALTERED,
    "fixed": SpayNeuterStatus.ALTERED,
    "true": SpayNeuterStatus.ALTERED,
    "false": SpayNeuterStatus.INTACT,
}


def body_condition_from_score(score: int) -> BodyCondition:
    """
    Map a 1-9 body condition score onto the four-step scale.

    1-3 underweight, 4-5 ideal, 6-7 overweight, 8-9 obese.
    """
    if score < 1 or score > 9:
        raise InvalidPetDataError(f"Body condition score must be between 1 and 9, got {score}")
    if score <= 3:
        return BodyCondition.UNDERWEIGHT
    if score <= 5:
        return BodyCondition.IDEAL
    if score <= 7:
        return BodyCondition.OVERWEIGHT
    return BodyCondition.OBESE


def _normalise(value) -> str:
    return str(value).strip().lower()


def parse_species(value: Union[str, Species, None]) -> Species:
    if isinstance(value, Species):
        return value
    if value is None:
        return Species.DOG
    try:
        return Species(_normalise(value))
    except ValueError:
        logger.warning("Unknown species %r, using formulas for 'other'", value)
        return Species.OTHER


def parse_activity_level(value: Union[str, ActivityLevel, None]) -> ActivityLevel:
    if isinstance(value, ActivityLevel):
        return value
    if value is None:
        return ActivityLevel.MEDIUM
    raw = _normalise(value)
    if raw in ACTIVITY_ALIASES:
        return ACTIVITY_ALIASES[raw]
    try:
        return ActivityLevel(raw)
    except ValueError:
        logger.warning("Unknown activity level %r, falling back to 'medium'", value)
        return ActivityLevel.MEDIUM


def parse_spay_neuter(value: Union[str, bool, SpayNeuterStatus, None]) -> SpayNeuterStatus:
    if isinstance(value, SpayNeuterStatus):
        return value
    if value is None:
        return SpayNeuterStatus.UNKNOWN
    if isinstance(value, bool):
        return SpayNeuterStatus.ALTERED if value else SpayNeuterStatus.INTACT
    raw = _normalise(value)
    if raw in SPAY_NEUTER_ALIASES:
        return SPAY_NEUTER_ALIASES[raw]
    try:
        return SpayNeuterStatus(raw)
    except ValueError:
        logger.warning("Unknown spay/neuter status %r, treating as 'unknown'", value)
        return SpayNeuterStatus.UNKNOWN


def parse_body_condition(
    value: Union[str, int, BodyCondition, None]
) -> tuple[BodyCondition, Optional[int]]:
    """
    Parse either representation of body condition.

    Returns:
        (category, score) where score is only set for integer input
    """
    if isinstance(value, BodyCondition):
        return value, None
    if value is None:
        return BodyCondition.IDEAL, None
    if isinstance(value, int) and not isinstance(value, bool):
        return body_condition_from_score(value), value
    raw = _normalise(value)
    if raw.isdigit():
        score = int(raw)
        return body_condition_from_score(score), score
    try:
        return BodyCondition(raw), None
    except ValueError:
        logger.warning("Unknown body condition %r, treating as 'ideal'", value)
        return BodyCondition.IDEAL, None


@dataclass(frozen=True)
class PetSnapshot:
    """Everything the calculators need to know about one pet."""

    species: Species
    weight_kg: float
    age_years: Optional[float] = None
    activity_level: ActivityLevel = ActivityLevel.MEDIUM
    body_condition: BodyCondition = BodyCondition.IDEAL
    body_condition_score: Optional[int] = None
    spay_neuter: SpayNeuterStatus = SpayNeuterStatus.UNKNOWN
    ideal_weight_kg: Optional[float] = None
    health_conditions: frozenset[str] = field(default_factory=frozenset)
    allergies: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        species,
        weight_kg,
        age_years=None,
        activity_level=None,
        body_condition=None,
        spay_neuter=None,
        ideal_weight_kg=None,
        health_conditions: Iterable[str] = (),
        allergies: Iterable[str] = (),
    ) -> "PetSnapshot":
        """Build a snapshot from loosely typed boundary values."""
        category, score = parse_body_condition(body_condition)
        return cls(
            species=parse_species(species),
            weight_kg=float(weight_kg or 0),
            age_years=float(age_years) if age_years is not None else None,
            activity_level=parse_activity_level(activity_level),
            body_condition=category,
            body_condition_score=score,
            spay_neuter=parse_spay_neuter(spay_neuter),
            ideal_weight_kg=float(ideal_weight_kg) if ideal_weight_kg else None,
            health_conditions=frozenset(_normalise(c) for c in health_conditions if c),
            allergies=frozenset(a.strip() for a in allergies if a and a.strip()),
        )


def require_weight(pet: PetSnapshot) -> float:
    """Return the pet's weight, raising when it cannot drive a calculation."""
    if pet.weight_kg is None or not math.isfinite(pet.weight_kg) or pet.weight_kg <= 0:
        raise InvalidPetDataError("Pet weight is required for calorie calculation")
    return pet.weight_kg
