"""
Sanity checks for computed energy results and stored nutrition plans.

Range problems come back as warning issues. Only species minimums and
allergen matches are error-severity, and even those never raise.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from pet_nutrition.core.calculations import (
    EnergyResult,
    compute_energy,
    compute_macros,
    get_life_stage,
    round_half_up,
)
from pet_nutrition.core.formulas import DEFAULT_FORMULA_TABLE, SpeciesFormulaTable
from pet_nutrition.core.pets import LifeStage, PetSnapshot, Species, require_weight
from pet_nutrition.core.recommendations import FoodRecommendation

logger = logging.getLogger(__name__)

WARNING = "warning"
ERROR = "error"

CALORIE_DEVIATION_LIMIT = 0.20
PROTEIN_DEVIATION_LIMIT = 0.15

SPECIES_RECOMMENDATIONS = {
    Species.DOG: (
        "Always provide fresh water",
        "Avoid foods toxic to dogs (chocolate, grapes, onions)",
        "Consider breed-specific nutritional needs",
    ),
    Species.CAT: (
        "Cats are obligate carnivores - require high protein",
        "Ensure adequate taurine in diet",
        "Monitor water intake - cats have low thirst drive",
    ),
}

LIFE_STAGE_RECOMMENDATIONS = {
    LifeStage.PUPPY: "Young pets need 3+ meals per day",
    LifeStage.KITTEN: "Young pets need 3+ meals per day",
    LifeStage.YOUNG: "Young pets need 3+ meals per day",
    LifeStage.SENIOR: "Senior pets benefit from smaller, frequent meals",
}


@dataclass(frozen=True)
class StoredPlan:
    """The parts of a persisted nutrition plan the validator looks at."""
    daily_calories: float
    protein_grams: Optional[float] = None
    protein_pct: Optional[float] = None
    food_recommendations: tuple[FoodRecommendation, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    severity: str
    message: str
    expected: Optional[float] = None
    actual: Optional[float] = None
    food: Optional[str] = None


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    issues: tuple[ValidationIssue, ...]
    recommendations: tuple[str, ...]

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == WARNING]

    @property
    def errors(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == ERROR]


def minimum_protein(pet: PetSnapshot, table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE) -> float:
    """
    Lowest acceptable daily protein.

    Formula: weight_kg × protein_per_kg × 0.8, rounded to 0.1 g
    """
    weight = require_weight(pet)
    per_kg = table.for_species(table.protein_per_kg, pet.species)
    return round(weight * per_kg * table.protein_floor_factor, 1)


def expected_calorie_range(rer: float, table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE) -> tuple[int, int]:
    return round_half_up(rer * table.der_min_factor), round_half_up(rer * table.der_max_factor)


def species_recommendations(pet: PetSnapshot, table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE) -> tuple[str, ...]:
    """Species advice (other species get the dog list) plus a life-stage line."""
    lines = list(SPECIES_RECOMMENDATIONS.get(pet.species, SPECIES_RECOMMENDATIONS[Species.DOG]))
    stage_line = LIFE_STAGE_RECOMMENDATIONS.get(get_life_stage(pet.species, pet.age_years, table))
    if stage_line:
        lines.append(stage_line)
    return tuple(lines)


def _deviation(actual: float, expected: float) -> float:
    if expected == 0:
        return 0.0
    return abs(actual - expected) / expected


def _check_stored_plan(pet, plan: StoredPlan, fresh: EnergyResult, table) -> list[ValidationIssue]:
    issues = []

    if _deviation(plan.daily_calories, fresh.der) > CALORIE_DEVIATION_LIMIT:
        issues.append(
            ValidationIssue(
                code="calorie_mismatch",
                severity=WARNING,
                message="Daily calories deviate significantly from calculated requirements",
                expected=fresh.der,
                actual=plan.daily_calories,
            )
        )

    if plan.protein_grams:
        required = compute_macros(pet, fresh.der, table).protein_grams
        if _deviation(plan.protein_grams, required) > PROTEIN_DEVIATION_LIMIT:
            issues.append(
                ValidationIssue(
                    code="protein_mismatch",
                    severity=WARNING,
                    message="Protein content may not meet requirements",
                    expected=round(required, 1),
                    actual=round(plan.protein_grams, 1),
                )
            )

    low_protein = plan.protein_pct is not None and plan.protein_pct < table.cat_min_protein_pct
    if pet.species == Species.CAT and low_protein:
        issues.append(
            ValidationIssue(
                code="insufficient_protein",
                severity=ERROR,
                message=f"Cats require minimum {table.cat_min_protein_pct:g}% protein in their diet",
                expected=table.cat_min_protein_pct,
                actual=round(plan.protein_pct, 1),
            )
        )

    return issues


def _check_allergens(pet: PetSnapshot, foods: Iterable[FoodRecommendation]) -> list[ValidationIssue]:
    issues = []
    foods = list(foods)
    for allergen in sorted(pet.allergies):
        needle = allergen.lower()
        for food in foods:
            if food.ingredients and needle in food.ingredients.lower():
                issues.append(
                    ValidationIssue(
                        code="allergen_present",
                        severity=ERROR,
                        message=f"Food recommendation contains allergen: {allergen}",
                        food=food.name or "Unknown food",
                    )
                )
    return issues


def validate(
    pet: PetSnapshot,
    computed: Union[EnergyResult, StoredPlan],
    *,
    protein_grams: Optional[float] = None,
    food_recommendations: Iterable[FoodRecommendation] = (),
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
) -> ValidationResult:
    """
    Check an energy result or stored plan against expected ranges.

    Args:
        pet: Pet snapshot
        computed: Fresh EnergyResult or a StoredPlan read back from storage
        protein_grams: Protein value to check when validating an EnergyResult
        food_recommendations: Extra foods to scan for the pet's allergens
        table: Formula constants

    Returns:
        ValidationResult; is_valid is False only when an error-severity issue exists
    """
    fresh = compute_energy(pet, table)
    issues = []

    if isinstance(computed, StoredPlan):
        der = computed.daily_calories
        protein = computed.protein_grams if protein_grams is None else protein_grams
        foods = list(computed.food_recommendations) + list(food_recommendations)
    else:
        der = computed.der
        protein = protein_grams
        foods = list(food_recommendations)

    low, high = expected_calorie_range(fresh.rer_raw, table)
    if der < low or der > high:
        issues.append(
            ValidationIssue(
                code="calories_out_of_range",
                severity=WARNING,
                message=f"Calculated calories ({der:g}) outside expected range ({low}-{high})",
                actual=der,
            )
        )

    if protein is not None:
        floor = minimum_protein(pet, table)
        if protein < floor:
            issues.append(
                ValidationIssue(
                    code="protein_below_minimum",
                    severity=WARNING,
                    message=f"Protein requirement below minimum recommended ({floor:g}g)",
                    expected=floor,
                    actual=protein,
                )
            )

    if isinstance(computed, StoredPlan):
        issues.extend(_check_stored_plan(pet, computed, fresh, table))

    issues.extend(_check_allergens(pet, foods))

    is_valid = not any(issue.severity == ERROR for issue in issues)
    if not is_valid:
        logger.info("Nutrition plan failed validation for %s: %d error(s)", pet.species.value,
                    sum(1 for issue in issues if issue.severity == ERROR))

    return ValidationResult(
        is_valid=is_valid,
        issues=tuple(issues),
        recommendations=species_recommendations(pet, table),
    )
