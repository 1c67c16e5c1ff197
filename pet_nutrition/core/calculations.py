"""
Core math engine for pet nutrition calculations.

RER (Resting Energy Requirement): 70 × (weight_kg ^ 0.75), or 30 × weight_kg + 70
for cats between 2 and 10 kg
DER (Daily Energy Requirement): RER × life stage × activity × body condition × spay/neuter
"""

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from pet_nutrition.core.formulas import DEFAULT_FORMULA_TABLE, SpeciesFormulaTable
from pet_nutrition.core.pets import (
    BodyCondition,
    LifeStage,
    PetSnapshot,
    Species,
    WeightGoal,
    body_condition_from_score,
    require_weight,
)

logger = logging.getLogger(__name__)

CALCULATION_METHOD = "Species RER/DER engine v1"

WEIGHT_GOAL_FACTORS = {
    WeightGoal.WEIGHT_LOSS: 0.8,
    WeightGoal.WEIGHT_GAIN: 1.2,
    WeightGoal.MAINTENANCE: 1.0,
}

# Multipliers applied to a finished requirement, keyed by health condition
HEALTH_CONDITION_ADJUSTMENTS = {
    "obesity": {"calories": 0.8, "fat": 0.7, "fiber": 1.5},
    "diabetes": {"carbs": 0.6, "fiber": 1.8, "protein": 1.2},
    "kidney_disease": {"protein": 0.7, "phosphorus": 0.5, "sodium": 0.6},
    "heart_disease": {"sodium": 0.4, "fat": 0.8},
    "allergies": {},
    "digestive_issues": {"fiber": 0.8, "fat": 0.9},
}


@dataclass(frozen=True)
class EnergyResult:
    """Energy requirement plus every multiplier that produced it."""
    rer: int
    der: int
    rer_raw: float
    life_stage: LifeStage
    life_stage_multiplier: float
    activity_multiplier: float
    bcs_multiplier: float
    spay_multiplier: float
    calculation_method: str = CALCULATION_METHOD


@dataclass(frozen=True)
class MacroResult:
    """Daily macronutrient split for a given DER."""
    protein_grams: float
    fat_grams: float
    carbohydrate_grams: float
    protein_kcal: float
    fat_kcal: float
    carbohydrate_kcal: float
    protein_pct: float
    fat_pct: float
    carbohydrate_pct: float
    fiber_grams: Optional[float] = None
    fiber_kcal: Optional[float] = None
    fiber_pct: Optional[float] = None


@dataclass(frozen=True)
class NutrientRequirements:
    """Energy, macros and micronutrients for one pet."""
    daily_calories: float
    protein_grams: float
    fat_grams: float
    carbohydrate_grams: float
    fiber_grams: float
    micronutrients: dict = field(default_factory=dict)
    energy: Optional[EnergyResult] = None
    macros: Optional[MacroResult] = None


def round_half_up(value: float, digits: int = 0):
    """
    Round halves away from zero instead of Python's banker's rounding.

    Returns an int when digits is 0, otherwise a float.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)


def calculate_rer(
    weight_kg: float,
    species: Species,
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
) -> float:
    """
    Calculate Resting Energy Requirement (RER).

    Formula: RER = 70 × (weight_kg ^ 0.75)
    Cats within 2-10 kg: RER = 30 × weight_kg + 70

    The two cat formulas do not meet at the band edges (130 vs 117.7 kcal at
    2 kg, 370 vs 393.6 kcal at 10 kg).

    Args:
        weight_kg: Pet's weight in kilograms
        species: Pet species
        table: Formula constants

    Returns:
        RER in kcal/day
    """
    if weight_kg <= 0:
        raise ValueError("Weight must be positive")
    if species == Species.CAT and table.cat_linear_min_kg <= weight_kg <= table.cat_linear_max_kg:
        return table.cat_linear_slope * weight_kg + table.cat_linear_intercept
    return table.rer_coefficient * (weight_kg ** table.rer_exponent)


def get_life_stage(
    species: Species,
    age_years: Optional[float],
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
) -> LifeStage:
    """Bucket a pet into young/adult/senior. Unknown age counts as adult."""
    if age_years is None:
        logger.info("Age not recorded for %s, using adult life stage", species.value)
        return LifeStage.ADULT
    if age_years < table.young_below_years:
        if species == Species.DOG:
            return LifeStage.PUPPY
        if species == Species.CAT:
            return LifeStage.KITTEN
        return LifeStage.YOUNG
    if age_years >= table.senior_from_years:
        return LifeStage.SENIOR
    return LifeStage.ADULT


def effective_body_condition(pet: PetSnapshot) -> BodyCondition:
    """An explicit 1-9 score takes precedence over the category."""
    if pet.body_condition_score is not None:
        return body_condition_from_score(pet.body_condition_score)
    return pet.body_condition


def compute_energy(
    pet: PetSnapshot,
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
) -> EnergyResult:
    """
    Compute RER and DER for a pet.

    Raises:
        InvalidPetDataError: weight is missing or not positive
    """
    weight = require_weight(pet)
    rer = calculate_rer(weight, pet.species, table)
    stage = get_life_stage(pet.species, pet.age_years, table)

    life_mult = table.life_stage_multiplier(pet.species, stage)
    activity_mult = table.activity_multipliers[pet.activity_level]
    bcs_mult = table.bcs_multipliers[effective_body_condition(pet)]
    spay_mult = table.spay_multipliers[pet.spay_neuter]

    der = round_half_up(rer * life_mult * activity_mult * bcs_mult * spay_mult)

    return EnergyResult(
        rer=round_half_up(rer),
        der=der,
        rer_raw=rer,
        life_stage=stage,
        life_stage_multiplier=life_mult,
        activity_multiplier=activity_mult,
        bcs_multiplier=bcs_mult,
        spay_multiplier=spay_mult,
    )


def _pct_of(kcal: float, der: float) -> float:
    if der <= 0:
        return 0.0
    return round((kcal / der) * 100, 1)


def compute_macros(
    pet: PetSnapshot,
    der: float,
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
    track_fiber: bool = False,
) -> MacroResult:
    """
    Split a daily energy requirement into protein, fat and carbohydrate.

    Protein is weight based (g/kg), fat is a share of DER, carbohydrate takes
    whatever energy is left. With track_fiber the species fiber share is
    taken out of the carbohydrate budget first.

    Args:
        pet: Pet snapshot (weight and species are used)
        der: Daily energy requirement in kcal
        table: Formula constants
        track_fiber: Report fiber as its own nutrient

    Returns:
        MacroResult with grams, kcal and percentage of DER
    """
    weight = require_weight(pet)

    protein_grams = round(weight * table.for_species(table.protein_per_kg, pet.species), 1)
    protein_kcal = protein_grams * table.kcal_per_g_protein

    fat_kcal = der * (table.for_species(table.fat_pct, pet.species) / 100)
    fat_grams = round(fat_kcal / table.kcal_per_g_fat, 1)

    fiber_grams = fiber_kcal = fiber_pct = None
    fiber_budget = 0.0
    if track_fiber:
        fiber_budget = der * (table.for_species(table.fiber_pct, pet.species) / 100)
        fiber_kcal = fiber_budget
        fiber_grams = round(fiber_budget / table.kcal_per_g_fiber, 1)
        fiber_pct = _pct_of(fiber_budget, der)

    carb_kcal = max(0.0, der - protein_kcal - fat_kcal - fiber_budget)
    carb_grams = round(carb_kcal / table.kcal_per_g_carbs, 1)

    if der > 0 and carb_kcal == 0:
        logger.debug("Protein and fat exceed DER %s for %s, no carbohydrate budget", der, pet.species.value)

    return MacroResult(
        protein_grams=protein_grams,
        fat_grams=fat_grams,
        carbohydrate_grams=carb_grams,
        protein_kcal=protein_kcal,
        fat_kcal=fat_kcal,
        carbohydrate_kcal=carb_kcal,
        protein_pct=_pct_of(protein_kcal, der),
        fat_pct=_pct_of(fat_kcal, der),
        carbohydrate_pct=_pct_of(carb_kcal, der),
        fiber_grams=fiber_grams,
        fiber_kcal=fiber_kcal,
        fiber_pct=fiber_pct,
    )


def compute_micronutrients(
    pet: PetSnapshot,
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
) -> dict:
    """
    Weight-proportional daily micronutrient targets.

    Calcium, phosphorus, sodium, vitamin E and the B vitamins are in mg,
    vitamins A and D in IU. Growing pets get 1.5× every value. Advisory only.
    """
    weight = require_weight(pet)
    species = pet.species

    calcium = weight * table.for_species(table.calcium_mg_per_kg, species)
    nutrients = {
        "calcium": calcium,
        "phosphorus": calcium * table.phosphorus_to_calcium,
        "sodium": weight * table.for_species(table.sodium_mg_per_kg, species),
        "vitamin_a": weight * table.for_species(table.vitamin_a_iu_per_kg, species),
        "vitamin_d": weight * table.for_species(table.vitamin_d_iu_per_kg, species),
        "vitamin_e": weight * table.vitamin_e_mg_per_kg,
        "thiamine": weight * table.thiamine_mg_per_kg,
        "riboflavin": weight * table.riboflavin_mg_per_kg,
        "niacin": weight * table.niacin_mg_per_kg,
    }

    if get_life_stage(species, pet.age_years, table).is_growing:
        nutrients = {key: value * table.growth_nutrient_factor for key, value in nutrients.items()}

    return {key: round(value, 2) for key, value in nutrients.items()}


def compute_requirements(
    pet: PetSnapshot,
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
) -> NutrientRequirements:
    """Energy, macros (fiber tracked) and micronutrients in one bundle."""
    energy = compute_energy(pet, table)
    macros = compute_macros(pet, energy.der, table, track_fiber=True)
    return NutrientRequirements(
        daily_calories=energy.der,
        protein_grams=macros.protein_grams,
        fat_grams=macros.fat_grams,
        carbohydrate_grams=macros.carbohydrate_grams,
        fiber_grams=macros.fiber_grams or 0.0,
        micronutrients=compute_micronutrients(pet, table),
        energy=energy,
        macros=macros,
    )


def adjust_for_health_conditions(
    requirements: NutrientRequirements,
    health_conditions: Iterable[str],
) -> NutrientRequirements:
    """
    Apply post-hoc diet changes for known health conditions.

    Multipliers compound when a pet has several conditions. Unknown
    conditions are logged and left alone.
    """
    values = {
        "calories": requirements.daily_calories,
        "protein": requirements.protein_grams,
        "fat": requirements.fat_grams,
        "carbs": requirements.carbohydrate_grams,
        "fiber": requirements.fiber_grams,
    }
    micros = dict(requirements.micronutrients)

    for condition in sorted(set(c.lower() for c in health_conditions)):
        adjustments = HEALTH_CONDITION_ADJUSTMENTS.get(condition)
        if adjustments is None:
            logger.warning("No diet adjustment known for health condition %r", condition)
            continue
        for key, factor in adjustments.items():
            if key in values:
                values[key] *= factor
            elif key in micros:
                micros[key] *= factor

    return replace(
        requirements,
        daily_calories=round(values["calories"], 2),
        protein_grams=round(values["protein"], 2),
        fat_grams=round(values["fat"], 2),
        carbohydrate_grams=round(values["carbs"], 2),
        fiber_grams=round(values["fiber"], 2),
        micronutrients={key: round(value, 2) for key, value in micros.items()},
    )


def infer_weight_goal(pet: PetSnapshot, tolerance: float = 0.05) -> WeightGoal:
    """
    Determine the weight management goal from current vs ideal weight.

    Args:
        pet: Pet snapshot
        tolerance: Fraction of ideal weight treated as "at target"

    Returns:
        WeightGoal for the pet
    """
    if not pet.ideal_weight_kg or not pet.weight_kg:
        return WeightGoal.MAINTENANCE
    ratio = pet.weight_kg / pet.ideal_weight_kg
    if ratio > 1 + tolerance:
        return WeightGoal.WEIGHT_LOSS
    if ratio < 1 - tolerance:
        return WeightGoal.WEIGHT_GAIN
    return WeightGoal.MAINTENANCE


def adjust_for_weight_goal(der: float, goal: WeightGoal) -> int:
    """
    Scale daily calories for a weight goal.

    Formula: adjusted = DER × goal factor (0.8 loss, 1.2 gain, 1.0 maintenance)
    """
    return round_half_up(der * WEIGHT_GOAL_FACTORS[goal])


def kcal_to_grams(kcal: float, kcal_per_100g: float) -> int:
    """Whole grams of a food supplying `kcal`, rounded half up."""
    if kcal_per_100g <= 0:
        raise ValueError(f"Energy density must be positive, got {kcal_per_100g} kcal/100g")
    return round_half_up(kcal / kcal_per_100g * 100)
