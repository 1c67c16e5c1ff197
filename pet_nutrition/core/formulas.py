"""
Species formula table for the nutrition engine.

All constants used by the energy, macronutrient, meal and validation
calculators live here so a caller can inject a different table without
touching the formulas themselves.

RER (Resting Energy Requirement): 70 × (weight_kg ^ 0.75)
Cats between 2 and 10 kg use the linear form: 30 × weight_kg + 70
DER (Daily Energy Requirement): RER × life stage × activity × body condition × spay/neuter
"""

from dataclasses import dataclass, field

from pet_nutrition.core.pets import (
    ActivityLevel,
    BodyCondition,
    LifeStage,
    Species,
    SpayNeuterStatus,
)


def _life_stage_multipliers() -> dict:
    return {
        Species.DOG: {"young": 2.0, "adult": 1.6, "senior": 1.4},
        Species.CAT: {"young": 2.5, "adult": 1.4, "senior": 1.2},
        None: {"young": 2.0, "adult": 1.5, "senior": 1.3},
    }


def _activity_multipliers() -> dict:
    return {
        ActivityLevel.LOW: 1.2,
        ActivityLevel.MEDIUM: 1.4,
        ActivityLevel.HIGH: 1.8,
    }


def _bcs_multipliers() -> dict:
    return {
        BodyCondition.UNDERWEIGHT: 1.15,
        BodyCondition.IDEAL: 1.0,
        BodyCondition.OVERWEIGHT: 0.85,
        BodyCondition.OBESE: 0.7,
    }


def _spay_multipliers() -> dict:
    return {
        SpayNeuterStatus.ALTERED: 0.95,
        SpayNeuterStatus.INTACT: 1.0,
        SpayNeuterStatus.UNKNOWN: 1.0,
    }


@dataclass(frozen=True)
class SpeciesFormulaTable:
    """Per-species constants. A `None` key holds the default for unlisted species."""

    rer_coefficient: float = 70.0
    rer_exponent: float = 0.75
    # Linear cat approximation, only valid inside the weight band
    cat_linear_slope: float = 30.0
    cat_linear_intercept: float = 70.0
    cat_linear_min_kg: float = 2.0
    cat_linear_max_kg: float = 10.0

    young_below_years: float = 1.0
    senior_from_years: float = 7.0

    life_stage_multipliers: dict = field(default_factory=_life_stage_multipliers)
    activity_multipliers: dict = field(default_factory=_activity_multipliers)
    bcs_multipliers: dict = field(default_factory=_bcs_multipliers)
    spay_multipliers: dict = field(default_factory=_spay_multipliers)

    # Macronutrients
    protein_per_kg: dict = field(
        default_factory=lambda: {Species.DOG: 2.5, Species.CAT: 4.0, None: 2.0}
    )
    fat_pct: dict = field(
        default_factory=lambda: {Species.DOG: 15.0, Species.CAT: 20.0, None: 12.0}
    )
    fiber_pct: dict = field(
        default_factory=lambda: {
            Species.DOG: 4.0,
            Species.CAT: 2.0,
            Species.RABBIT: 20.0,
            Species.BIRD: 8.0,
            None: 4.0,
        }
    )
    kcal_per_g_protein: float = 4.0
    kcal_per_g_fat: float = 9.0
    kcal_per_g_carbs: float = 4.0
    kcal_per_g_fiber: float = 4.0

    # Micronutrients per kg body weight per day
    calcium_mg_per_kg: dict = field(
        default_factory=lambda: {
            Species.DOG: 50.0,
            Species.CAT: 40.0,
            Species.RABBIT: 60.0,
            Species.BIRD: 80.0,
            None: 50.0,
        }
    )
    phosphorus_to_calcium: float = 0.8
    sodium_mg_per_kg: dict = field(
        default_factory=lambda: {
            Species.DOG: 20.0,
            Species.CAT: 15.0,
            Species.RABBIT: 10.0,
            Species.BIRD: 25.0,
            None: 20.0,
        }
    )
    vitamin_a_iu_per_kg: dict = field(
        default_factory=lambda: {
            Species.DOG: 100.0,
            Species.CAT: 200.0,
            Species.RABBIT: 150.0,
            Species.BIRD: 300.0,
            None: 100.0,
        }
    )
    vitamin_d_iu_per_kg: dict = field(
        default_factory=lambda: {
            Species.DOG: 10.0,
            Species.CAT: 5.0,
            Species.RABBIT: 0.0,
            Species.BIRD: 15.0,
            None: 10.0,
        }
    )
    vitamin_e_mg_per_kg: float = 1.0
    thiamine_mg_per_kg: float = 0.05
    riboflavin_mg_per_kg: float = 0.1
    niacin_mg_per_kg: float = 0.3
    growth_nutrient_factor: float = 1.5

    # Food energy density used for portion math
    dry_kcal_per_100g: float = 350.0
    wet_kcal_per_100g: float = 90.0
    dry_kcal_per_cup: float = 350.0
    wet_kcal_per_can: float = 200.0

    # Validation bands
    der_min_factor: float = 1.2
    der_max_factor: float = 2.5
    protein_floor_factor: float = 0.8
    cat_min_protein_pct: float = 26.0

    def for_species(self, mapping: dict, species: Species):
        """Look up a per-species value, falling back to the default entry."""
        return mapping.get(species, mapping[None])

    def life_stage_multiplier(self, species: Species, stage: LifeStage) -> float:
        row = self.for_species(self.life_stage_multipliers, species)
        if stage.is_growing:
            return row["young"]
        return row[stage.value]


DEFAULT_FORMULA_TABLE = SpeciesFormulaTable()
