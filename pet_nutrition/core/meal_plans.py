"""
Meal scheduling and weekly plan expansion.

Splits a daily energy requirement into meals at fixed clock times and turns
calories into dry/wet food portions using nominal energy densities.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from pet_nutrition.core.calculations import kcal_to_grams, round_half_up
from pet_nutrition.core.formulas import DEFAULT_FORMULA_TABLE, SpeciesFormulaTable
from pet_nutrition.core.pets import InvalidPlanInputError, PetSnapshot, Species, require_weight

logger = logging.getLogger(__name__)

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

FEEDING_SCHEDULES = {
    "standard": {
        1: ("08:00",),
        2: ("08:00", "18:00"),
        3: ("07:00", "13:00", "19:00"),
        4: ("07:00", "12:00", "17:00", "21:00"),
    },
    "early_riser": {
        1: ("07:00",),
        2: ("07:00", "17:00"),
        3: ("06:00", "12:00", "18:00"),
        4: ("06:00", "11:00", "16:00", "20:00"),
    },
    "night_owl": {
        1: ("10:00",),
        2: ("10:00", "20:00"),
        3: ("09:00", "15:00", "21:00"),
        4: ("09:00", "13:00", "18:00", "22:00"),
    },
}

# Window used when more meals are requested than any table covers
SPREAD_START_MINUTES = 7 * 60
SPREAD_END_MINUTES = 21 * 60


@dataclass(frozen=True)
class MealPreferences:
    meals_per_day: Optional[int] = None
    times: Optional[tuple[str, ...]] = None
    dry_ratio: float = 1.0
    wet_ratio: float = 0.0
    schedule_style: str = "standard"


@dataclass(frozen=True)
class Meal:
    time: str
    calories: int
    dry_grams: int
    wet_grams: int


@dataclass(frozen=True)
class PortionGuidance:
    dry_grams: int
    wet_grams: int
    dry_food_cups: float
    wet_food_cans: float


@dataclass(frozen=True)
class MealPlan:
    """A single day's feeding template."""
    daily_calories: int
    meals_per_day: int
    calories_per_meal: int
    feeding_times: tuple[str, ...]
    meals: tuple[Meal, ...]
    portion: PortionGuidance
    dry_ratio: float = 1.0
    wet_ratio: float = 0.0
    feeding_guidelines: dict = field(default_factory=dict)

    @property
    def portion_dry_grams(self) -> int:
        return self.portion.dry_grams

    @property
    def portion_wet_grams(self) -> int:
        return self.portion.wet_grams


@dataclass(frozen=True)
class DayPlan:
    day: str
    meals: tuple[Meal, ...]


@dataclass(frozen=True)
class ShoppingList:
    dry_grams: int
    wet_grams: int


@dataclass(frozen=True)
class WeeklyPlan:
    template: MealPlan
    days: tuple[DayPlan, ...]
    shopping_list: ShoppingList


def default_meals_per_day(pet: PetSnapshot) -> int:
    """
    Meals per day by species, age and weight.

    Cats: 4 for kittens, otherwise 2.
    Dogs: 4 under six months, 3 under a year or under 10 kg, otherwise 2.
    Unknown age counts as adult.
    """
    age = pet.age_years if pet.age_years is not None else 1.0
    if pet.species == Species.CAT:
        return 4 if age < 1 else 2
    if pet.species == Species.DOG:
        if age < 0.5:
            return 4
        if age < 1:
            return 3
        if pet.weight_kg < 10:
            return 3
        return 2
    return 2


def _format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def feeding_times(meals_per_day: int, style: str = "standard") -> tuple[str, ...]:
    """Clock times for a number of meals in a schedule style."""
    if meals_per_day <= 0:
        return ()
    schedule = FEEDING_SCHEDULES.get(style)
    if schedule is None:
        logger.warning("Unknown schedule style %r, using 'standard'", style)
        schedule = FEEDING_SCHEDULES["standard"]
    if meals_per_day in schedule:
        return schedule[meals_per_day]

    step = (SPREAD_END_MINUTES - SPREAD_START_MINUTES) / (meals_per_day - 1)
    return tuple(
        _format_minutes(round_half_up(SPREAD_START_MINUTES + step * i))
        for i in range(meals_per_day)
    )


def normalise_ratio(dry: float, wet: float) -> tuple[float, float]:
    """Scale a dry:wet calorie ratio so the parts sum to 1."""
    dry = max(0.0, float(dry))
    wet = max(0.0, float(wet))
    total = max(0.0001, dry + wet)
    return dry / total, wet / total


def _resolve_schedule(pet: PetSnapshot, preferences: MealPreferences) -> tuple[int, tuple[str, ...]]:
    times = tuple(preferences.times) if preferences.times else None
    count = preferences.meals_per_day

    if count is not None and count < 0:
        raise InvalidPlanInputError("meals_per_day cannot be negative")
    if times is not None:
        if count is not None and count != len(times):
            raise InvalidPlanInputError(
                f"meals_per_day ({count}) does not match the {len(times)} feeding times supplied"
            )
        return len(times), times

    if count is None:
        count = default_meals_per_day(pet)
    return count, feeding_times(count, preferences.schedule_style)


def feeding_guidelines(pet: PetSnapshot) -> dict:
    """Plain-language feeding advice for the pet's species and age."""
    young = pet.age_years is not None and pet.age_years < 1
    guidelines = {
        "frequency": "3-4 times daily" if young else "2 times daily",
        "timing": "Feed at consistent times",
        "portion_control": "Measure portions to prevent overfeeding",
        "water": "Always provide fresh water",
        "monitoring": "Monitor weight and body condition regularly",
    }
    if pet.species == Species.CAT:
        guidelines["special"] = "Cats prefer multiple small meals throughout the day"
    elif pet.species == Species.RABBIT:
        guidelines["special"] = "Unlimited grass hay should make up most of the diet"
    elif pet.species == Species.BIRD:
        guidelines["special"] = "Offer fresh vegetables daily alongside pellets"
    return guidelines


def build_meal_plan(
    pet: PetSnapshot,
    der: float,
    preferences: Optional[MealPreferences] = None,
    table: SpeciesFormulaTable = DEFAULT_FORMULA_TABLE,
) -> MealPlan:
    """
    Split a daily energy requirement into a feeding schedule.

    Formula:
        calories_per_meal = DER / meals_per_day
        dry grams = calories_per_meal × dry share / dry kcal per 100 g × 100
        wet grams = calories_per_meal × wet share / wet kcal per 100 g × 100

    Args:
        pet: Pet snapshot (species, age and weight pick the default meal count)
        der: Daily energy requirement in kcal
        preferences: Optional meal count, times, dry:wet ratio and schedule style
        table: Formula constants

    Returns:
        MealPlan for one day

    Raises:
        InvalidPetDataError: weight is missing or not positive
        InvalidPlanInputError: meal count and supplied times disagree
    """
    require_weight(pet)
    preferences = preferences or MealPreferences()
    meals_per_day, times = _resolve_schedule(pet, preferences)
    dry_ratio, wet_ratio = normalise_ratio(preferences.dry_ratio, preferences.wet_ratio)

    if meals_per_day == 0:
        calories_per_meal = 0
    else:
        calories_per_meal = round_half_up(der / meals_per_day)

    dry_kcal = calories_per_meal * dry_ratio
    wet_kcal = calories_per_meal * wet_ratio
    portion = PortionGuidance(
        dry_grams=kcal_to_grams(dry_kcal, table.dry_kcal_per_100g),
        wet_grams=kcal_to_grams(wet_kcal, table.wet_kcal_per_100g),
        dry_food_cups=round(dry_kcal / table.dry_kcal_per_cup, 2),
        wet_food_cans=round(wet_kcal / table.wet_kcal_per_can, 1),
    )

    meals = tuple(
        Meal(
            time=time,
            calories=calories_per_meal,
            dry_grams=portion.dry_grams,
            wet_grams=portion.wet_grams,
        )
        for time in times
    )

    return MealPlan(
        daily_calories=round_half_up(der) if meals_per_day else 0,
        meals_per_day=meals_per_day,
        calories_per_meal=calories_per_meal,
        feeding_times=times,
        meals=meals,
        portion=portion,
        dry_ratio=round(dry_ratio, 4),
        wet_ratio=round(wet_ratio, 4),
        feeding_guidelines=feeding_guidelines(pet),
    )


def build_weekly_plan(daily_template: MealPlan) -> WeeklyPlan:
    """
    Repeat a daily template across Mon-Sun and total the week's food.

    Every day gets the same meals, so the shopping list is a straight
    multiplication: grams per meal × meals per day × 7.
    """
    days = tuple(DayPlan(day=day, meals=daily_template.meals) for day in WEEKDAYS)
    meals_per_week = daily_template.meals_per_day * len(WEEKDAYS)
    shopping_list = ShoppingList(
        dry_grams=daily_template.portion_dry_grams * meals_per_week,
        wet_grams=daily_template.portion_wet_grams * meals_per_week,
    )
    return WeeklyPlan(template=daily_template, days=days, shopping_list=shopping_list)
