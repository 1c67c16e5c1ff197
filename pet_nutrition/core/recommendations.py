"""
Generic food recommendations and feeding instructions for a nutrition plan.
"""

from dataclasses import dataclass, field

from pet_nutrition.core.calculations import get_life_stage, kcal_to_grams
from pet_nutrition.core.pets import LifeStage, PetSnapshot, Species, WeightGoal

DRY_FOOD_KCAL_PER_100G = 375
WET_FOOD_KCAL_PER_100G = 90
TREAT_KCAL_PER_100G = 350
WET_FOOD_SHARE = 0.3
TREAT_SHARE = 0.1

BASE_INGREDIENTS = {
    Species.DOG: {
        "dry": ["chicken", "brown rice", "barley", "chicken fat", "fish oil", "carrots"],
        "wet": ["beef", "chicken broth", "peas", "sweet potato"],
    },
    Species.CAT: {
        "dry": ["chicken", "turkey", "fish meal", "chicken fat", "taurine"],
        "wet": ["tuna", "chicken liver", "fish broth", "taurine"],
    },
    Species.RABBIT: {
        "dry": ["timothy hay", "oat hulls", "soybean hulls", "flaxseed"],
        "wet": ["romaine lettuce", "parsley", "carrot tops"],
    },
    Species.BIRD: {
        "dry": ["millet", "corn", "sunflower seeds", "peanuts", "oat groats"],
        "wet": ["leafy greens", "apple", "carrot"],
    },
    Species.OTHER: {
        "dry": ["chicken", "brown rice", "oats", "vegetable oil"],
        "wet": ["chicken", "vegetable broth", "peas"],
    },
}

TREAT_INGREDIENTS = ["oat flour", "pumpkin", "turkey"]

HEALTH_CONDITION_INSTRUCTIONS = {
    "diabetes": "Monitor carbohydrate intake and maintain consistent meal times.",
    "kidney_disease": "Consider reduced protein and phosphorus diet - consult veterinarian.",
    "heart_disease": "Low sodium diet recommended - check food labels carefully.",
    "allergies": "Strictly avoid known allergens and introduce new foods gradually.",
}

WEIGHT_GOAL_INSTRUCTIONS = {
    WeightGoal.WEIGHT_LOSS: (
        "Weight loss plan: Feed measured portions, increase exercise gradually, and monitor "
        "weight weekly. Target weight loss is 1-2% of body weight per week."
    ),
    WeightGoal.WEIGHT_GAIN: (
        "Weight gain plan: Increase meal frequency, choose calorie-dense foods, and monitor "
        "for healthy weight gain."
    ),
    WeightGoal.MAINTENANCE: (
        "Maintenance plan: Continue current feeding routine while monitoring weight monthly."
    ),
}


@dataclass(frozen=True)
class FoodRecommendation:
    kind: str
    category: str
    name: str
    daily_amount_grams: int
    calories_per_100g: int
    feeding_notes: str
    ingredients: str
    avoid_ingredients: tuple[str, ...] = field(default_factory=tuple)


def _without_allergens(ingredients: list[str], allergies) -> str:
    lowered = [a.lower() for a in allergies]
    kept = [i for i in ingredients if not any(a in i.lower() for a in lowered)]
    return ", ".join(kept)


def _food_name(pet: PetSnapshot, stage: LifeStage, kind: str) -> str:
    return f"Premium {stage.value.title()} {pet.species.value.title()} {kind}"


def recommend_foods(pet: PetSnapshot, daily_calories: float, include_wet: bool = True) -> list[FoodRecommendation]:
    """
    Size generic dry, wet and treat recommendations from daily calories.

    Dry food carries the whole requirement at 375 kcal/100 g, wet food can
    replace 30% of it at 90 kcal/100 g, treats are capped at 10% of calories.
    Ingredient text never lists the pet's known allergens.
    """
    stage = get_life_stage(pet.species, pet.age_years)
    ingredients = BASE_INGREDIENTS.get(pet.species, BASE_INGREDIENTS[Species.OTHER])
    avoid = tuple(sorted(pet.allergies))

    foods = [
        FoodRecommendation(
            kind="primary",
            category="dry_kibble",
            name=_food_name(pet, stage, "Dry Food"),
            daily_amount_grams=kcal_to_grams(daily_calories, DRY_FOOD_KCAL_PER_100G),
            calories_per_100g=DRY_FOOD_KCAL_PER_100G,
            feeding_notes="High-quality complete and balanced dry food",
            ingredients=_without_allergens(ingredients["dry"], pet.allergies),
            avoid_ingredients=avoid,
        )
    ]
    if include_wet:
        foods.append(
            FoodRecommendation(
                kind="supplement",
                category="wet_food",
                name=_food_name(pet, stage, "Wet Food"),
                daily_amount_grams=kcal_to_grams(daily_calories * WET_FOOD_SHARE, WET_FOOD_KCAL_PER_100G),
                calories_per_100g=WET_FOOD_KCAL_PER_100G,
                feeding_notes="Can replace 30% of dry food for variety and hydration",
                ingredients=_without_allergens(ingredients["wet"], pet.allergies),
                avoid_ingredients=avoid,
            )
        )
    foods.append(
        FoodRecommendation(
            kind="treats",
            category="treats",
            name="Healthy Training Treats",
            daily_amount_grams=kcal_to_grams(daily_calories * TREAT_SHARE, TREAT_KCAL_PER_100G),
            calories_per_100g=TREAT_KCAL_PER_100G,
            feeding_notes="Should not exceed 10% of daily calories",
            ingredients=_without_allergens(TREAT_INGREDIENTS, pet.allergies),
            avoid_ingredients=avoid,
        )
    )
    return foods


def special_instructions(pet: PetSnapshot, goal: WeightGoal) -> str:
    """Combined free-text instructions for life stage, weight goal, conditions and species."""
    instructions = []
    stage = get_life_stage(pet.species, pet.age_years)

    if stage.is_growing:
        instructions.append("Growing pets need frequent meals and higher calorie density.")
    elif stage == LifeStage.SENIOR:
        instructions.append(
            "Senior pets may benefit from easily digestible foods and joint support supplements."
        )

    instructions.append(WEIGHT_GOAL_INSTRUCTIONS[goal])

    for condition in sorted(pet.health_conditions):
        instructions.append(
            HEALTH_CONDITION_INSTRUCTIONS.get(
                condition, f"Consult veterinarian about dietary modifications for {condition}."
            )
        )

    if pet.species == Species.CAT:
        instructions.append(
            "Cats require taurine and arachidonic acid - ensure food is formulated for cats."
        )

    return " ".join(instructions)
