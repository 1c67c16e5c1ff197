"""Nutrition calculator API endpoints."""

from dataclasses import asdict, replace

from fastapi import APIRouter

from pet_nutrition.core.calculations import EnergyResult, MacroResult, compute_energy, compute_macros
from pet_nutrition.core.meal_plans import MealPlan, MealPreferences, build_meal_plan, build_weekly_plan
from pet_nutrition.core.pets import PetSnapshot
from pet_nutrition.core.recommendations import FoodRecommendation
from pet_nutrition.core.validation import ValidationResult, validate
from pet_nutrition.schemas.schemas import (
    CalculationResponse,
    MealPlanRequest,
    MealPlanResponse,
    NutritionRequest,
    ValidateRequest,
    ValidationResponse,
    WeeklyPlanResponse,
)
from pet_nutrition.services.pet_records import snapshot_from_request

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


def macros_payload(macros: MacroResult) -> dict:
    return {
        "protein_grams": macros.protein_grams,
        "fat_grams": macros.fat_grams,
        "carbohydrate_grams": macros.carbohydrate_grams,
        "protein_pct": macros.protein_pct,
        "fat_pct": macros.fat_pct,
        "carbohydrate_pct": macros.carbohydrate_pct,
    }


def validation_payload(result: ValidationResult) -> dict:
    return {
        "is_valid": result.is_valid,
        "warnings": result.warnings,
        "errors": result.errors,
        "issues": [asdict(issue) for issue in result.issues],
        "recommendations": list(result.recommendations),
    }


def meals_payload(plan: MealPlan) -> list[dict]:
    return [
        {"time": m.time, "calories": m.calories, "dry_grams": m.dry_grams, "wet_grams": m.wet_grams}
        for m in plan.meals
    ]


def _calculate(pet: PetSnapshot) -> tuple[EnergyResult, MacroResult, dict]:
    energy = compute_energy(pet)
    macros = compute_macros(pet, energy.der)
    warnings = validate(pet, energy, protein_grams=macros.protein_grams).warnings
    payload = {
        "rer": energy.rer,
        "der": energy.der,
        "lifestage": energy.life_stage.value,
        "lifestage_multiplier": energy.life_stage_multiplier,
        "activity_multiplier": energy.activity_multiplier,
        "bcs_multiplier": energy.bcs_multiplier,
        "spay_multiplier": energy.spay_multiplier,
        "macros": macros_payload(macros),
        "warnings": warnings,
        "calculation_method": energy.calculation_method,
    }
    return energy, macros, payload


def _meal_plan(request: MealPlanRequest) -> tuple[MealPlan, dict]:
    pet = snapshot_from_request(request)
    energy, _, payload = _calculate(pet)
    preferences = MealPreferences(
        meals_per_day=request.meals_per_day,
        times=tuple(request.times) if request.times else None,
        dry_ratio=request.dry_ratio,
        wet_ratio=request.wet_ratio,
        schedule_style=request.schedule_style,
    )
    plan = build_meal_plan(pet, energy.der, preferences)
    payload.update(
        meals_per_day=plan.meals_per_day,
        calories_per_meal=plan.calories_per_meal,
        feeding_schedule=meals_payload(plan),
        times=list(plan.feeding_times),
        portion_guidance={
            "dry_grams": plan.portion.dry_grams,
            "wet_grams": plan.portion.wet_grams,
            "dry_food_cups": plan.portion.dry_food_cups,
            "wet_food_cans": plan.portion.wet_food_cans,
        },
        feeding_guidelines=plan.feeding_guidelines,
    )
    return plan, payload


@router.post("/calculate", response_model=CalculationResponse)
def calculate(request: NutritionRequest):
    """Calculate RER, DER and the macronutrient split for a pet."""
    _, _, payload = _calculate(snapshot_from_request(request))
    return payload


@router.post("/meal-plan", response_model=MealPlanResponse)
def meal_plan(request: MealPlanRequest):
    """Calculate energy needs and split them into a daily feeding schedule."""
    _, payload = _meal_plan(request)
    return payload


@router.post("/weekly-plan", response_model=WeeklyPlanResponse)
def weekly_plan(request: MealPlanRequest):
    """Expand the daily feeding schedule into a week with a shopping list."""
    plan, payload = _meal_plan(request)
    weekly = build_weekly_plan(plan)
    day_meals = meals_payload(plan)
    payload.update(
        weekly_plan=[{"day": day.day, "meals": day_meals} for day in weekly.days],
        shopping_list={
            "dry_grams": weekly.shopping_list.dry_grams,
            "wet_grams": weekly.shopping_list.wet_grams,
        },
    )
    return payload


@router.post("/validate", response_model=ValidationResponse)
def validate_nutrition(request: ValidateRequest):
    """
    Check calories, protein and food ingredients for a pet.

    When `der` is omitted the freshly calculated DER is checked.
    """
    pet = snapshot_from_request(request)
    energy = compute_energy(pet)
    if request.der is not None:
        energy = replace(energy, der=request.der)
    foods = [
        FoodRecommendation(
            kind=food.kind,
            category=food.category,
            name=food.name,
            daily_amount_grams=food.daily_amount_grams,
            calories_per_100g=food.calories_per_100g,
            feeding_notes=food.feeding_notes,
            ingredients=food.ingredients,
            avoid_ingredients=tuple(food.avoid_ingredients),
        )
        for food in request.food_recommendations
    ]
    result = validate(pet, energy, protein_grams=request.protein_grams, food_recommendations=foods)
    return validation_payload(result)
