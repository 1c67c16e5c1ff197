"""Stored nutrition plan API endpoints."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pet_nutrition.api.nutrition import meals_payload, validation_payload
from pet_nutrition.core.calculations import (
    adjust_for_health_conditions,
    adjust_for_weight_goal,
    compute_requirements,
    infer_weight_goal,
)
from pet_nutrition.core.database import get_db
from pet_nutrition.core.meal_plans import MealPreferences, build_meal_plan
from pet_nutrition.core.recommendations import FoodRecommendation, recommend_foods, special_instructions
from pet_nutrition.core.validation import StoredPlan, validate
from pet_nutrition.models.models import NutritionPlan
from pet_nutrition.schemas.schemas import (
    NutritionPlanCreate,
    NutritionPlanResponse,
    NutritionPlanWithValidation,
)
from pet_nutrition.services.pet_records import PetNotFoundError, SqlPetRecordRepository, snapshot_from_pet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plan", tags=["nutrition plans"])


def stored_plan_from_row(plan: NutritionPlan) -> StoredPlan:
    """Read a persisted plan back into the validator's shape."""
    foods = tuple(
        FoodRecommendation(**{**food, "avoid_ingredients": tuple(food.get("avoid_ingredients") or ())})
        for food in plan.food_recommendations or []
    )
    return StoredPlan(
        daily_calories=plan.daily_calories,
        protein_grams=plan.daily_protein_grams,
        protein_pct=plan.protein_percentage,
        food_recommendations=foods,
    )


def _plan_with_validation(plan: NutritionPlan) -> NutritionPlanWithValidation:
    result = validate(snapshot_from_pet(plan.pet), stored_plan_from_row(plan))
    response = NutritionPlanResponse.model_validate(plan).model_dump()
    return NutritionPlanWithValidation(**response, validation=validation_payload(result))


def _get_plan_or_404(db: Session, plan_id: int) -> NutritionPlan:
    plan = db.query(NutritionPlan).filter(NutritionPlan.id == plan_id).first()
    if not plan:
        raise HTTPException(status_code=404, detail="Nutrition plan not found")
    return plan


@router.post("/pet/{pet_id}", response_model=NutritionPlanWithValidation, status_code=201)
def create_nutrition_plan(
    pet_id: int,
    request: NutritionPlanCreate,
    db: Session = Depends(get_db)
):
    """
    Compute and store a nutrition plan for a pet.

    Returns:
    - Daily calories adjusted for health conditions and the weight goal
    - Macro and micronutrient targets
    - Feeding schedule and food recommendations
    - Validation of the stored plan
    """
    try:
        pet = SqlPetRecordRepository(db).get_pet(pet_id)
    except PetNotFoundError:
        raise HTTPException(status_code=404, detail="Pet not found")
    snapshot = snapshot_from_pet(pet)

    requirements = adjust_for_health_conditions(compute_requirements(snapshot), snapshot.health_conditions)
    goal = request.weight_goal or infer_weight_goal(snapshot)
    daily_calories = adjust_for_weight_goal(requirements.daily_calories, goal)

    meal_plan = build_meal_plan(snapshot, daily_calories, MealPreferences(meals_per_day=request.meals_per_day))
    foods = recommend_foods(snapshot, daily_calories, include_wet=request.include_wet_food)

    plan = NutritionPlan(
        pet_id=pet.id,
        plan_name=request.plan_name or f"{pet.name} {goal.value.replace('_', ' ')} plan",
        daily_calories=daily_calories,
        daily_protein_grams=requirements.protein_grams,
        daily_fat_grams=requirements.fat_grams,
        daily_carbohydrate_grams=requirements.carbohydrate_grams,
        daily_fiber_grams=requirements.fiber_grams,
        protein_percentage=request.protein_percentage,
        meals_per_day=meal_plan.meals_per_day,
        feeding_schedule=meals_payload(meal_plan),
        food_recommendations=[asdict(food) for food in foods],
        micronutrients=requirements.micronutrients,
        weight_goal=goal.value,
        special_instructions=special_instructions(snapshot, goal),
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)

    logger.info("Stored nutrition plan %s for pet %s (%s kcal/day)", plan.id, pet.id, daily_calories)
    return _plan_with_validation(plan)


@router.get("/pet/{pet_id}", response_model=list[NutritionPlanResponse])
def list_plans_for_pet(pet_id: int, db: Session = Depends(get_db)):
    """List stored nutrition plans for a pet, newest first."""
    try:
        SqlPetRecordRepository(db).get_pet(pet_id)
    except PetNotFoundError:
        raise HTTPException(status_code=404, detail="Pet not found")

    return (
        db.query(NutritionPlan)
        .filter(NutritionPlan.pet_id == pet_id)
        .order_by(NutritionPlan.created_at.desc(), NutritionPlan.id.desc())
        .all()
    )


@router.get("/{plan_id}", response_model=NutritionPlanResponse)
def get_plan(plan_id: int, db: Session = Depends(get_db)):
    """Get a stored nutrition plan."""
    return _get_plan_or_404(db, plan_id)


@router.get("/{plan_id}/validate", response_model=NutritionPlanWithValidation)
def validate_plan(plan_id: int, db: Session = Depends(get_db)):
    """Re-check a stored plan against the pet's current data."""
    return _plan_with_validation(_get_plan_or_404(db, plan_id))


@router.delete("/{plan_id}", status_code=204)
def delete_plan(plan_id: int, db: Session = Depends(get_db)):
    """Delete a stored nutrition plan."""
    plan = _get_plan_or_404(db, plan_id)
    db.delete(plan)
    db.commit()
    return None
