"""Pydantic schemas for request/response validation."""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from pet_nutrition.core.pets import WeightGoal


# Pet schemas
class PetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    species: str = Field("dog", max_length=30)
    breed: Optional[str] = Field(None, max_length=100)
    age_years: Optional[float] = Field(None, ge=0, le=50)
    weight_kg: float = Field(..., gt=0, le=200)
    ideal_weight_kg: Optional[float] = Field(None, gt=0, le=200)
    activity_level: str = "medium"
    body_condition: Optional[str] = None
    body_condition_score: Optional[int] = Field(None, ge=1, le=9)
    spay_neuter: Union[bool, str] = "unknown"
    health_conditions: list[str] = []
    allergies: list[str] = []
    notes: Optional[str] = None


class PetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    species: Optional[str] = Field(None, max_length=30)
    breed: Optional[str] = Field(None, max_length=100)
    age_years: Optional[float] = Field(None, ge=0, le=50)
    weight_kg: Optional[float] = Field(None, gt=0, le=200)
    ideal_weight_kg: Optional[float] = Field(None, ge=0, le=200)  # 0 clears the target
    activity_level: Optional[str] = None
    body_condition: Optional[str] = None
    body_condition_score: Optional[int] = Field(None, ge=1, le=9)
    spay_neuter: Optional[Union[bool, str]] = None
    health_conditions: Optional[list[str]] = None
    allergies: Optional[list[str]] = None
    notes: Optional[str] = None


class PetResponse(BaseModel):
    id: int
    name: str
    species: str
    breed: Optional[str]
    age_years: Optional[float]
    weight_kg: float
    ideal_weight_kg: Optional[float]
    activity_level: str
    body_condition: Optional[str]
    body_condition_score: Optional[int]
    spay_neuter: str
    health_conditions: list[str]
    allergies: list[str]
    notes: Optional[str]

    class Config:
        from_attributes = True


class MacrosResponse(BaseModel):
    protein_grams: float
    fat_grams: float
    carbohydrate_grams: float
    protein_pct: float
    fat_pct: float
    carbohydrate_pct: float


class PetWithCalculations(PetResponse):
    rer: int
    der: int
    life_stage: str
    weight_goal: WeightGoal
    target_daily_kcal: int  # DER adjusted for the weight goal
    macros: MacrosResponse


# Nutrition calculator schemas
class NutritionRequest(BaseModel):
    species: str = "dog"
    weight: float = Field(..., allow_inf_nan=False)
    age: Optional[float] = Field(None, ge=0, le=50)
    activity_level: Optional[str] = None
    body_condition: Optional[Union[int, str]] = None
    spay_neuter: Optional[Union[bool, str]] = None
    ideal_weight: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    health_conditions: list[str] = []
    allergies: list[str] = []


class MealPlanRequest(NutritionRequest):
    meals_per_day: Optional[int] = Field(None, ge=0, le=12)
    times: Optional[list[str]] = None
    dry_ratio: float = Field(1.0, ge=0, allow_inf_nan=False)
    wet_ratio: float = Field(0.0, ge=0, allow_inf_nan=False)
    schedule_style: str = "standard"


class CalculationResponse(BaseModel):
    rer: int
    der: int
    lifestage: str
    lifestage_multiplier: float
    activity_multiplier: float
    bcs_multiplier: float
    spay_multiplier: float
    macros: MacrosResponse
    warnings: list[str]
    calculation_method: str


class MealResponse(BaseModel):
    time: str
    calories: int
    dry_grams: int
    wet_grams: int


class PortionGuidanceResponse(BaseModel):
    dry_grams: int
    wet_grams: int
    dry_food_cups: float
    wet_food_cans: float


class MealPlanResponse(CalculationResponse):
    meals_per_day: int
    calories_per_meal: int
    feeding_schedule: list[MealResponse]
    times: list[str]
    portion_guidance: PortionGuidanceResponse
    feeding_guidelines: dict[str, str]


class DayPlanResponse(BaseModel):
    day: str
    meals: list[MealResponse]


class ShoppingListResponse(BaseModel):
    dry_grams: int
    wet_grams: int


class WeeklyPlanResponse(MealPlanResponse):
    weekly_plan: list[DayPlanResponse]
    shopping_list: ShoppingListResponse


# Validation schemas
class FoodRecommendationSchema(BaseModel):
    kind: str = "primary"
    category: str = "dry_kibble"
    name: str
    daily_amount_grams: int = 0
    calories_per_100g: int = 0
    feeding_notes: str = ""
    ingredients: str = ""
    avoid_ingredients: list[str] = []

    class Config:
        from_attributes = True


class ValidateRequest(NutritionRequest):
    der: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    protein_grams: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    food_recommendations: list[FoodRecommendationSchema] = []


class ValidationIssueResponse(BaseModel):
    code: str
    severity: str
    message: str
    expected: Optional[float] = None
    actual: Optional[float] = None
    food: Optional[str] = None

    class Config:
        from_attributes = True


class ValidationResponse(BaseModel):
    is_valid: bool
    warnings: list[str]
    errors: list[str]
    issues: list[ValidationIssueResponse]
    recommendations: list[str]


# Stored plan schemas
class NutritionPlanCreate(BaseModel):
    plan_name: Optional[str] = Field(None, max_length=200)
    meals_per_day: Optional[int] = Field(None, ge=1, le=12)
    weight_goal: Optional[WeightGoal] = None
    include_wet_food: bool = True
    protein_percentage: Optional[float] = Field(None, ge=0, le=100)  # From the food label


class NutritionPlanResponse(BaseModel):
    id: int
    pet_id: int
    plan_name: str
    daily_calories: float
    daily_protein_grams: Optional[float]
    daily_fat_grams: Optional[float]
    daily_carbohydrate_grams: Optional[float]
    daily_fiber_grams: Optional[float]
    protein_percentage: Optional[float]
    meals_per_day: int
    feeding_schedule: list[MealResponse]
    food_recommendations: list[FoodRecommendationSchema]
    micronutrients: dict[str, float]
    weight_goal: WeightGoal
    special_instructions: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class NutritionPlanWithValidation(NutritionPlanResponse):
    validation: ValidationResponse


# Log schemas
class WeightLogCreate(BaseModel):
    pet_id: int
    weight_kg: float = Field(..., gt=0, le=200)
    recorded_on: Optional[date] = None
    notes: Optional[str] = None


class WeightLogResponse(BaseModel):
    id: int
    pet_id: int
    weight_kg: float
    recorded_on: date
    notes: Optional[str]

    class Config:
        from_attributes = True


class VetVisitCreate(BaseModel):
    pet_id: int
    visit_date: date
    reason: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class VetVisitResponse(BaseModel):
    id: int
    pet_id: int
    visit_date: date
    reason: Optional[str]
    notes: Optional[str]

    class Config:
        from_attributes = True


# Health score schemas
class HealthAlertResponse(BaseModel):
    code: str
    priority: str
    title: str
    description: str

    class Config:
        from_attributes = True


class WeightTrendResponse(BaseModel):
    first_weight_kg: float
    last_weight_kg: float
    change_pct: float
    direction: str
    previous_weight_kg: float
    recent_change_pct: float

    class Config:
        from_attributes = True


class HealthScoreResponse(BaseModel):
    pet_id: int
    score: int
    score_change: int
    factors: list[str]
    alerts: list[HealthAlertResponse]
    weight_trend: Optional[WeightTrendResponse]
