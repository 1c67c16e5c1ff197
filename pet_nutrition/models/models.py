from datetime import date, datetime

from sqlalchemy import JSON, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from pet_nutrition.core.database import Base


class Pet(Base):
    __tablename__ = "pets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    species = Column(String, nullable=False, default="dog")
    breed = Column(String, nullable=True)
    age_years = Column(Float, nullable=True)
    weight_kg = Column(Float, nullable=False)
    ideal_weight_kg = Column(Float, nullable=True)
    activity_level = Column(String, nullable=False, default="medium")
    body_condition = Column(String, nullable=True)
    body_condition_score = Column(Integer, nullable=True)
    spay_neuter = Column(String, nullable=False, default="unknown")
    health_conditions = Column(JSON, nullable=False, default=list)
    allergies = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)

    weight_logs = relationship("WeightLog", back_populates="pet", cascade="all, delete-orphan")
    vet_visits = relationship("VetVisit", back_populates="pet", cascade="all, delete-orphan")
    nutrition_plans = relationship("NutritionPlan", back_populates="pet", cascade="all, delete-orphan")
    health_scores = relationship("HealthScoreSnapshot", back_populates="pet", cascade="all, delete-orphan")


class WeightLog(Base):
    __tablename__ = "weight_logs"

    id = Column(Integer, primary_key=True, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False, index=True)
    weight_kg = Column(Float, nullable=False)
    recorded_on = Column(Date, nullable=False, default=date.today)
    notes = Column(Text, nullable=True)

    pet = relationship("Pet", back_populates="weight_logs")


class VetVisit(Base):
    __tablename__ = "vet_visits"

    id = Column(Integer, primary_key=True, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False, index=True)
    visit_date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    pet = relationship("Pet", back_populates="vet_visits")


class NutritionPlan(Base):
    __tablename__ = "nutrition_plans"

    id = Column(Integer, primary_key=True, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False, index=True)
    plan_name = Column(String, nullable=False)
    daily_calories = Column(Float, nullable=False)
    daily_protein_grams = Column(Float, nullable=True)
    daily_fat_grams = Column(Float, nullable=True)
    daily_carbohydrate_grams = Column(Float, nullable=True)
    daily_fiber_grams = Column(Float, nullable=True)
    protein_percentage = Column(Float, nullable=True)
    meals_per_day = Column(Integer, nullable=False, default=2)
    feeding_schedule = Column(JSON, nullable=False, default=list)
    food_recommendations = Column(JSON, nullable=False, default=list)
    micronutrients = Column(JSON, nullable=False, default=dict)
    weight_goal = Column(String, nullable=False, default="maintenance")
    special_instructions = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    pet = relationship("Pet", back_populates="nutrition_plans")


class HealthScoreSnapshot(Base):
    __tablename__ = "health_score_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    computed_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    pet = relationship("Pet", back_populates="health_scores")
