"""
Pet Nutrition API - Main Application

Calorie, macronutrient and meal planning calculations for dogs, cats and
other pets, with stored profiles, weight logs and nutrition plans.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pet_nutrition.api import logs, nutrition, pets, plans
from pet_nutrition.core.app_logging import configure_logging
from pet_nutrition.core.config import settings
from pet_nutrition.core.database import init_db
from pet_nutrition.core.pets import NutritionInputError

configure_logging()
logger = logging.getLogger(__name__)

# Create database tables
init_db()

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## Pet Nutrition API

    Species-aware energy and nutrition calculations.

    ### Features
    - Resting and daily energy requirements (RER/DER)
    - Macronutrient and micronutrient targets
    - Feeding schedules, weekly plans and shopping lists
    - Plan validation with allergen checks
    - Health score with weight trend

    ### Core Endpoints
    - `/nutrition` - Stateless calculators
    - `/pet` - Manage pet profiles
    - `/log` - Weight logs and vet visits
    - `/plan` - Stored nutrition plans
    """,
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NutritionInputError)
def nutrition_input_error_handler(request: Request, exc: NutritionInputError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# Include routers
app.include_router(nutrition.router)
app.include_router(pets.router)
app.include_router(logs.router)
app.include_router(plans.router)


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "nutrition": "/nutrition",
            "pets": "/pet",
            "logs": "/log",
            "plans": "/plan",
        }
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
