import os
from pydantic_settings import BaseSettings


def get_default_database_url() -> str:
    """Get default database URL based on environment."""
    # Explicit Postgres/MySQL/SQLite URL wins
    if os.environ.get("DATABASE_URL"):
        return os.environ.get("DATABASE_URL")
    # Serverless platforms only allow writes under /tmp
    if os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME"):
        return "sqlite:////tmp/pet_nutrition.db"
    return "sqlite:///./pet_nutrition.db"


class Settings(BaseSettings):
    APP_NAME: str = "Pet Nutrition API"
    DATABASE_URL: str = get_default_database_url()
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()
