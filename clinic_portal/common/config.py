import logging
import os
from typing import List
from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Load environment variables from the correct .env file
env_file = ".env" if os.getenv("APP_ENV", "development") == "development" else ".env.production"
load_dotenv(env_file)

class Settings(BaseSettings):
    APP_ENV: str = "development"
    DEBUG: bool = False
    DATABASE_URL: str
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 60
    # Public key shipped to browsers; accepted where the API allows anonymous callers
    ANON_KEY: str
    API_PREFIX: str = "/functions/v1/clinic-server"
    ALLOWED_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "info"

    # Seeding
    SEED_SAMPLE_DOCTORS: bool = False
    TEST_PATIENT_EMAIL: str = "patient@test.com"
    TEST_PATIENT_PASSWORD: str = "password123"

    # Report analysis (Gemini generateContent endpoint)
    GEMINI_API_KEY: str = ""
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
    ANALYSIS_TIMEOUT_SECONDS: float = 60.0
    ANALYSIS_MOCK_FALLBACK: bool = True

    @field_validator("ALLOWED_ORIGINS", mode="before")
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

settings = Settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
