# backend configuration
# loads env vars for mongodb, jwt, gemini, and analysis tuning

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent / ".env")


class Settings(BaseSettings):
    # mongodb
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "journaling_app_db")

    # jwt auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "journaling-dev-secret-change-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # gemini (entity extraction, insights, transcription)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_OUTPUT_TOKENS: int = 2000

    # entity extraction retries
    ANALYSIS_MAX_RETRIES: int = 3
    ANALYSIS_RETRY_BASE_SECONDS: float = 1.0

    # soul matrix refresh cadence
    SOUL_MATRIX_UPDATE_INTERVAL_HOURS: int = 24

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # journal + audio limits
    JOURNAL_MAX_LENGTH: int = 20000
    AUDIO_MAX_BYTES: int = 25 * 1024 * 1024

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
