# backend configuration
# loads env vars for storage backend, mongodb, jwt and the dev identity fallback

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent.parent / ".env")


class Settings(BaseSettings):
    # runtime environment: development, test or production
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # storage
    STORAGE_BACKEND: Literal["mongo", "memory"] = "mongo"
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "moodtrack_db")

    # jwt auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "moodtrack-dev-secret-change-in-production")
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_DAYS: int = 7

    # bcrypt cost factor
    BCRYPT_ROUNDS: int = 10

    # development-only identity used when a request carries no bearer token.
    # refused at startup when ENVIRONMENT is production
    DEMO_USER_ID: Optional[int] = None

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
