from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Dict
from functools import lru_cache
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App Settings
    APP_NAME: str = "Inspection Sign-off Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # JWT Settings
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # CORS - accepts JSON string, comma-separated, or list
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Shared secret per role, checked before a role is attached to a new user.
    # Keys are the human-readable role names.
    ROLE_SIGNUP_CODES: Dict[str, str] = {
        "Auditor": "AUDITOR123",
        "Team Leader Audit": "TLA456",
        "H.O.F. Audit": "HOF789",
        "Quality Head": "QH0101",
    }

    # Compliance / log sheet presentation
    COMPLIANCE_WINDOW_MONTHS: int = 12  # Trailing calendar months in the grid
    SUBMISSION_DATE_FORMAT: str = "%d/%m/%Y, %H:%M:%S"

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(',')]
        return v

    @field_validator('COMPLIANCE_WINDOW_MONTHS')
    @classmethod
    def check_window(cls, v):
        if v < 1:
            raise ValueError("COMPLIANCE_WINDOW_MONTHS must be at least 1")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        return list(self.CORS_ORIGINS)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
