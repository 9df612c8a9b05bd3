from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
import re

"""
API CONFIGURATION
"""


#Class to load and read backend .env
class Settings(BaseSettings):

    FRONTEND_URL: str = "http://localhost:3000"

    JWT_SECRET_KEY: str = Field(...)

    DATABASE_URL: str = "sqlite:///./dev.db"

    BREVO_API_KEY: str | None = None

    ADMIN_EMAIL: str = "admin@memberportal.org"
    ADMIN_PASSWORD: str = "change-me"

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()


ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24


#Brevo transactional template ids
EMAIL_TEMPLATES = {
    "password_reset": 6,
    "event_registration": 10,
}


#Public route rate limits for auth
RATE_LIMITS = {
    "login": (5, 60),
    "register": (3, 60),
    "request_password_reset": (2, 60),
    "reset_password": (5, 60),
}


PASSWORD_REGEX = re.compile(
    r"^(?=.*[0-9])(?=.*[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>\/?]).{8,}$"
)
