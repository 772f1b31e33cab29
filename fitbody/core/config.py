from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://fitbody_user:fitbody_password@db:5432/fitbody_db"
    DB_ECHO: bool = False
    # Пересоздавать таблицы на старте только для локальной разработки
    RESET_DATABASE: bool = False

    SECRET_KEY: str = "SECRET_KEY_FOR_FITBODY"
    REFRESH_SECRET_KEY: str = "SECRET_KEY_FOR_FITBODY_refresh"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    OPENFOODFACTS_BASE_URL: str = "https://world.openfoodfacts.org"
    FOOD_SEARCH_TIMEOUT: float = 8.0
    REDIS_URL: str = "redis://redis:6379/0"

    # Границы календарного дня для стриков и дневных сводок
    TIMEZONE: str = "UTC"

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

settings = Settings()
