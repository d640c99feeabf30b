from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    TIMEZONE: str = "Asia/Beirut"
    DEFAULT_CITY: str = "Beirut"
    DEFAULT_LOCALE: str = "en"
    DEFAULT_CURRENCY: str = "USD"
    CART_TOKEN_COOKIE: str = "cart_token"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
