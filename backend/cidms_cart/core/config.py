from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Cart persistence
    CART_STORAGE_BACKEND: str = "memory"  # memory | file | mongodb
    CART_STORAGE_KEY: str = "cart"
    CART_STORAGE_PATH: str = "cart_storage.json"

    # MongoDB Configuration
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "cidms_db"
    MONGODB_CARTS_COLLECTION: str = "carts"

    # Order API (external collaborator used at checkout)
    ORDER_API_BASE_URL: str = "http://localhost:5000/api"
    ORDER_API_TIMEOUT_SECONDS: int = 30

    # Display
    CURRENCY: str = "USD"

    # Application Settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    API_V1_PREFIX: str = "/api"
    PROJECT_NAME: str = "CIDMS Cart"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
