from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, computed_field

# Load .env file from the working directory
load_dotenv()


class Settings(BaseSettings):
    """Base settings for the application."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    APP_NAME: str = "ModelHub Registry"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Governance registry for analytic and ML models"

    # Durable store settings
    STORE_BACKEND: str = Field(default="json", description="One of: memory, json, sql")
    DATA_DIR: str = "data"
    DATABASE_URL: str = "sqlite:///./modelhub.db"
    STORAGE_KEY_PREFIX: str = "modelhub_"
    SEED_ON_STARTUP: bool = True

    # Audit settings
    DEFAULT_ACTOR: str = Field(default="System", description="Actor recorded when no user is known")

    # Review reminder windows
    REVIEW_DUE_MONTHS: int = 12
    REVIEW_OVERDUE_MONTHS: int = 15

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOGS_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    @computed_field
    @property
    def effective_store_backend(self) -> str:
        """Resolve the store backend name.

        Unknown or blank values fall back to the JSON file store, which is
        the closest match to a browser's local storage.
        """
        backend = (self.STORE_BACKEND or "").strip().lower()
        if backend in ("memory", "json", "sql"):
            return backend
        return "json"


settings = Settings()
