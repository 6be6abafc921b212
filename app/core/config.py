from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "plant-ops-admin"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str
    DB_ECHO: bool = False

    JWT_SECRET: str = "change_me_jwt"
    JWT_TTL_DAYS: int = 30

    CORS_ORIGINS: str = "http://localhost:3000"

    # Stored timestamps are wall-clock values of this fixed zone (UTC+7 by default).
    # Changing it after data exists shifts every stored datetime.
    TIMEZONE_OFFSET_HOURS: int = 7

    STRICT_SEARCH_FILTERS: bool = False
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 500

    OEE_LOW_THRESHOLD: float = 65.0
    REJECT_RATE_THRESHOLD: float = 5.0
    TARGET_MISSED_BELOW: float = 95.0

    ADMIN_BOOTSTRAP_ENABLED: bool = True
    ADMIN_BOOTSTRAP_NPK: str = "admin01"
    ADMIN_BOOTSTRAP_PASSWORD: str = "admin123"
    ADMIN_BOOTSTRAP_NAME: str = "System Administrator"

    # Compose/infra vars that may exist in shared .env
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "plant_ops"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
