from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Personal Status Tracker"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"  # development | production | test
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+aiosqlite:///./data/status.db"
    DB_ECHO: bool = False
    DB_TIMEOUT_SECONDS: float = 10.0

    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours
    BCRYPT_ROUNDS: int = 12

    CORS_ORIGINS: str = "http://localhost:3000"

    # Used by the create-admin bootstrap command
    ADMIN_USERNAME: str | None = None
    ADMIN_PASSWORD: str | None = None

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
