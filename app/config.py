from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./safenest.db"
    SQL_ECHO: bool = False

    # Security
    SECRET_KEY: str = "safenest-secret-key-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30  # 30 days

    # Geofencing
    DEFAULT_SAFE_ZONE_RADIUS: int = 100  # meters
    GEOFENCE_EDGE_TRIGGERED: bool = False

    # Alerts
    ALERT_LIST_LIMIT: int = 50

    # Requests
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    CORS_ORIGINS: str = "http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

settings = Settings()
