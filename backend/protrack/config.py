from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "ProTrack"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # Spreadsheet store (Apps Script web app)
    GATEWAY_URL: str = "http://localhost:8080/exec"
    GATEWAY_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    UPLOAD_FOLDER_ID: str = ""

    # Per-session state (logged-in user, active view, last snapshot)
    STATE_DATABASE_URL: str = "sqlite:///./protrack_state.db"
    AUTO_CREATE_TABLES: bool = True

    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    ENABLE_REQUEST_ID: bool = True
    ENABLE_REQUEST_LOGGING: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in {"prod", "production"}

    @model_validator(mode="after")
    def check_store_settings(self):
        if not self.is_production:
            return self
        if not self.GATEWAY_URL.strip() or "localhost" in self.GATEWAY_URL:
            raise ValueError("GATEWAY_URL must point at the deployed store in production.")
        if not self.UPLOAD_FOLDER_ID.strip():
            raise ValueError("UPLOAD_FOLDER_ID must be set in production so photos have somewhere to go.")
        return self


settings = Settings()
