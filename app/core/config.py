from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Base URL of the task storage API that serves /api/get_tasks.
    TASK_API_URL: str = "http://localhost:5000"
    # Per-request timeout for a single day fetch.
    FETCH_TIMEOUT_SECONDS: float = 5.0
    # Budget for the whole window fan-out; unfinished days count as failed.
    WINDOW_TIMEOUT_SECONDS: float = 15.0
    WINDOW_DAYS: int = 7

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
