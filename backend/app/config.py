from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/bizdesk.db"

    # Auth
    secret_key: str = "dev-secret-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]
    log_level: str = "INFO"

    # Background jobs
    scheduler_enabled: bool = True

    # Report defaults
    department_monthly_window: int = 12
    health_lookback_months: int = 3
    seasonality_months_back: int = 12
    calendar_upcoming_limit: int = 10
    upcoming_payment_days: int = 7

    # Branding
    business_name: str = "BizDesk"
    currency: str = "RUB"

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.database_url
