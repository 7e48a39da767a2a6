from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (postgresql://... in production, SQLite file for local runs)
    database_url: str = f"sqlite+aiosqlite:///{_BACKEND_ROOT / 'docbook.db'}"
    database_ssl: bool = False
    auto_create_tables: bool = True

    # JWT (doctor panel login)
    secret_key: str = "change-me"
    access_token_expire_minutes: int = 60
    algorithm: str = "HS256"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Slot/appointment business rules
    clinic_timezone: str = "UTC"
    dashboard_recent_limit: int = 5
    search_default_limit: int = 50
    search_max_limit: int = 200

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
