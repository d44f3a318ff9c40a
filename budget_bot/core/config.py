from functools import lru_cache

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "budget-tracker-bot"
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/budget_tracker"
    timezone: str = "Asia/Jakarta"
    currency: str = "IDR"
    # Comma separated, e.g. "6281234567890,6289876543210". Empty allows every sender.
    allowed_phones: str = ""
    wa_gateway_url: str = "http://localhost:3000"
    gateway_timeout: float = 15.0
    budget_alert_threshold: float = 0.8
    auto_run_migrations: bool = True

    @field_validator("budget_alert_threshold")
    @classmethod
    def check_threshold(cls, v: float) -> float:
        """Alert threshold is a fraction of the budget."""
        if not 0 < v <= 1:
            raise ValueError("budget_alert_threshold must be within (0, 1]")
        return v

    def get_allowed_phones(self) -> set[str]:
        """Return the normalized sender whitelist (no '+', no leading spaces)."""

        phones = set()
        for raw in self.allowed_phones.split(","):
            phone = raw.strip().lstrip("+")
            if phone:
                phones.add(phone)
        return phones

    def get_sync_database_url(self) -> str:
        """Return a synchronous driver URL for Alembic/CLI usage."""

        if "+asyncpg" in self.database_url:
            return self.database_url.replace("+asyncpg", "+psycopg")
        return self.database_url


class AppConfig(BaseModel):
    version: str = "0.1.0"
    description: str = (
        "Bot WhatsApp pencatat pengeluaran: parsing perintah, sesi login, dan gamifikasi."
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
