"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .models import WriterName

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"
FIXTURES_DIR = PROJECT_ROOT / "fixtures"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")

# Environment variable holding each writer's API key
PROVIDER_ENV_KEYS: dict[WriterName, str] = {
    WriterName.GEMINI: "GEMINI_API_KEY",
    WriterName.CHATGPT: "OPENAI_API_KEY",
    WriterName.CLAUDE: "ANTHROPIC_API_KEY",
}


class LLMSettings(BaseModel):
    """LLM API settings."""
    gemini_model: str = "gemini-2.0-flash"
    openai_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = 4000
    temperature: float = 0.7
    # Per-call ceiling, kept under a 60s serverless budget
    timeout_seconds: float = 55.0


class ContentSettings(BaseModel):
    """Article generation settings."""
    language: str = "Polish"
    default_target_length: int = 1500


class ScoringSettings(BaseModel):
    """Scorer settings."""
    locale: str = "pl"


class DatabaseSettings(BaseModel):
    """Database connection settings."""
    db_path: str = str(DATA_DIR / "seo_agent.db")


class OdooSettings(BaseModel):
    """Odoo CMS connection settings."""
    url: str = ""
    api_key: str = ""
    database: str = "odoo"
    blog_id: int = 0
    timeout: int = 30

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.api_key and self.blog_id)


class SchedulerSettings(BaseModel):
    """Publication schedule: Monday and Thursday at 9:00 Warsaw time."""
    days_of_week: list[int] = Field(default_factory=lambda: [0, 3])
    hour: int = 9
    minute: int = 0
    timezone: str = "Europe/Warsaw"


class WorkflowSettings(BaseModel):
    """Approval workflow settings."""
    auto_publish: bool = False
    blog_base_url: str = "https://powergo.pl/blog"


class NotificationSettings(BaseModel):
    """Owner notification settings."""
    webhook_url: str = ""
    timeout: int = 10


class Settings(BaseModel):
    """Top-level application settings."""
    llm: LLMSettings = Field(default_factory=LLMSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    odoo: OdooSettings = Field(default_factory=OdooSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults.

        Secrets (Odoo API key, webhook URL) are taken from the environment
        when the YAML file leaves them empty.
        """
        settings_path = path or CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        settings = cls(**data)

        if not settings.odoo.api_key:
            settings.odoo.api_key = os.getenv("ODOO_API_KEY", "")
        if url := os.getenv("ODOO_URL"):
            settings.odoo.url = url
        if not settings.notifications.webhook_url:
            settings.notifications.webhook_url = os.getenv("NOTIFY_WEBHOOK_URL", "")
        return settings


def load_provider_credentials() -> dict[WriterName, str]:
    """Collect the LLM API keys present in the environment.

    Writers without a key are left out; an empty result is legal here and
    rejected later by the generator.
    """
    credentials: dict[WriterName, str] = {}
    for writer, env_key in PROVIDER_ENV_KEYS.items():
        key = os.getenv(env_key, "").strip()
        if key:
            credentials[writer] = key
    return credentials


# Singleton settings instance
settings = Settings.load()
