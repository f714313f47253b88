from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RULES_PATH = Path(__file__).resolve().parent.parent / "data" / "category_rules.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "PennyLog"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Insight prose
    CURRENCY_SYMBOL: str = Field(default="₹")

    # Categorization rules (keywords + vendor patterns per category)
    CATEGORY_RULES_JSON: str = Field(default=str(DEFAULT_RULES_PATH))


settings = Settings()
