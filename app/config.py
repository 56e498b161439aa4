# app/config.py
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Settings are read from the environment (and a local .env file).


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    service_name: str = "product-api"
    environment: str = "development"

    host: str = "0.0.0.0"
    port: int = 3000

    # No key configured means every /api request is rejected.
    api_key: Optional[str] = None
    api_key_header: str = "x-api-key"

    max_page_limit: Optional[int] = Field(default=None, ge=1)
    cors_origins: List[str] = ["*"]

    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


def load_settings() -> Settings:
    return Settings()
