from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from flowycart.domain.config import DEFAULT_API_BASE, DEFAULT_TIMEOUT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FLOWYCART_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    API_KEY: str
    CLIENT_ID: str | None = None
    API_BASE: str = DEFAULT_API_BASE
    TIMEOUT: float | None = DEFAULT_TIMEOUT

    LOG_LEVEL: str = "INFO"

    def client_config(self) -> dict[str, Any]:
        """Options in the shape FlowycartClient accepts."""
        return {
            "api_key": self.API_KEY,
            "client_id": self.CLIENT_ID,
            "api_base": self.API_BASE,
            "timeout": self.TIMEOUT,
        }
