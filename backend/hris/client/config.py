from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    HRIS_API_HOST: str = "http://localhost:8000"
    # Full base URL; overrides HRIS_API_HOST when set
    HRIS_API_URL: Optional[str] = None
    HRIS_REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)
    HRIS_SESSION_FILE: Optional[str] = None
    NOTIFICATION_POLL_INTERVAL_SECONDS: float = Field(default=30.0, gt=0)

    @property
    def api_url(self) -> str:
        if self.HRIS_API_URL:
            return self.HRIS_API_URL.rstrip("/")
        return f"{self.HRIS_API_HOST.rstrip('/')}/api/v1"


client_settings = ClientSettings()
