from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from buildgate.gate.models import PollConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    APP_NAME: str = "Build Gate"
    LOG_LEVEL: str = "INFO"

    PERCY_API_BASE_URL: str = "https://percy.io/api/v1"
    PERCY_BUILD_ID: str = ""
    PERCY_TOKEN: str = ""

    POLL_INTERVAL_SECONDS: float = 10.0
    POLL_MAX_ATTEMPTS: int = 60
    FAILURE_THRESHOLD_PERCENTAGE: float = 50.0
    HTTP_TIMEOUT_SECONDS: float = 30.0

    @property
    def build_url(self) -> str:
        base = self.PERCY_API_BASE_URL.rstrip("/")
        return f"{base}/builds/{self.PERCY_BUILD_ID.strip()}"

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if not self.PERCY_BUILD_ID.strip():
            missing.append("PERCY_BUILD_ID")
        if not self.PERCY_TOKEN.strip():
            missing.append("PERCY_TOKEN")
        return missing

    def poll_config(self) -> PollConfig:
        return PollConfig(
            url=self.build_url,
            token=self.PERCY_TOKEN.strip(),
            interval_seconds=self.POLL_INTERVAL_SECONDS,
            max_attempts=self.POLL_MAX_ATTEMPTS,
            threshold_percent=self.FAILURE_THRESHOLD_PERCENTAGE,
            timeout_seconds=self.HTTP_TIMEOUT_SECONDS,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
