from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from infra.utils.version import get_version


class LoggingConfig(BaseModel):
    LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    JSON_FORMAT: bool = False
    LIBRARY_LOG_LEVELS: dict[str, str | int] = Field(default_factory=dict)


class MonitorConfig(BaseModel):
    DEFINITION_PATH: str = "./data/config.json"
    RETENTION_DAYS: int = Field(default=90, ge=1)
    USER_AGENT: str = "StatusMonitor/1.0"
    FOLLOW_REDIRECTS: bool = True
    SCHEDULE_INTERVAL_SECONDS: Optional[int] = Field(default=None, gt=0)


class StorageConfig(BaseModel):
    DRIVER: Literal["json", "sqlite", "postgres"] = "json"
    CHECKS_DIR: str = "./data/checks"
    SQLITE_PATH: str = "./status_monitor.db"

    USER: str | None = None
    PASSWORD: str | None = None
    HOST: str | None = None
    PORT: int | None = None
    DATABASE: str | None = None
    ECHO: bool = False
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 5
    POOL_TIMEOUT: int = 30
    POOL_RECYCLE: int = 1800

    @model_validator(mode="after")
    def validate_required_postgres_fields(self) -> "StorageConfig":
        if self.DRIVER != "postgres":
            return self

        required_fields = {
            "USER": self.USER,
            "PASSWORD": self.PASSWORD,
            "HOST": self.HOST,
            "PORT": self.PORT,
            "DATABASE": self.DATABASE,
        }
        missing_fields = [field_name for field_name, value in required_fields.items() if value in (None, "")]

        if missing_fields:
            raise ValueError(f"STORAGE_CONFIG fields required when DRIVER=postgres: {', '.join(missing_fields)}")

        return self


class Config(BaseSettings):
    APP_NAME: str = "py-status-monitor"
    VERSION: str = get_version()
    ENVIRONMENT: Literal["loc", "dev", "pre", "pro"] = "dev"
    ROOT_PATH: str = ""

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    LOGGING_CONFIG: LoggingConfig = LoggingConfig()
    MONITOR_CONFIG: MonitorConfig = MonitorConfig()
    STORAGE_CONFIG: StorageConfig = StorageConfig()

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_nested_delimiter="__",
    )


@lru_cache
def get_config() -> Config:
    return Config()
