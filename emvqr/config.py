from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict, BaseSettings

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CodecSettings(BaseSettings):
    log_level: str = Field("WARNING", validation_alias="EMVQR_LOG_LEVEL")
    log_ring_size: int = Field(200, validation_alias="EMVQR_LOG_RING_SIZE", gt=0)

    # JSON object of alphabetic -> numeric codes replacing the packaged table
    currency_table_path: Optional[str] = Field(None, validation_alias="EMVQR_CURRENCY_TABLE")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache
def get_settings() -> CodecSettings:
    return CodecSettings()
