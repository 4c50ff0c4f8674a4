"""Application configuration via environment variables."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Scheduler timing (seconds between ticks)
    upload_tick_seconds: float = Field(0.15, ge=0)
    processing_tick_seconds: float = Field(0.2, ge=0)

    # Progress increments per tick, drawn from [min, max)
    upload_increment_min: float = Field(5.0, gt=0)
    upload_increment_max: float = Field(20.0, gt=0)
    processing_increment_min: float = Field(3.0, gt=0)
    processing_increment_max: float = Field(15.0, gt=0)
    random_seed: Optional[int] = None

    # Extraction backend
    extraction_provider: str = "demo"

    # Service
    service_port: int = 8001
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @model_validator(mode="after")
    def _check_increment_ranges(self) -> "Settings":
        if self.upload_increment_min > self.upload_increment_max:
            raise ValueError("upload_increment_min must not exceed upload_increment_max")
        if self.processing_increment_min > self.processing_increment_max:
            raise ValueError("processing_increment_min must not exceed processing_increment_max")
        return self


settings = Settings()
