"""Client settings resolved from the environment."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field


class StudioSettings(BaseModel):
    server_url: str = Field(
        default=os.getenv("TTS_STUDIO_SERVER_URL", "http://localhost:5000")
    )
    timeout: float = Field(default=float(os.getenv("TTS_STUDIO_TIMEOUT", "15")))
    log_level: str = Field(default=os.getenv("TTS_STUDIO_LOG_LEVEL", "INFO"))
    fixture_path: str | None = Field(default=os.getenv("TTS_STUDIO_FIXTURE_PATH"))


@lru_cache()
def get_settings() -> StudioSettings:
    return StudioSettings()
