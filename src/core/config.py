"""
Settings read from the environment.

Online play needs a realtime transport. It is only offered when one is configured: either ANYCHESS_ONLINE is set,
or the Supabase URL + anon key pair is present.
"""

import logging
import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, field_validator

ENV_PREFIX = "ANYCHESS_"
TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    log_level: str = "INFO"
    # fixed seed makes the bot's tie-breaks reproducible
    bot_seed: Optional[int] = None
    online: bool = False
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @property
    def online_enabled(self) -> bool:
        return self.online or bool(self.supabase_url and self.supabase_anon_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        env = os.environ if environ is None else environ
        values: dict[str, object] = {
            "log_level": env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
            "bot_seed": env.get(f"{ENV_PREFIX}BOT_SEED") or None,
            "online": env.get(f"{ENV_PREFIX}ONLINE", "").lower() in TRUTHY,
            "supabase_url": env.get("SUPABASE_URL") or None,
            "supabase_anon_key": env.get("SUPABASE_ANON_KEY") or None,
        }
        return cls.model_validate(values)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
