"""
Service configuration.

Defaults are defined on Settings; each field can be overridden with an
environment variable named FACEGUIDE_<FIELD>, e.g. FACEGUIDE_PORT=8080.
"""

import logging
import os
from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ENV_PREFIX = "FACEGUIDE_"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the alignment service."""

    host: str = "0.0.0.0"
    port: int = 3002
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    canvas_width: int = 600
    max_canvas_width: int = 4096
    max_image_bytes: int = 10 * 1024 * 1024

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings, applying FACEGUIDE_* overrides from the environment."""
        environ = os.environ if environ is None else environ
        defaults = cls()
        overrides = {}

        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            default = getattr(defaults, f.name)
            if isinstance(default, tuple):
                overrides[f.name] = tuple(part.strip() for part in raw.split(",") if part.strip())
            elif isinstance(default, int):
                try:
                    overrides[f.name] = int(raw)
                except ValueError:
                    logger.warning(f"Ignoring {ENV_PREFIX}{f.name.upper()}={raw!r}: not an integer")
            else:
                overrides[f.name] = raw.strip()

        return cls(**overrides)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings loaded once per process."""
    return Settings.from_env()
