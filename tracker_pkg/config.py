# tracker_pkg/config.py
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import DEFAULT_SATELLITE_IDS, EARTH_TEXTURE_FILE, HTTP_TIMEOUT, TLE_API_URL


@dataclass
class Settings:
    """Runtime settings. Defaults come from constants; from_env() applies overrides."""
    tle_api_url: str = TLE_API_URL
    satellite_ids: Tuple[str, ...] = DEFAULT_SATELLITE_IDS
    http_timeout: Optional[float] = HTTP_TIMEOUT
    log_level: int = logging.INFO
    log_file: Optional[str] = None
    earth_texture: str = EARTH_TEXTURE_FILE

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        settings = cls()

        settings.tle_api_url = env.get("TRACKER_TLE_API", settings.tle_api_url)

        ids = env.get("TRACKER_SATELLITES")
        if ids is not None:
            settings.satellite_ids = tuple(s.strip() for s in ids.split(",") if s.strip())

        timeout = env.get("TRACKER_HTTP_TIMEOUT")
        if timeout:
            settings.http_timeout = float(timeout)

        level = env.get("TRACKER_LOG_LEVEL")
        if level:
            value = int(level) if level.isdigit() else logging.getLevelName(level.upper())
            if not isinstance(value, int):
                raise ValueError(f"Unknown log level: {level}")
            settings.log_level = value

        settings.log_file = env.get("TRACKER_LOG_FILE", settings.log_file)
        settings.earth_texture = env.get("TRACKER_EARTH_TEXTURE", settings.earth_texture)
        return settings
