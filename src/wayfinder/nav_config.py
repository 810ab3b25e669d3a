# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .models import UnitSystem


# ---------------------------------------------------------------------------
# Unit constants (used by unit_converter)
# ---------------------------------------------------------------------------

METERS_PER_KILOMETER: float = 1000.0
METERS_PER_MILE: float = 1609.34

DEFAULT_OSRM_URL = "https://router.project-osrm.org"
DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org"


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Display
    unit_system: UnitSystem = UnitSystem.METRIC
    viewport_padding_ratio: float = 0.2     # fraction added to route bounds
    position_span_m: float = 1000.0         # live-position region edge length

    # Address search
    min_query_length: int = 1
    max_suggestions: int = 10

    # Providers
    osrm_base_url: str = DEFAULT_OSRM_URL
    nominatim_base_url: str = DEFAULT_NOMINATIM_URL
    request_timeout_s: float = 10.0
    user_agent: str = "wayfinder/0.1"

    @property
    def imperial(self) -> bool:
        return self.unit_system is UnitSystem.IMPERIAL

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "NavConfig":
        """
        Build a config from WAYFINDER_* environment variables.

        A .env file is loaded first if present; real environment variables win.
        """
        load_dotenv(env_file)
        config = cls()
        if os.getenv("WAYFINDER_IMPERIAL", "").lower() in ("1", "true", "yes"):
            config.unit_system = UnitSystem.IMPERIAL
        config.osrm_base_url = os.getenv("WAYFINDER_OSRM_URL", config.osrm_base_url)
        config.nominatim_base_url = os.getenv("WAYFINDER_NOMINATIM_URL", config.nominatim_base_url)
        config.user_agent = os.getenv("WAYFINDER_USER_AGENT", config.user_agent)
        timeout = os.getenv("WAYFINDER_TIMEOUT_S")
        if timeout:
            config.request_timeout_s = float(timeout)
        return config
