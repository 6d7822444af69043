"""Default values for settings.

All default values used in AppSettings model and validation fallback values.
"""

from pathlib import Path
from typing import Final

# ============================================================================
# Paths
# ============================================================================

CONFIG_DIR_DEFAULT: Final = Path("~/.config/stacklens")
CACHE_DIR_DEFAULT: Final = Path("~/.cache/stacklens")
CONFIG_FILE_DEFAULT: Final = CONFIG_DIR_DEFAULT / "settings.yaml"

# ============================================================================
# Discovery defaults
# ============================================================================

REFRESH_INTERVAL_DEFAULT: Final = 120
REQUEST_TIMEOUT_DEFAULT: Final = 30
CACHE_TTL_DEFAULT: Final = 300
LOG_LEVEL_DEFAULT: Final = "INFO"

__all__ = [
    "CACHE_DIR_DEFAULT",
    "CACHE_TTL_DEFAULT",
    "CONFIG_DIR_DEFAULT",
    "CONFIG_FILE_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "REFRESH_INTERVAL_DEFAULT",
    "REQUEST_TIMEOUT_DEFAULT",
]
