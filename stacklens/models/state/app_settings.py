"""Application settings models."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stacklens.constants.defaults import (
    CACHE_DIR_DEFAULT,
    CACHE_TTL_DEFAULT,
    LOG_LEVEL_DEFAULT,
    REFRESH_INTERVAL_DEFAULT,
    REQUEST_TIMEOUT_DEFAULT,
)
from stacklens.constants.limits import (
    REFRESH_INTERVAL_MIN,
    REQUEST_TIMEOUT_MAX,
    REQUEST_TIMEOUT_MIN,
)
from stacklens.constants.timeouts import (
    KUBECTL_COMMAND_MARGIN,
    KUBECTL_COMMAND_TIMEOUT,
)
from stacklens.constants.values import CACHE_FILE_NAME, SELECTION_FILE_NAME


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    # Clusters (kubeconfig context names), scanned in this order
    clusters: list[str] = Field(default_factory=list)
    kubeconfig: str | None = None

    # Discovery cadence
    refresh_interval_seconds: int = Field(
        default=REFRESH_INTERVAL_DEFAULT, ge=REFRESH_INTERVAL_MIN
    )
    request_timeout_seconds: int = Field(
        default=REQUEST_TIMEOUT_DEFAULT,
        ge=REQUEST_TIMEOUT_MIN,
        le=REQUEST_TIMEOUT_MAX,
    )

    # Local cache
    cache_path: str = str(CACHE_DIR_DEFAULT / CACHE_FILE_NAME)
    cache_ttl_seconds: int = CACHE_TTL_DEFAULT
    selection_path: str = str(CACHE_DIR_DEFAULT / SELECTION_FILE_NAME)

    demo_mode: bool = False
    log_level: str = LOG_LEVEL_DEFAULT

    @field_validator("clusters")
    @classmethod
    def _dedupe_clusters(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for cluster in value:
            name = cluster.strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or LOG_LEVEL_DEFAULT

    @property
    def request_timeout(self) -> str:
        """Request timeout in kubectl's duration format."""
        return f"{self.request_timeout_seconds}s"

    @property
    def command_timeout(self) -> float:
        """Process timeout in seconds; always outlasts the request timeout."""
        return float(
            max(
                KUBECTL_COMMAND_TIMEOUT,
                self.request_timeout_seconds + KUBECTL_COMMAND_MARGIN,
            )
        )

    def resolved_cache_path(self) -> Path:
        return Path(self.cache_path).expanduser()

    def resolved_selection_path(self) -> Path:
        return Path(self.selection_path).expanduser()


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
