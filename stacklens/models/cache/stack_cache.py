"""Stack cache envelope and its file-backed store.

The envelope is one record, ``{"stacks": [...], "timestamp": epoch_ms}``,
stored under a single well-known file. Writes go to a temporary file in the
same directory and are moved into place with ``os.replace``, so a reader
never sees a half-written record.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from collections.abc import Iterable
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from stacklens.constants.defaults import CACHE_TTL_DEFAULT
from stacklens.models.stacks.stack_info import Stack

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class CacheEnvelope(BaseModel):
    """Persisted set of stacks plus the time they were written."""

    model_config = ConfigDict(frozen=True)

    stacks: tuple[Stack, ...] = ()
    timestamp: int

    def is_fresh(
        self,
        now: int | None = None,
        ttl_seconds: float = CACHE_TTL_DEFAULT,
    ) -> bool:
        """Return True when the record is younger than ``ttl_seconds``.

        Staleness never hides cached stacks; it only decides whether the
        startup refresh shows a loading indicator.
        """
        current = now_ms() if now is None else now
        return current - self.timestamp < ttl_seconds * 1000


class StackCacheStore:
    """Best-effort JSON file store for the stack cache envelope."""

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: Location of the cache file. Parent directories are created
                on first save.
        """
        self.path = Path(path).expanduser()

    def load(self) -> CacheEnvelope | None:
        """Read the cached envelope, or None when absent or unusable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Unable to read stack cache %s: %s", self.path, exc)
            return None

        try:
            return CacheEnvelope.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Ignoring invalid stack cache %s (%d errors)",
                self.path,
                exc.error_count(),
            )
            return None

    def save(self, stacks: Iterable[Stack], timestamp_ms: int | None = None) -> bool:
        """Atomically replace the cache file with the given stacks.

        Returns:
            True if the record was written, False on storage errors.
        """
        envelope = CacheEnvelope(
            stacks=tuple(stacks),
            timestamp=now_ms() if timestamp_ms is None else timestamp_ms,
        )
        payload = json.dumps(envelope.model_dump(mode="json"))

        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=self.path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.warning("Unable to write stack cache %s: %s", self.path, exc)
            return False
        finally:
            if tmp_name is not None:
                with suppress(OSError):
                    os.unlink(tmp_name)

        logger.debug("Saved %d stacks to %s", len(envelope.stacks), self.path)
        return True

    def clear(self) -> None:
        """Remove the cache file if it exists."""
        with suppress(OSError):
            self.path.unlink()
