"""Single-flight guard for scrape submissions.

The flag lives in a small JSON file owned by the client, so it survives a
restart of the client process. It is advisory only: other clients and the
server never see it.
"""

import json
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from jobscraper.client.exceptions import SubmissionInProgressError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionGuard:
    """File-backed in-progress flag with staleness recovery."""

    DEFAULT_STALE_AFTER = timedelta(minutes=5)

    def __init__(
        self,
        state_path: str | Path,
        stale_after: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._state_path = Path(state_path)
        self._stale_after = stale_after or self.DEFAULT_STALE_AFTER
        self._clock = clock

    def _read(self) -> dict[str, Any]:
        try:
            state = json.loads(self._state_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable guard state at {self._state_path}, resetting: {e}")
            return {}
        return state if isinstance(state, dict) else {}

    def _create(self, state: dict[str, Any]) -> bool:
        """Write the state file only if it does not exist yet."""
        self._state_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self._state_path, "x", encoding="utf-8") as f:
                json.dump(state, f)
        except FileExistsError:
            return False
        return True

    def started_at(self) -> datetime | None:
        """When the current flag was set, if it is set and timestamped."""
        value = self._read().get("startedAt")
        if not value:
            return None
        try:
            started_at = datetime.fromisoformat(value)
        except (TypeError, ValueError):
            return None
        if started_at.tzinfo is None:
            started_at = started_at.replace(tzinfo=timezone.utc)
        return started_at

    def is_held(self) -> bool:
        return self._read().get("inProgress") is True

    def recover_stale(self) -> bool:
        """Clear an abandoned flag. Call once when the client loads.

        A flag is abandoned when it is older than the staleness threshold or
        carries no timestamp. Returns True if a flag was cleared.
        """
        if not self.is_held():
            return False

        started_at = self.started_at()
        if started_at is not None and self._clock() - started_at <= self._stale_after:
            return False

        logger.info("Clearing stale scrape-in-progress flag")
        self.release()
        return True

    def acquire(self) -> None:
        """Set the flag, or refuse if a submission is already outstanding.

        The state file is created exclusively, so two processes sharing it
        cannot both acquire.

        Raises:
            SubmissionInProgressError: if the flag is already set.
        """
        state = {"inProgress": True, "startedAt": self._clock().isoformat()}
        if self._create(state):
            return

        if self.is_held():
            raise SubmissionInProgressError()

        # Leftover file without a live flag
        self.release()
        if not self._create(state):
            raise SubmissionInProgressError()

    def release(self) -> None:
        """Clear the flag unconditionally."""
        self._state_path.unlink(missing_ok=True)

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the flag for the duration of one submission."""
        self.acquire()
        try:
            yield
        finally:
            self.release()
