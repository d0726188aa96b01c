"""Polling watch loop that re-runs generation when sources change."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .errors import NtroError
from .logging import get_logger

Fingerprint = Optional[Tuple[int, int]]


def fingerprint(path: Path) -> Fingerprint:
    """Return ``(mtime_ns, size)`` for ``path`` or None when it is missing."""
    try:
        stat_result = path.stat()
    except OSError:
        return None
    return stat_result.st_mtime_ns, stat_result.st_size


class Watcher:
    """Runs ``work`` after watched files change and then settle.

    Everything happens on the calling thread: change bursts within ``debounce``
    seconds collapse into one run and a run never starts while another is active.
    Changes seen during a run schedule exactly one follow-up run.
    """

    def __init__(
        self,
        paths: Iterable[Path],
        work: Callable[[], object],
        *,
        poll_interval: float = 1.0,
        debounce: float = 0.2,
        stop_event: threading.Event | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.paths: List[Path] = list(paths)
        self._work = work
        self.poll_interval = poll_interval
        self.debounce = debounce
        self.stop_event = stop_event or threading.Event()
        self._sleep = sleep
        self._clock = clock
        self.logger = get_logger("watch")

    def snapshot(self) -> Dict[Path, Fingerprint]:
        return {path: fingerprint(path) for path in self.paths}

    def stop(self) -> None:
        self.stop_event.set()

    def run(self, *, max_runs: int | None = None) -> int:
        """Block until stopped (or ``max_runs`` runs happened); return the run count."""
        self.logger.info("Watching %s", ", ".join(str(path) for path in self.paths))
        fingerprints = self.snapshot()
        token = 0
        completed_token = 0
        changed_at = 0.0
        runs = 0

        while not self.stop_event.is_set():
            pending = token != completed_token
            self._sleep(self._delay(pending, changed_at))
            if self.stop_event.is_set():
                break

            current = self.snapshot()
            if current != fingerprints:
                changed = [str(path) for path in self.paths if current[path] != fingerprints[path]]
                self.logger.debug("Change detected in %s", ", ".join(changed))
                fingerprints = current
                token += 1
                changed_at = self._clock()
                continue

            if not pending or self._clock() - changed_at < self.debounce:
                continue

            run_token = token
            self.logger.info("Sources changed; regenerating")
            self._run_once()
            completed_token = run_token
            runs += 1
            if max_runs is not None and runs >= max_runs:
                break

        return runs

    def _delay(self, pending: bool, changed_at: float) -> float:
        if not pending:
            return self.poll_interval
        remaining = self.debounce - (self._clock() - changed_at)
        return max(0.0, min(self.poll_interval, remaining))

    def _run_once(self) -> None:
        try:
            self._work()
        except NtroError as exc:
            self.logger.error("Regeneration failed: %s", exc)


__all__ = ["Fingerprint", "Watcher", "fingerprint"]
