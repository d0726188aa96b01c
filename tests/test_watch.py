"""Tests for the polling watch loop."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from ntro.errors import ParseError
from ntro.watch import Watcher, fingerprint


class FakeTime:
    """Clock whose sleep advances time and fires scripted actions."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []
        self.actions: Dict[int, Callable[[], None]] = {}

    def clock(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds
        self.sleeps.append(seconds)
        action = self.actions.get(len(self.sleeps))
        if action is not None:
            action()


def _watcher(paths, work, fake: FakeTime) -> Watcher:
    return Watcher(
        paths,
        work,
        poll_interval=1.0,
        debounce=0.5,
        sleep=fake.sleep,
        clock=fake.clock,
    )


def test_fingerprint_of_missing_file(tmp_path: Path) -> None:
    assert fingerprint(tmp_path / "missing.env") is None
    source = tmp_path / ".env"
    source.write_text("A=1\n", encoding="utf-8")
    assert fingerprint(source)[1] == 4


def test_change_triggers_run_after_debounce(tmp_path: Path) -> None:
    source = tmp_path / ".env"
    source.write_text("A=1\n", encoding="utf-8")
    fake = FakeTime()
    fake.actions[1] = lambda: source.write_text("A=12\n", encoding="utf-8")
    calls: List[float] = []

    runs = _watcher([source], lambda: calls.append(fake.now), fake).run(max_runs=1)

    assert runs == 1
    assert calls == [1.5]
    assert fake.sleeps == [1.0, 0.5]


def test_burst_of_changes_collapses_into_one_run(tmp_path: Path) -> None:
    source = tmp_path / ".env"
    source.write_text("A=1\n", encoding="utf-8")
    fake = FakeTime()
    calls: List[float] = []
    watcher = _watcher([source], lambda: calls.append(fake.now), fake)
    fake.actions[1] = lambda: source.write_text("A=12\n", encoding="utf-8")
    fake.actions[2] = lambda: source.write_text("A=123\n", encoding="utf-8")
    fake.actions[6] = watcher.stop

    runs = watcher.run()

    assert runs == 1
    assert calls == [2.0]


def test_change_during_run_schedules_one_follow_up(tmp_path: Path) -> None:
    source = tmp_path / "config.yaml"
    source.write_text("a: 1\n", encoding="utf-8")
    fake = FakeTime()
    fake.actions[1] = lambda: source.write_text("a: 12\n", encoding="utf-8")
    calls: List[float] = []

    def work() -> None:
        calls.append(fake.now)
        if len(calls) == 1:
            source.write_text("a: 123\n", encoding="utf-8")

    runs = _watcher([source], work, fake).run(max_runs=2)

    assert runs == 2
    assert calls == [1.5, 3.0]


def test_deleted_source_counts_as_change(tmp_path: Path) -> None:
    source = tmp_path / ".env"
    source.write_text("A=1\n", encoding="utf-8")
    fake = FakeTime()
    fake.actions[1] = source.unlink
    calls: List[int] = []

    runs = _watcher([source], lambda: calls.append(1), fake).run(max_runs=1)

    assert runs == 1
    assert calls == [1]


def test_failed_run_is_logged_and_watching_continues(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="ntro")
    source = tmp_path / "config.yaml"
    source.write_text("a: 1\n", encoding="utf-8")
    fake = FakeTime()
    fake.actions[1] = lambda: source.write_text("a: [\n", encoding="utf-8")

    def work() -> None:
        raise ParseError(source, "unexpected end of stream", line=1)

    runs = _watcher([source], work, fake).run(max_runs=1)

    assert runs == 1
    assert "Regeneration failed: failed to parse" in caplog.text


def test_stopped_watcher_does_not_poll(tmp_path: Path) -> None:
    fake = FakeTime()
    watcher = _watcher([tmp_path / ".env"], lambda: None, fake)
    watcher.stop()

    assert watcher.run() == 0
    assert fake.sleeps == []
