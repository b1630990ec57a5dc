"""Tests for watch-mode event handling."""

import asyncio
import shutil
import threading
from pathlib import Path

import pytest
from watchdog.events import DirModifiedEvent, FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from codecontext.analyzer import DirectoryAnalyzer
from codecontext.monitor import ProjectMonitor


@pytest.fixture
def monitor(tmp_path: Path, quick_config) -> ProjectMonitor:
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "index.ts").write_text("export function run(x) {}\n")
    (tmp_path / "lib").mkdir()
    analyzer = DirectoryAnalyzer(quick_config, root=tmp_path)
    return ProjectMonitor(tmp_path, analyzer, update_delay=0)


def test_directory_for(monitor: ProjectMonitor, tmp_path: Path):
    root = tmp_path.resolve()

    assert monitor.directory_for(str(tmp_path / "pkg" / "index.ts")) == root / "pkg"
    assert monitor.directory_for(str(tmp_path / "pkg" / "claude.md")) is None
    assert monitor.directory_for(str(tmp_path / ".git" / "index")) is None
    assert monitor.directory_for(str(tmp_path / "node_modules" / "x.js")) is None
    assert monitor.directory_for(str(tmp_path / "debug.log")) is None
    assert monitor.directory_for(str(tmp_path.parent / "elsewhere.ts")) is None


def test_events_queue_parent_directories(monitor: ProjectMonitor, tmp_path: Path):
    root = tmp_path.resolve()

    monitor.on_any_event(FileModifiedEvent(str(tmp_path / "pkg" / "index.ts")))
    monitor.on_any_event(FileMovedEvent(str(tmp_path / "pkg" / "old.ts"), str(tmp_path / "lib" / "new.ts")))
    monitor.on_any_event(DirModifiedEvent(str(tmp_path / "pkg")))
    monitor.on_any_event(FileCreatedEvent(str(tmp_path / "pkg" / "claude.md")))

    assert monitor.pending == {root / "pkg", root / "lib"}


def test_flush_refreshes_existing_directories(monitor: ProjectMonitor, tmp_path: Path):
    root = tmp_path.resolve()
    monitor.on_any_event(FileModifiedEvent(str(tmp_path / "pkg" / "index.ts")))
    monitor.on_any_event(FileModifiedEvent(str(tmp_path / "lib" / "gone.ts")))
    shutil.rmtree(tmp_path / "lib")

    refreshed = monitor.flush()

    assert refreshed == {root / "pkg"}
    assert (tmp_path / "pkg" / "claude.md").is_file()
    assert monitor.pending == set()


def test_updates_are_flushed_off_the_event_loop(monitor: ProjectMonitor, tmp_path: Path):
    """Blocking analysis runs in a worker thread, not on the loop's thread."""
    loop_thread = threading.get_ident()
    flush_threads = []

    def flush():
        flush_threads.append(threading.get_ident())
        monitor.running = False
        return set()

    monitor.flush = flush
    monitor.pending.add(tmp_path / "pkg")
    monitor.running = True

    asyncio.run(monitor.process_updates())

    assert len(flush_threads) == 1
    assert flush_threads[0] != loop_thread
