"""File system monitoring that keeps directory documents current."""

import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Optional, Set

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .analyzer import DirectoryAnalyzer
from .documentation import DOCUMENT_NAME

logger = logging.getLogger(__name__)


class ProjectMonitor(FileSystemEventHandler):
    """Re-analyzes directories whose files change, after a quiet period."""

    def __init__(self, root: Path, analyzer: DirectoryAnalyzer, update_delay: float = 2.0):
        self.root = root.resolve()
        self.analyzer = analyzer
        self.update_delay = update_delay
        self.pending: Set[Path] = set()
        self.last_event_time = time.time()
        self.observer: Optional[Observer] = None
        self._lock = threading.Lock()
        self.running = False

    def directory_for(self, src_path: str) -> Optional[Path]:
        """Directory to refresh for an event path, or None when irrelevant."""
        path = Path(src_path).resolve()
        if path.name == DOCUMENT_NAME:
            return None
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return None
        if any(part.startswith(".") for part in relative.parts):
            return None
        if self.analyzer.ignore_filter.ignores(relative.as_posix()):
            return None
        return path.parent

    def on_any_event(self, event: FileSystemEvent):
        if event.is_directory or event.event_type not in ("created", "modified", "deleted", "moved"):
            return
        paths = [event.src_path]
        if event.event_type == "moved":
            paths.append(getattr(event, "dest_path", ""))
        for src in paths:
            if not src:
                continue
            directory = self.directory_for(src)
            if directory is None:
                logger.debug(f"Ignoring event for {src}")
                continue
            with self._lock:
                self.pending.add(directory)
                self.last_event_time = time.time()
            logger.debug(f"Queued {directory} after {event.event_type} of {src}")

    def flush(self) -> Set[Path]:
        """Analyze and clear every pending directory that still exists."""
        with self._lock:
            directories, self.pending = self.pending, set()
        refreshed = set()
        for directory in sorted(directories):
            if not directory.is_dir():
                continue
            try:
                self.analyzer.analyze(directory)
                refreshed.add(directory)
            except OSError as e:
                logger.warning(f"Could not refresh {directory}: {e}")
        return refreshed

    async def process_updates(self):
        """Flush pending directories once events settle."""
        while self.running:
            with self._lock:
                has_pending = bool(self.pending)
                quiet_for = time.time() - self.last_event_time
            if has_pending and quiet_for >= self.update_delay:
                refreshed = await asyncio.to_thread(self.flush)
                for directory in sorted(refreshed):
                    print(f"[{time.strftime('%H:%M:%S')}] Updated {directory}")
            await asyncio.sleep(0.2)

    def start(self):
        self.observer = Observer()
        self.observer.schedule(self, str(self.root), recursive=True)
        self.observer.start()
        self.running = True
        logger.info(f"Started monitoring {self.root}")

    def stop(self):
        self.running = False
        if self.observer:
            try:
                self.observer.stop()
                self.observer.join(timeout=5)
            finally:
                self.observer = None

    async def run(self):
        self.start()
        try:
            await self.process_updates()
        finally:
            self.stop()
