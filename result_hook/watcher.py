"""File system watcher for Result Hook.

Uses the watchdog library to monitor the screenshot folder.  Events are
pushed onto a bounded queue and handled one at a time by a single
consumer thread, so uploads never run concurrently.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

EVENT_CREATED = "created"
EVENT_MODIFIED = "modified"

DEFAULT_CREATE_DELAY = 2.0
DEFAULT_QUEUE_SIZE = 256


class ScreenshotHandler(FileSystemEventHandler):
    """Watchdog handler that queues file creations and writes."""

    def __init__(self, events: queue.Queue):
        super().__init__()
        self._events = events

    def on_created(self, event: FileCreatedEvent) -> None:  # type: ignore[override]
        """Queue a new file creation event."""
        if event.is_directory:
            return
        self._events.put((EVENT_CREATED, os.fsdecode(event.src_path)))

    def on_modified(self, event: FileModifiedEvent) -> None:  # type: ignore[override]
        """Queue a file write event."""
        if event.is_directory:
            return
        self._events.put((EVENT_MODIFIED, os.fsdecode(event.src_path)))


class ResultWatcher:
    """Watches one folder (non-recursive) and reports written files.

    Usage:
        watcher = ResultWatcher(path, notifier.notify)
        watcher.start()
        ...
        watcher.stop()
    """

    def __init__(
        self,
        watch_path: str,
        on_write: Callable[[Path], Any],
        create_delay: float = DEFAULT_CREATE_DELAY,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ):
        """Create a watcher that calls *on_write* for every written file."""
        self.watch_path = watch_path
        self._on_write = on_write
        self._create_delay = create_delay
        self._events: queue.Queue = queue.Queue(maxsize=queue_size)
        self._handler = ScreenshotHandler(self._events)
        self._stop = threading.Event()
        self._observer: Any | None = None
        self._consumer: threading.Thread | None = None

    # ---- lifecycle ----

    def start(self) -> None:
        """Start watching the folder and handling events."""
        if not os.path.isdir(self.watch_path):
            logger.error("Watch folder does not exist: %s", self.watch_path)
            raise FileNotFoundError(f"Watch folder does not exist: {self.watch_path}")

        self._stop.clear()
        # Drop events (and a stop sentinel) left over from a previous run
        while True:
            try:
                self._events.get_nowait()
            except queue.Empty:
                break
        self._consumer = threading.Thread(
            target=self._consume, daemon=True, name="ResultConsumer"
        )
        self._consumer.start()

        observer = Observer()
        self._observer = observer
        observer.schedule(self._handler, self.watch_path, recursive=False)
        observer.start()
        logger.info("Watching '%s'", self.watch_path)

    def stop(self) -> None:
        """Stop watching and wait for the current event to finish."""
        self._stop.set()
        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
        if self._consumer:
            try:
                self._events.put_nowait(None)
            except queue.Full:
                # Consumer is busy and will see the stop flag next
                pass
            self._consumer.join(timeout=5)
            self._consumer = None
        logger.info("Watcher stopped.")

    @property
    def is_running(self) -> bool:
        """Return whether the watcher is currently active."""
        return self._observer is not None and self._observer.is_alive()

    # ---- event loop ----

    def _consume(self) -> None:
        while not self._stop.is_set():
            item = self._events.get()
            if item is None:
                break
            self._handle(*item)

    def _handle(self, kind: str, src_path: str) -> None:
        logger.debug("event: %s %s", kind, src_path)
        if kind == EVENT_CREATED:
            # The game may still be writing the file
            self._stop.wait(timeout=self._create_delay)
        elif kind == EVENT_MODIFIED:
            try:
                self._on_write(Path(src_path))
            except Exception:
                logger.exception("Error handling write event for %s", src_path)
