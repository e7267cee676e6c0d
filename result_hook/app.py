"""
Application controller for Result Hook.

Ties together configuration, logging, the webhook notifier and the
folder watcher, then blocks until SIGINT/SIGTERM.
"""

import logging
import logging.handlers
import signal
import sys
import threading

from result_hook import __app_name__, __version__
from result_hook.config import Config
from result_hook.dedup import RecentPaths
from result_hook.notifier import WebhookNotifier
from result_hook.watcher import ResultWatcher

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(config: Config) -> None:
    """Configure a stderr handler and, if set, a rotating file log."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(fmt)
    root_logger.addHandler(sh)

    if config.log_file:
        fh = logging.handlers.RotatingFileHandler(
            config.log_file,
            maxBytes=config.max_log_size_mb * 1024 * 1024,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(fmt)
        root_logger.addHandler(fh)


class App:
    """Central orchestrator: one notifier fed by one watcher."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.notifier = WebhookNotifier(
            config.webhook,
            recent=RecentPaths(config.dedupe_max_entries, config.dedupe_window),
            timeout=config.request_timeout,
        )
        self.watcher = ResultWatcher(
            config.watch_path,
            on_write=self._on_write,
            create_delay=config.create_delay,
        )
        self._stop = threading.Event()

    def _on_write(self, path) -> None:
        outcome = self.notifier.notify(path)
        logger.debug("%s: %s", path, outcome.value)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Start watching and block until ``stop()`` or a signal."""
        logger.info("%s %s starting.", __app_name__, __version__)
        logger.info("Watch folder: %s", self.config.watch_path)
        if self.config.username:
            logger.info("Posting results for %s", self.config.username)
        self.watcher.start()

        signal.signal(signal.SIGINT, self._on_signal)
        signal.signal(signal.SIGTERM, self._on_signal)
        try:
            while not self._stop.wait(timeout=1):
                pass
        finally:
            self.watcher.stop()
        logger.info("Shutting down.")

    def stop(self) -> None:
        """Ask ``run()`` to return."""
        self._stop.set()

    def _on_signal(self, signum, frame) -> None:
        logger.info("Received signal %s", signum)
        self.stop()
