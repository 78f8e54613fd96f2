import logging
import time
from typing import Callable, List, Optional

from .parsing import DEFAULT_POLICY, LOG_ENCODING, LOG_ERRORS, MessagePolicy, classify_line, split_lines
from .utils.state import DiagnosticState
from .utils.watcher import FileWatcher

logger = logging.getLogger(__name__)


class DiagnosticEngine:
    def __init__(self, log_path: str, policy: Optional[MessagePolicy] = None,
                 sources: Optional[List[str]] = None):
        self.state = DiagnosticState(log_path=log_path, sources=list(sources or []))
        self.policy = policy if policy else DEFAULT_POLICY
        self.watcher = FileWatcher()
        self.on_update_callback: Optional[Callable[[DiagnosticState], None]] = None

    def start(self):
        self.refresh()
        self.watcher.start_watching(self.state.log_path, self._on_file_saved)

    def stop(self):
        self.watcher.stop_watching()

    def _on_file_saved(self, path: str):
        self.refresh()

    def set_policy(self, policy: MessagePolicy):
        self.policy = policy
        self.refresh()

    def refresh(self):
        logger.debug("Refreshing %s with %s", self.state.log_path, self.policy)
        try:
            with open(self.state.log_path, "r", encoding=LOG_ENCODING, errors=LOG_ERRORS, newline="") as f:
                raw = f.read()

            lines = split_lines(raw)
            messages = [classify_line(line, self.policy) for line in lines]
            self.state.update_output(raw, lines, messages)
            logger.debug("Classified %d lines, errors=%s", len(lines), self.state.has_errors)

        except OSError as e:
            logger.error("Refresh failed: %s", e)
            self.state.internal_error = f"Cannot read {self.state.log_path}: {e}"

        self.state.last_update = time.time()
        if self.on_update_callback:
            self.on_update_callback(self.state)
