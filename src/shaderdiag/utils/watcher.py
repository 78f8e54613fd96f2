import logging
import time
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class LogUpdateHandler(FileSystemEventHandler):
    """
    Follows one compiler log by path, not by inode.

    Build tools either append to the log, write a fresh one, or write a
    temp file and rename it over the old log. All three end up as a
    callback with the log path; so does deleting the log, letting the
    caller report that it is gone.
    """
    def __init__(self, target_file: str, callback: Callable[[str], None]):
        self.target_file = str(Path(target_file).resolve())
        self.callback = callback
        self.last_triggered = 0.0
        self.debounce_seconds = 0.5  # one build usually writes the log in several chunks

    def _is_target(self, path: Optional[str]) -> bool:
        if not path:
            return False
        return str(Path(path).resolve()) == self.target_file

    def _trigger(self, reason: str, force: bool = False):
        now = time.time()
        if force or now - self.last_triggered > self.debounce_seconds:
            logger.debug("Log %s: %s", reason, self.target_file)
            self.callback(self.target_file)
            self.last_triggered = now

    def on_modified(self, event: FileSystemEvent):
        if not event.is_directory and self._is_target(event.src_path):
            self._trigger("modified")

    def on_created(self, event: FileSystemEvent):
        if not event.is_directory and self._is_target(event.src_path):
            self._trigger("created")

    def on_moved(self, event: FileSystemEvent):
        if event.is_directory:
            return
        # A rename onto the log replaces it wholesale; never debounce that
        if self._is_target(getattr(event, "dest_path", None)):
            self._trigger("replaced", force=True)
        elif self._is_target(event.src_path):
            self._trigger("moved away", force=True)

    def on_deleted(self, event: FileSystemEvent):
        if not event.is_directory and self._is_target(event.src_path):
            self._trigger("deleted", force=True)


class FileWatcher:
    """
    Manages the watchdog observer thread.
    """
    def __init__(self):
        self.observer = Observer()
        self.watch = None

    def start_watching(self, file_path: str, callback: Callable[[str], None]):
        """
        Starts a background thread watching the directory that holds file_path.
        The log itself may not exist yet; a build that has not run still gets
        picked up once it writes the file.
        """
        path = Path(file_path).resolve()
        if not path.parent.is_dir():
            raise FileNotFoundError(f"Cannot watch log in missing directory: {path.parent}")

        handler = LogUpdateHandler(str(path), callback)
        self.watch = self.observer.schedule(handler, str(path.parent), recursive=False)
        self.observer.start()

    def stop_watching(self):
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
