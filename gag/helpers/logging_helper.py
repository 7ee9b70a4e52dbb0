from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, List, Tuple


LogSink = Callable[[str, str], None]


class LoggingHelper:
    """Handles all logging operations: console output, a short in-memory history and any registered sinks."""

    LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}

    def __init__(self, min_level: str = "INFO", history_size: int = 200, console: bool = True):
        self.min_level = min_level.upper()
        self.console = console
        self._history: Deque[Tuple[str, str, str]] = deque(maxlen=history_size)
        self._sinks: List[LogSink] = []

    def add_sink(self, sink: LogSink):
        """Registers a callable receiving (message, level) for every log entry, regardless of min_level."""
        if sink not in self._sinks:
            self._sinks.append(sink)

    def remove_sink(self, sink: LogSink):
        if sink in self._sinks:
            self._sinks.remove(sink)

    def log(self, message: str, level: str = "INFO"):
        level = level.upper()
        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')
        self._history.append((timestamp, level, message))

        if self.console and self.LEVELS.get(level, 20) >= self.LEVELS.get(self.min_level, 20):
            print(f"[GAG|{level}|{timestamp}] {message}")

        for sink in list(self._sinks):
            try:
                sink(message, level)
            except Exception as e:
                print(f"[LOG_SINK_ERROR|{level}] Sink {sink!r} failed: {e}")

    def get_history(self, level: str = "DEBUG") -> List[Tuple[str, str, str]]:
        """Returns recent (timestamp, level, message) entries at or above the given level."""
        threshold = self.LEVELS.get(level.upper(), 10)
        return [entry for entry in self._history if self.LEVELS.get(entry[1], 20) >= threshold]

    def clear_history(self):
        self._history.clear()
