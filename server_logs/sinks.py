import json
import threading
from pathlib import Path

from server_logs.base import Logger, utc_timestamp


class StdoutLogger(Logger):
    """Human readable lines, used in dev."""

    def __init__(self, log_type="server"):
        self.log_type = log_type

    def emit(self, level, msg, data):
        print(f"[{utc_timestamp()}] [{self.log_type}] {level} {msg} {data}")


class JSONLogger(Logger):
    """One JSON object per line on stdout, for log shippers in prod."""

    def __init__(self, log_type="server"):
        self.log_type = log_type

    def emit(self, level, msg, data):
        print(json.dumps({
            "ts": utc_timestamp(),
            "log_type": self.log_type,
            "level": level,
            "event": msg,
            "data": data
        }, default=str))


class FileLogger(Logger):
    """Appends flat JSON lines to `<base_path>/<log_type>.log`.

    The /admin/logs endpoints read these files back, so the field layout
    ("level", "event", data keys at top level) is what their filters expect.
    """

    def __init__(self, log_type="server", base_path="logs"):
        self.log_type = log_type
        self.path = Path(base_path) / f"{log_type}.log"
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, level, msg, data):
        line = json.dumps({
            "ts": utc_timestamp(),
            "log_type": self.log_type,
            "level": level,
            "event": msg,
            **data
        }, default=str)
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")


class CompositeLogger(Logger):
    def __init__(self, *loggers: Logger):
        self.loggers = loggers
        if loggers:
            self.log_type = loggers[0].log_type

    def emit(self, level, msg, data):
        for logger in self.loggers:
            logger.emit(level, msg, data)
