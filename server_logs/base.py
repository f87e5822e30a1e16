from abc import ABC, abstractmethod
from datetime import datetime, timezone


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class Logger(ABC):
    """Structured logger: every call is an event name plus keyword data.

    Subclasses only implement `emit`; the level methods all funnel into it.
    """

    log_type = "server"

    @abstractmethod
    def emit(self, level: str, msg: str, data: dict): ...

    def info(self, msg: str, **data):
        self.emit("INFO", msg, data)

    def debug(self, msg: str, **data):
        self.emit("DEBUG", msg, data)

    def warning(self, msg: str, **data):
        self.emit("WARN", msg, data)

    def error(self, msg: str, **data):
        self.emit("ERROR", msg, data)

    def bind(self, **context) -> "BoundLogger":
        """Return a logger that adds `context` to every event."""
        return BoundLogger(self, context)


class BoundLogger(Logger):
    def __init__(self, parent: Logger, context: dict):
        self.parent = parent
        self.context = context
        self.log_type = parent.log_type

    def emit(self, level, msg, data):
        # explicit keywords win over bound ones
        self.parent.emit(level, msg, {**self.context, **data})
