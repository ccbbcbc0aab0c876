"""
Logging setup for the betting pool service.

Every record carries the request's correlation ID. Pool events (placements,
settlements, reversals, rollover moves) pass their identifiers through
``extra=`` so JSON output can be filtered per wager, date or slot:

    logger.info("Wager placed", extra={"wager_id": wager.id, "slot": "09:00"})
"""
import logging
import json
import sys
from datetime import datetime, timezone
from contextvars import ContextVar

# Set per request by CorrelationIdMiddleware
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Fields pool code attaches through ``extra=``, emitted at the top level of JSON lines
POOL_FIELDS = (
    "wager_id",
    "bettor",
    "date",
    "slot",
    "amount",
    "odds",
    "wagers",
    "winners",
    "paid",
    "rollover",
    "rollover_delta",
    "method",
    "path",
    "status_code",
    "duration_ms",
)

# Chatty libraries that drown out settlement logs at INFO
QUIET_LOGGERS = (
    "uvicorn.access",
    "sqlalchemy.engine",
    "slowapi",
    "prometheus_fastapi_instrumentator",
)


def _pool_fields(record: logging.LogRecord) -> dict:
    return {name: getattr(record, name) for name in POOL_FIELDS if hasattr(record, name)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, correlation_id, pool fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": correlation_id_var.get(),
        }
        log_data.update(_pool_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter for local runs."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        line = f"{color}[{record.levelname}]{self.RESET} {record.name}: {record.getMessage()}"

        fields = _pool_fields(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())

        correlation_id = correlation_id_var.get()
        if correlation_id:
            line += f" | cid={correlation_id}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install a single root handler.

    Args:
        level: Level name for the root logger
        json_output: JSON lines when True, coloured console output otherwise
        handler: Handler to use instead of stdout (tests pass a capturing one)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else ColoredFormatter())
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
