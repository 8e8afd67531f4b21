"""Structured logging for the Okey server.

Format and level come from OkeyServerSettings (OKEY_LOG_FORMAT, OKEY_LOG_LEVEL).
Per-command context (room, seat, player, connection) is carried in structlog
contextvars so every line logged while a room is locked names that room.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LogFormat = Literal["json", "console"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

# chatty at INFO under websocket load
_QUIET_LOGGERS = ("uvicorn.access", "websockets", "httpx", "httpcore")


def bind_game_context(
    *,
    room_id: str | None = None,
    seat: int | None = None,
    player_id: str | None = None,
    connection_id: str | None = None,
) -> None:
    """Bind the given identifiers to the current task's log context. None values are skipped."""
    values = {"room_id": room_id, "seat": seat, "player_id": player_id, "connection_id": connection_id}
    structlog.contextvars.bind_contextvars(**{k: v for k, v in values.items() if v is not None})


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _render_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Log room phases, draw sources and error codes by their wire value."""
    for key, value in event_dict.items():
        event_dict[key] = _plain(value)
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def _handler(handler: logging.Handler, log_format: LogFormat, *, colors: bool = False) -> logging.Handler:
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        ),
    )
    return handler


def setup_logging(
    log_dir: Path | str | None = None,
    log_format: LogFormat = "console",
    level: LogLevel = "INFO",
) -> Path | None:
    """Route structlog through the stdlib root logger, to stdout and optionally a file.

    A timestamped file is opened in log_dir unless running under pytest.
    Returns its path, or None when no file was opened.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _render_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), log_format, colors=sys.stdout.isatty()))

    if log_dir is None or _is_test():
        return None

    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    file_path = dir_path / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    root_logger.addHandler(_handler(logging.FileHandler(file_path), log_format))
    return file_path
