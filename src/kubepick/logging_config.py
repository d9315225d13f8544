"""Logging for the ``kubepick`` logger tree.

Stdlib records (``logging.getLogger("kubepick.*")``) and structlog events
(``structlog.get_logger("kubepick.*")``) go through the same handlers: a
human-readable console renderer on stderr and, when ``log_dir`` is set, one JSON
object per line in ``kubepick.log``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog
from structlog.typing import EventDict, Processor

from kubepick.config import KubepickSettings

LOGGER_NAME = "kubepick"
LOG_FILE_NAME = "kubepick.log"

_TIMESTAMPER = structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp")


def configure_logging(settings: KubepickSettings) -> Path | None:
    """Replace the handlers on the ``kubepick`` logger and return the log file, if any."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_common_processors(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream=sys.stderr)
    renderer = structlog.dev.ConsoleRenderer(colors=_stream_supports_color(sys.stderr))
    _attach(root, console, _console_level(settings.log_level), _formatter(renderer))

    log_file: Path | None = None
    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = settings.log_dir / LOG_FILE_NAME
        json_formatter = _formatter(
            structlog.processors.JSONRenderer(sort_keys=True),
            _add_record_metadata,
            structlog.processors.format_exc_info,
        )
        _attach(root, logging.FileHandler(log_file, encoding="utf-8"), logging.DEBUG, json_formatter)

    root.debug("logging configured console_level=%s path=%s", settings.log_level, log_file)
    return log_file


def _attach(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _console_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def _common_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _TIMESTAMPER,
    ]


def _formatter(renderer: Processor, *before_render: Processor) -> structlog.stdlib.ProcessorFormatter:
    # foreign_pre_chain only runs for records that did not come through structlog.
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_common_processors(),
        processors=[
            *before_render,
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def _add_record_metadata(_logger: logging.Logger, _method_name: str, event_dict: EventDict) -> EventDict:
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        event_dict.update(func_name=record.funcName, lineno=record.lineno, process=record.process)
    return event_dict


def _stream_supports_color(stream: object) -> bool:
    isatty = getattr(stream, "isatty", None)
    if not callable(isatty):
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False
