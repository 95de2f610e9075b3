"""Structured logging for creature-state.

Events are emitted through structlog with key/value fields (character,
type_id, trait_id) rather than formatted strings. State changes log at
DEBUG, recoverable misuse such as removing an item that is not owned logs
at WARNING.

Example:
    >>> logger = get_logger(__name__)
    >>> with character_context("Ana"):
    ...     logger.debug("mutation_toggled", trait_id="NIGHTVISION", present=True)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

APP_TAG = "creature_state"
_PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every event with the package name."""
    event_dict["app"] = APP_TAG
    return event_dict


def _resolve_level(level: str | None) -> int:
    if level is None:
        from creature_state.core.config import get_settings

        level = get_settings().log_level
    return getattr(logging, level.upper(), logging.INFO)


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)]


def configure_logging(
    *,
    level: str | None = None,
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Level name. Defaults to ``Settings.log_level``.
        json_format: Render one JSON object per event instead of console text.
        log_file: Also append stdlib records to this file.
    """
    numeric_level = _resolve_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_app_context,
            structlog.processors.StackInfoRenderer(),
            *_renderer(json_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=_PLAIN_FORMAT, level=numeric_level, stream=sys.stdout, force=True)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach fields to every later event in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def character_context(name: str, **fields: Any) -> Iterator[None]:
    """Tag events emitted inside the block with the acting character.

    Fields bound here are removed on exit; anything bound earlier survives.
    """
    with structlog.contextvars.bound_contextvars(character=name, **fields):
        yield


__all__ = [
    "APP_TAG",
    "add_app_context",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
