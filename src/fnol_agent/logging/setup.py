"""Loguru configuration shared by the API server and the batch runner.

Every record carries a ``request_id`` extra (``"-"`` outside an HTTP request,
set by ``RequestLoggingMiddleware`` inside one), so the decode, extraction and
routing lines written for a single upload can be grouped. Records forwarded
from the standard library keep their original logger name, and the chattier
third-party libraries are only let through from WARNING up.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from omegaconf import DictConfig

NO_REQUEST = "-"

_PRETTY_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# PyPDF2 reports every repaired xref table of a scanned form
_CHATTY_PREFIXES = ("PyPDF2", "multipart", "python_multipart", "httpx", "httpcore")
_CHATTY_MIN_LEVEL = logger.level("WARNING").no


def _drop_library_chatter(record: dict[str, Any]) -> bool:
    name = record["name"] or ""
    if name.startswith(_CHATTY_PREFIXES):
        return record["level"].no >= _CHATTY_MIN_LEVEL
    return True


class _StdlibBridge(logging.Handler):
    """Forward ``logging`` records (uvicorn, hydra, PyPDF2) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.patch(
            lambda r: r.update(name=record.name, function=record.funcName, line=record.lineno)
        ).opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logging(cfg: DictConfig) -> None:
    """Install the single loguru sink described by the ``logging`` section.

    Parameters
    ----------
    cfg:
        Sub-config with keys ``level``, ``colored`` and ``format``; ``format``
        is ``"pretty"`` (colored console) or ``"structured"`` (JSON lines, the
        request id lands in ``record.extra``).
    """
    level = str(cfg.get("level", "INFO")).upper()
    structured = cfg.get("format", "pretty") == "structured"

    sink: dict[str, Any] = {
        "sink": sys.stderr,
        "level": level,
        "filter": _drop_library_chatter,
    }
    if structured:
        sink.update(serialize=True)
    else:
        sink.update(format=_PRETTY_FORMAT, colorize=bool(cfg.get("colored", True)))

    logger.configure(handlers=[sink], extra={"request_id": NO_REQUEST})
    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)

    logger.debug(
        "Logging configured (level={level}, structured={structured})",
        level=level,
        structured=structured,
    )
