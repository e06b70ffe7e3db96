"""Structured logging for termindex.

Records are written to stderr; stdout is reserved for command results so
that ``termindex query ... | jq`` keeps working with logging enabled.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
from typing import Any

import orjson


_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}
_PACKAGE_PREFIX = "termindex."


class JsonFormatter(logging.Formatter):
    """Render each record as a single orjson object.

    Attributes passed with ``extra=`` are copied into the object. Index logs
    tend to carry term and document id collections, so long strings and
    collections are clipped, and sets are emitted sorted.
    """

    MAX_MESSAGE_LEN = 2000
    MAX_EXTRA_CHARS = 500
    MAX_EXTRA_ITEMS = 50

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": record.name.removeprefix(_PACKAGE_PREFIX),
            "message": _clip_text(record.getMessage(), self.MAX_MESSAGE_LEN),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            entry[key] = self._clip(value)

        return orjson.dumps(entry, default=str).decode("utf-8")

    def _clip(self, value: Any) -> Any:
        if isinstance(value, str):
            return _clip_text(value, self.MAX_EXTRA_CHARS)
        if isinstance(value, (set, frozenset)):
            value = sorted(value, key=str)
        if isinstance(value, (list, tuple)):
            return [self._clip(item) for item in value[: self.MAX_EXTRA_ITEMS]]
        if isinstance(value, Path):
            return str(value)
        return value


def _clip_text(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: Mapping[str, str] | None = None,
) -> None:
    """Install one stderr handler on the root logger.

    Args:
        level: Root log level name, case-insensitive
        json_output: Use ``JsonFormatter`` instead of the plain text format
        logger_levels: Level overrides keyed by logger name, e.g.
            ``{"termindex.index.reader": "error"}``
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(handler)

    for logger_name, logger_level in (logger_levels or {}).items():
        logging.getLogger(logger_name).setLevel(getattr(logging, logger_level.upper(), logging.INFO))
