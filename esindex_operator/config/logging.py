"""Operator logging: one stdout handler, `extra=` fields rendered as key=value after the message."""

import logging
import sys

from esindex_operator.config.settings import get_settings

# Attributes every LogRecord carries; anything else on a record came from `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

# Set by kopf on its per-object loggers.
_KOPF_ATTRS = frozenset({"k8s_ref", "k8s_skip", "settings"})

_QUIET_LOGGERS = ("urllib3", "opensearch", "kubernetes", "asyncio")


class ExtraFieldsFormatter(logging.Formatter):
    """Appends structured fields, sorted by key, to the formatted line."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and k not in _KOPF_ATTRS}
        if not fields:
            return line
        return line + " | " + " ".join(f"{k}={fields[k]}" for k in sorted(fields))


def configure_logging() -> None:
    """Install the stdout handler at the configured level. Safe to call more than once."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        ExtraFieldsFormatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)
