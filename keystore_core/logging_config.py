"""
Logging configuration for keystore_core.

Keystore operations log through the ``keystore_core`` logger and attach
structured fields via ``extra=``:

    operation   "create" or "load"
    cipher      cipher identifier, e.g. "aes-128-ctr"
    kdf         key-derivation identifier, e.g. "pbkdf2"
    c           PBKDF2 iteration count
    outcome     "ok", "bad_passphrase" or "bad_key"

Two output formats render them:
  - **human** – one coloured line, fields appended as ``key=value``
  - **json**  – one JSON object per line, fields as top-level keys

Key bytes, derived keys and passphrases are never passed as fields.

Usage:
    from keystore_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

PACKAGE_LOGGER = "keystore_core"
KEYSTORE_FIELDS = ("operation", "cipher", "kdf", "c", "outcome")


def keystore_fields(record: logging.LogRecord) -> dict[str, Any]:
    """The structured keystore fields present on *record*, in a fixed order."""
    return {name: getattr(record, name) for name in KEYSTORE_FIELDS if hasattr(record, name)}


class KeystoreJSONFormatter(logging.Formatter):
    """Newline-delimited JSON carrying the keystore fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            **keystore_fields(record),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class KeystoreHumanFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: event key=value ...``, level coloured on a TTY."""

    LEVEL_COLOURS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }

    def __init__(self, colour: bool = True):
        super().__init__()
        self.colour = colour

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.colour and record.levelno in self.LEVEL_COLOURS:
            level = f"{self.LEVEL_COLOURS[record.levelno]}{level}\033[0m"
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{ts} {level} {record.name}: {record.getMessage()}"
        fields = keystore_fields(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the ``keystore_core`` logger and return it.

    Parameters
    ----------
    level : str
        One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
    fmt : str
        ``"human"`` or ``"json"`` for the stderr handler.
    log_file : str, optional
        Also append to this file, always as JSON.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        console.setFormatter(KeystoreJSONFormatter())
    else:
        console.setFormatter(KeystoreHumanFormatter(colour=sys.stderr.isatty()))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path))
        fh.setFormatter(KeystoreJSONFormatter())
        logger.addHandler(fh)

    return logger


def setup_logging_from_config(cfg) -> logging.Logger:
    """Apply a :class:`keystore_core.config.LoggingConfig`."""
    return setup_logging(level=cfg.level, fmt=cfg.format, log_file=cfg.file)
