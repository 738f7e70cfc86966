"""
TOML-based configuration for keystore_core.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from keystore_core.config import load_config
    cfg = load_config("keystore.toml")
    pair = load_keystore(blob, passphrase, settings=cfg.keystore)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from keystore_core.cipher import DEFAULT_PROVIDER
from keystore_core.document import DEFAULT_MAX_ITERATIONS


@dataclass
class KeystoreSettings:
    """Cipher backend and decode-time limits."""
    cipher_provider: str = DEFAULT_PROVIDER
    # Documents asking for more PBKDF2 rounds than this are refused
    # before derivation starts.
    max_iterations: int = DEFAULT_MAX_ITERATIONS


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class KeystoreConfig:
    """Top-level configuration container."""
    keystore: KeystoreSettings = field(default_factory=KeystoreSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def load_config(path: str | None = None) -> KeystoreConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        KEYSTORE_CIPHER_PROVIDER -> keystore.cipher_provider
        KEYSTORE_MAX_ITERATIONS  -> keystore.max_iterations
        KEYSTORE_LOG_LEVEL       -> logging.level
        KEYSTORE_LOG_FMT         -> logging.format
        KEYSTORE_LOG_FILE        -> logging.file
    """
    cfg = KeystoreConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("keystore", cfg.keystore),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("KEYSTORE_CIPHER_PROVIDER"):
        cfg.keystore.cipher_provider = v
    if v := os.environ.get("KEYSTORE_MAX_ITERATIONS"):
        cfg.keystore.max_iterations = int(v)
    if v := os.environ.get("KEYSTORE_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("KEYSTORE_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("KEYSTORE_LOG_FILE"):
        cfg.logging.file = v

    return cfg
