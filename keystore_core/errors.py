"""
Exception hierarchy for keystore_core.

Every failure surfaces as a subclass of :class:`KeystoreError` so callers
can catch the whole family in one place.  Messages never carry key
material or the passphrase.
"""

from __future__ import annotations

from typing import Any


class KeystoreError(Exception):
    """Base class for all keystore failures."""


class FormatError(KeystoreError, ValueError):
    """Document bytes are not valid UTF-8 / JSON, or a field is absent or mistyped."""


class UnsupportedVersionError(KeystoreError):
    """Document version is present but not the one this package reads."""

    def __init__(self, version: Any):
        self.version = version
        super().__init__(f"unsupported keystore version: {version!r}")


class UnsupportedAlgorithmError(KeystoreError):
    """An algorithm identifier or parameter is outside the supported set."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"unsupported {field}: {value!r}")


class BadKeyError(KeystoreError):
    """Key material has a shape this keystore cannot hold."""


class BadPassphraseError(BadKeyError):
    """
    MAC verification failed.

    A wrong passphrase and a tampered or corrupted document are
    deliberately reported the same way.
    """


class EnvironmentCapabilityError(KeystoreError, RuntimeError):
    """A required cryptographic primitive is unavailable in this runtime."""
