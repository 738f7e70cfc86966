"""
AES-128-CTR symmetric cipher behind a provider interface.

The keystore core never imports a cipher library directly: it asks the
registry for a :class:`CipherProvider`.  A provider whose backing library
is missing raises :class:`EnvironmentCapabilityError` when it is requested,
so encryption fails loudly instead of producing weak or empty output.

CTR mode uses the whole 16-byte IV as the initial 128-bit big-endian
counter, matching OpenSSL's ``aes-128-ctr``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from keystore_core.errors import EnvironmentCapabilityError

logger = logging.getLogger("keystore_core.cipher")

KEY_LENGTH = 16
IV_LENGTH = 16

DEFAULT_PROVIDER = "pycryptodome"


class CipherProvider(ABC):
    """AES-128-CTR encrypt / decrypt.  Output length always equals input length."""

    name: str = ""

    @abstractmethod
    def _transform(self, key: bytes, iv: bytes, data: bytes) -> bytearray:
        """Apply the CTR keystream for (*key*, *iv*) to *data* into a fresh bytearray."""

    def encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytearray:
        _check_params(key, iv)
        return self._transform(key, iv, plaintext)

    def decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytearray:
        """Recovered plaintext lands in a bytearray so the caller can wipe it."""
        # CTR is symmetric
        _check_params(key, iv)
        return self._transform(key, iv, ciphertext)


def _check_params(key: bytes, iv: bytes) -> None:
    if len(key) != KEY_LENGTH:
        raise ValueError(f"AES-128 key must be {KEY_LENGTH} bytes")
    if len(iv) != IV_LENGTH:
        raise ValueError(f"CTR IV must be {IV_LENGTH} bytes")


class PyCryptodomeProvider(CipherProvider):
    """AES-128-CTR backed by pycryptodome's ``Crypto.Cipher.AES``."""

    name = "pycryptodome"

    def __init__(self):
        try:
            from Crypto.Cipher import AES
        except ImportError as exc:
            raise EnvironmentCapabilityError(
                "pycryptodome is not installed; AES-128-CTR is unavailable"
            ) from exc
        self._aes = AES

    def _transform(self, key: bytes, iv: bytes, data: bytes) -> bytearray:
        out = bytearray(len(data))
        if out:
            cipher = self._aes.new(
                key, self._aes.MODE_CTR, nonce=b"", initial_value=iv,
            )
            cipher.encrypt(data, output=out)
        return out


_PROVIDERS: dict[str, type[CipherProvider]] = {
    PyCryptodomeProvider.name: PyCryptodomeProvider,
}


def register_provider(provider_cls: type[CipherProvider]) -> None:
    """Make *provider_cls* selectable by its ``name``."""
    if not provider_cls.name:
        raise ValueError("provider class must define a name")
    _PROVIDERS[provider_cls.name] = provider_cls


def available_providers() -> list[str]:
    return sorted(_PROVIDERS)


def get_provider(name: str = DEFAULT_PROVIDER) -> CipherProvider:
    """
    Instantiate the provider registered under *name*.

    Raises EnvironmentCapabilityError when no such provider exists or its
    library cannot be loaded in this runtime.
    """
    provider_cls = _PROVIDERS.get(name)
    if provider_cls is None:
        raise EnvironmentCapabilityError(
            f"no cipher provider named {name!r}; available: {available_providers()}"
        )
    provider = provider_cls()
    logger.debug(f"Using cipher provider: {name}")
    return provider
