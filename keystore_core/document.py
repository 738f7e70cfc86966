"""
Keystore document model.

The persisted record is UTF-8 JSON shaped as::

    {
      "version": 1,
      "crypto": {
        "ciphertext": "<hex>",
        "cipherparams": {"iv": "<hex>"},
        "cipher": "aes-128-ctr",
        "kdf": "pbkdf2",
        "kdfparams": {"dkLen": 32, "salt": "<hex>", "c": 262144, "prf": "hmac-sha256"},
        "mac": "<hex>"
      }
    }

Parsing is strict: the version is checked first, then every algorithm
identifier is mapped onto a closed enumeration, and only then are the
binary fields hex-decoded.  Nothing here performs cryptography.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from keystore_core.cipher import IV_LENGTH
from keystore_core.encoding import hex_decode, hex_encode, utf8_decode, utf8_encode
from keystore_core.errors import (
    FormatError,
    UnsupportedAlgorithmError,
    UnsupportedVersionError,
)
from keystore_core.pbkdf2 import Prf

KEYSTORE_VERSION = 1
DK_LEN = 32                  # split 16 (encryption) + 16 (authentication)
DEFAULT_ITERATIONS = 262144
DEFAULT_MAX_ITERATIONS = 10_000_000


class CipherAlgorithm(Enum):
    AES_128_CTR = "aes-128-ctr"


class Kdf(Enum):
    PBKDF2 = "pbkdf2"


def _parse_enum(enum_cls: type[Enum], field: str, value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        raise UnsupportedAlgorithmError(field, value) from None


def _require(obj: dict, key: str, kind: type | tuple[type, ...], path: str) -> Any:
    if key not in obj:
        raise FormatError(f"missing field: {path}{key}")
    value = obj[key]
    # bool is an int subclass; JSON true/false is never a valid number here
    if isinstance(value, bool) or not isinstance(value, kind):
        raise FormatError(f"field {path}{key} has the wrong type")
    return value


@dataclass(frozen=True)
class KdfParams:
    salt: bytes
    c: int = DEFAULT_ITERATIONS
    dk_len: int = DK_LEN
    prf: Prf = Prf.HMAC_SHA256

    def to_dict(self) -> dict:
        return {
            "dkLen": self.dk_len,
            "salt": hex_encode(self.salt),
            "c": self.c,
            "prf": self.prf.value,
        }


@dataclass(frozen=True)
class CipherParams:
    iv: bytes

    def to_dict(self) -> dict:
        return {"iv": hex_encode(self.iv)}


@dataclass(frozen=True)
class CryptoSection:
    ciphertext: bytes
    cipherparams: CipherParams
    kdfparams: KdfParams
    mac: bytes
    cipher: CipherAlgorithm = CipherAlgorithm.AES_128_CTR
    kdf: Kdf = Kdf.PBKDF2

    def to_dict(self) -> dict:
        return {
            "ciphertext": hex_encode(self.ciphertext),
            "cipherparams": self.cipherparams.to_dict(),
            "cipher": self.cipher.value,
            "kdf": self.kdf.value,
            "kdfparams": self.kdfparams.to_dict(),
            "mac": hex_encode(self.mac),
        }


@dataclass(frozen=True)
class KeystoreDocument:
    """An immutable keystore record."""
    crypto: CryptoSection
    version: int = KEYSTORE_VERSION

    def to_dict(self) -> dict:
        return {"version": self.version, "crypto": self.crypto.to_dict()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_bytes(self) -> bytes:
        return utf8_encode(self.to_json())

    @classmethod
    def from_bytes(cls, data: bytes,
                   max_iterations: int = DEFAULT_MAX_ITERATIONS) -> KeystoreDocument:
        """Parse UTF-8 JSON bytes; see :meth:`from_dict`."""
        text = utf8_decode(data)
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FormatError("keystore is not valid JSON") from exc
        return cls.from_dict(raw, max_iterations=max_iterations)

    @classmethod
    def from_dict(cls, raw: Any,
                  max_iterations: int = DEFAULT_MAX_ITERATIONS) -> KeystoreDocument:
        """
        Validate and decode a parsed document.

        Order matters: version, then algorithm identifiers and parameter
        limits, then hex fields.  Raises FormatError,
        UnsupportedVersionError or UnsupportedAlgorithmError.
        """
        if not isinstance(raw, dict):
            raise FormatError("keystore must be a JSON object")

        version = _require(raw, "version", int, "")
        if version != KEYSTORE_VERSION:
            raise UnsupportedVersionError(version)

        crypto = _require(raw, "crypto", dict, "")
        ciphertext_hex = _require(crypto, "ciphertext", str, "crypto.")
        cipherparams = _require(crypto, "cipherparams", dict, "crypto.")
        iv_hex = _require(cipherparams, "iv", str, "crypto.cipherparams.")
        cipher_id = _require(crypto, "cipher", str, "crypto.")
        kdf_id = _require(crypto, "kdf", str, "crypto.")
        kdfparams = _require(crypto, "kdfparams", dict, "crypto.")
        dk_len = _require(kdfparams, "dkLen", int, "crypto.kdfparams.")
        salt_hex = _require(kdfparams, "salt", str, "crypto.kdfparams.")
        c = _require(kdfparams, "c", int, "crypto.kdfparams.")
        prf_id = _require(kdfparams, "prf", str, "crypto.kdfparams.")
        mac_hex = _require(crypto, "mac", str, "crypto.")

        kdf = _parse_enum(Kdf, "kdf", kdf_id)
        prf = Prf.parse(prf_id)
        cipher = _parse_enum(CipherAlgorithm, "cipher", cipher_id)
        if dk_len != DK_LEN:
            raise UnsupportedAlgorithmError("dkLen", dk_len)
        if c < 1 or c > max_iterations:
            raise UnsupportedAlgorithmError("c", c)

        salt = hex_decode(salt_hex, "crypto.kdfparams.salt")
        iv = hex_decode(iv_hex, "crypto.cipherparams.iv")
        ciphertext = hex_decode(ciphertext_hex, "crypto.ciphertext")
        mac = hex_decode(mac_hex, "crypto.mac")
        if not salt:
            raise FormatError("crypto.kdfparams.salt is empty")
        if len(iv) != IV_LENGTH:
            raise FormatError(f"crypto.cipherparams.iv must be {IV_LENGTH} bytes")
        if not ciphertext:
            raise FormatError("crypto.ciphertext is empty")
        if not mac:
            raise FormatError("crypto.mac is empty")

        return cls(
            version=version,
            crypto=CryptoSection(
                ciphertext=ciphertext,
                cipherparams=CipherParams(iv=iv),
                kdfparams=KdfParams(salt=salt, c=c, dk_len=dk_len, prf=prf),
                mac=mac,
                cipher=cipher,
                kdf=kdf,
            ),
        )
