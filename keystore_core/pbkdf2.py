"""
PBKDF2 password-based key derivation (RFC 8018).

Stretches a passphrase and salt into a fixed-length key.  The iteration
loop runs inside ``hashlib.pbkdf2_hmac``; this module only maps the
document's ``prf`` identifier onto a :class:`keystore_core.mac.HashAlgorithm`
and hands its name to hashlib.

Usage:
    from keystore_core.pbkdf2 import Prf, derive_key
    key = derive_key(Prf.HMAC_SHA256, "passphrase", salt, 262144, 32)
"""

from __future__ import annotations

import hashlib
from enum import Enum

from keystore_core.errors import UnsupportedAlgorithmError
from keystore_core.mac import HashAlgorithm


class Prf(Enum):
    """Pseudorandom functions accepted in ``kdfparams.prf``."""
    HMAC_SHA256 = "hmac-sha256"

    @property
    def hash_algorithm(self) -> HashAlgorithm:
        return _PRF_HASHES[self]

    @classmethod
    def parse(cls, value: object) -> Prf:
        """Map an identifier to a member or raise UnsupportedAlgorithmError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedAlgorithmError("prf", value) from None


_PRF_HASHES = {
    Prf.HMAC_SHA256: HashAlgorithm.SHA256,
}


def derive_key(prf: Prf | str, passphrase: str, salt: bytes,
               iterations: int, dk_len: int) -> bytes:
    """
    Derive *dk_len* bytes from *passphrase* and *salt*.

    Deterministic: identical inputs always give identical output.  The
    PRF is resolved before any hashing so an unknown identifier fails fast.
    *passphrase* is UTF-8 encoded; a string holding lone surrogates raises
    UnicodeEncodeError here (keystore.create_keystore and load_keystore
    turn that into ValueError before calling in).
    """
    algorithm = Prf.parse(prf).hash_algorithm
    if iterations < 1:
        raise ValueError("iterations must be positive")
    if dk_len < 1:
        raise ValueError("dk_len must be positive")
    return hashlib.pbkdf2_hmac(
        algorithm.value,
        passphrase.encode("utf-8"),
        bytes(salt),
        iterations,
        dk_len,
    )
