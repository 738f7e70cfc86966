"""
Keyed-hash primitive (HMAC).

Used two ways by the keystore: HMAC-SHA-256 is the pseudorandom function
inside PBKDF2, and HMAC-SHA-384 authenticates the ciphertext.
"""

from __future__ import annotations

import hashlib
import hmac
from enum import Enum


class HashAlgorithm(Enum):
    SHA256 = "sha256"
    SHA384 = "sha384"

    @property
    def digest_size(self) -> int:
        return hashlib.new(self.value).digest_size


def digest(algorithm: HashAlgorithm, key: bytes, message: bytes) -> bytes:
    """HMAC of *message* under *key*; output length is fixed per algorithm."""
    return hmac.new(key, message, algorithm.value).digest()


def verify(expected: bytes, actual: bytes) -> bool:
    """
    Constant-time tag comparison.

    Inspects every byte regardless of where the first difference is;
    tags of different length compare unequal.
    """
    return hmac.compare_digest(bytes(expected), bytes(actual))
