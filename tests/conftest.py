"""
Shared pytest fixtures for the keystore_core test suite.
"""

import pytest

from keystore_core.cipher import CipherProvider
from keystore_core.keystore import create_keystore

PASSPHRASE = "correct horse battery staple"
ZERO_KEY = b"\x00" * 64


class XorProvider(CipherProvider):
    """Stand-in cipher: XOR with a key/iv derived pad.  Records every call."""

    name = "xor-test"

    def __init__(self):
        self.calls: list[str] = []

    def encrypt(self, key, iv, plaintext):
        self.calls.append("encrypt")
        return super().encrypt(key, iv, plaintext)

    def decrypt(self, key, iv, ciphertext):
        self.calls.append("decrypt")
        return super().decrypt(key, iv, ciphertext)

    def _transform(self, key, iv, data):
        pad = bytes(key) + bytes(iv)
        return bytearray(b ^ pad[i % len(pad)] for i, b in enumerate(data))


@pytest.fixture
def xor_provider():
    return XorProvider()


@pytest.fixture(scope="session")
def zero_keystore():
    """One keystore for 64 zero bytes, shared because PBKDF2 is slow."""
    return create_keystore(ZERO_KEY, PASSPHRASE)
