"""
Ed25519 key pairs held in a keystore.

Private key material is accepted in the two layouts NaCl uses: the
32-byte seed, or the 64-byte secret key (seed followed by public key).
The public key is always recomputed from the seed.
"""

from __future__ import annotations

from dataclasses import dataclass

from nacl.signing import SigningKey

from keystore_core.errors import BadKeyError

SEED_LENGTH = 32
SECRET_KEY_LENGTH = 64
PRIVATE_KEY_LENGTHS = (SEED_LENGTH, SECRET_KEY_LENGTH)


def check_private_key(private_key: bytes) -> None:
    """Raise BadKeyError unless *private_key* is bytes-like of a supported length.

    Validates in place; no copy of the key material is made.
    """
    if not isinstance(private_key, (bytes, bytearray, memoryview)):
        raise BadKeyError("private key must be bytes")
    if len(private_key) not in PRIVATE_KEY_LENGTHS:
        raise BadKeyError(
            f"private key must be {SEED_LENGTH} or {SECRET_KEY_LENGTH} bytes, got {len(private_key)}"
        )


def derive_public_key(private_key: bytes) -> bytes:
    check_private_key(private_key)
    seed = bytes(private_key[:SEED_LENGTH])
    return bytes(SigningKey(seed).verify_key)


@dataclass(frozen=True)
class KeyPair:
    """A recovered signing key pair."""
    private_key: bytes
    public_key: bytes

    @property
    def seed(self) -> bytes:
        return self.private_key[:SEED_LENGTH]

    def to_dict(self) -> dict:
        # never serialize the private half
        return {"public_key": self.public_key.hex()}

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key.hex()})"


def key_pair_from_private_key(private_key: bytes) -> KeyPair:
    check_private_key(private_key)
    return KeyPair(private_key=bytes(private_key), public_key=derive_public_key(private_key))


def generate_key_pair() -> KeyPair:
    """Fresh Ed25519 pair with the 64-byte secret key layout."""
    sk = SigningKey.generate()
    public_key = bytes(sk.verify_key)
    return KeyPair(private_key=bytes(sk) + public_key, public_key=public_key)
