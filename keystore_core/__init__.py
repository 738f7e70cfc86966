"""
keystore_core - passphrase-encrypted keystore for Ed25519 signing keys.

Key features:
- PBKDF2-HMAC-SHA256 key stretching (262144 rounds)
- AES-128-CTR encryption behind a pluggable cipher provider
- HMAC-SHA384 integrity tag, verified in constant time before decryption
- Versioned JSON document with strict, fail-closed parsing
"""

from keystore_core.errors import (
    BadKeyError,
    BadPassphraseError,
    EnvironmentCapabilityError,
    FormatError,
    KeystoreError,
    UnsupportedAlgorithmError,
    UnsupportedVersionError,
)
from keystore_core.keys import KeyPair, generate_key_pair
from keystore_core.keystore import (
    create_keystore,
    create_keystore_async,
    load_keystore,
    load_keystore_async,
)

__version__ = "1.0.0"
__all__ = [
    "BadKeyError",
    "BadPassphraseError",
    "EnvironmentCapabilityError",
    "FormatError",
    "KeyPair",
    "KeystoreError",
    "UnsupportedAlgorithmError",
    "UnsupportedVersionError",
    "create_keystore",
    "create_keystore_async",
    "generate_key_pair",
    "load_keystore",
    "load_keystore_async",
]
