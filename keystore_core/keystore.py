"""
Passphrase-protected keystore: create and load.

create_keystore
    PBKDF2-HMAC-SHA256 (262144 rounds) turns the passphrase and a fresh
    32-byte salt into a 32-byte key.  The first half encrypts the private
    key with AES-128-CTR under a fresh 16-byte IV; the second half
    authenticates the ciphertext with HMAC-SHA384.

load_keystore
    Validates the document, re-derives the key, verifies the MAC in
    constant time and only then decrypts.  A wrong passphrase and a
    tampered document both raise BadPassphraseError.

The async variants run the same work on a worker thread so an event loop
stays responsive while PBKDF2 grinds.

Usage:
    from keystore_core.keystore import create_keystore, load_keystore
    blob = create_keystore(private_key, "passphrase")
    pair = load_keystore(blob, "passphrase")
"""

from __future__ import annotations

import asyncio
import logging
import os

from keystore_core import mac
from keystore_core.cipher import IV_LENGTH, KEY_LENGTH, CipherProvider, get_provider
from keystore_core.config import KeystoreSettings
from keystore_core.document import (
    DEFAULT_ITERATIONS,
    DK_LEN,
    CipherParams,
    CryptoSection,
    KdfParams,
    KeystoreDocument,
)
from keystore_core.errors import BadKeyError, BadPassphraseError
from keystore_core.keys import KeyPair, check_private_key, key_pair_from_private_key
from keystore_core.mac import HashAlgorithm
from keystore_core.pbkdf2 import Prf, derive_key

logger = logging.getLogger("keystore_core")

SALT_LENGTH = 32
MAC_ALGORITHM = HashAlgorithm.SHA384


def _resolve_provider(provider: CipherProvider | None,
                      settings: KeystoreSettings | None) -> CipherProvider:
    if provider is not None:
        return provider
    if settings is not None:
        return get_provider(settings.cipher_provider)
    return get_provider()


def _wipe(*buffers: bytearray) -> None:
    for buf in buffers:
        for i in range(len(buf)):
            buf[i] = 0


def _check_passphrase(passphrase: str) -> None:
    if not isinstance(passphrase, str):
        raise TypeError("passphrase must be a str")
    try:
        passphrase.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates have no UTF-8 form
        raise ValueError("passphrase is not encodable as UTF-8") from None


# ── encode ───────────────────────────────────────────────────────

def create_keystore(private_key: bytes, passphrase: str, *,
                    provider: CipherProvider | None = None,
                    settings: KeystoreSettings | None = None) -> bytes:
    """
    Encrypt *private_key* under *passphrase* and return the document bytes.

    Every call draws a new salt and IV, so two documents for the same
    key never match, yet both load back to the same bytes.
    """
    check_private_key(private_key)
    _check_passphrase(passphrase)
    cipher = _resolve_provider(provider, settings)

    salt = os.urandom(SALT_LENGTH)
    iv = os.urandom(IV_LENGTH)
    kdfparams = KdfParams(salt=salt, c=DEFAULT_ITERATIONS, dk_len=DK_LEN, prf=Prf.HMAC_SHA256)

    derived = bytearray(
        derive_key(kdfparams.prf, passphrase, salt, kdfparams.c, kdfparams.dk_len)
    )
    enc_key, auth_key = derived[:KEY_LENGTH], derived[KEY_LENGTH:]
    try:
        ciphertext = bytes(cipher.encrypt(enc_key, iv, private_key))
        tag = mac.digest(MAC_ALGORITHM, auth_key, ciphertext)
    finally:
        _wipe(derived, enc_key, auth_key)

    crypto = CryptoSection(
        ciphertext=ciphertext,
        cipherparams=CipherParams(iv=iv),
        kdfparams=kdfparams,
        mac=tag,
    )
    logger.debug("Keystore created", extra={
        "operation": "create", "cipher": crypto.cipher.value,
        "kdf": crypto.kdf.value, "c": kdfparams.c, "outcome": "ok",
    })
    return KeystoreDocument(crypto=crypto).to_bytes()


# ── decode ───────────────────────────────────────────────────────

def load_keystore(keystore_bytes: bytes, passphrase: str, *,
                  provider: CipherProvider | None = None,
                  settings: KeystoreSettings | None = None) -> KeyPair:
    """
    Decrypt a keystore produced by :func:`create_keystore`.

    Raises FormatError, UnsupportedVersionError or UnsupportedAlgorithmError
    for documents this package cannot read, and BadPassphraseError when
    the MAC does not verify.  Nothing is decrypted before the MAC checks out.
    """
    _check_passphrase(passphrase)
    limits = settings or KeystoreSettings()
    document = KeystoreDocument.from_bytes(keystore_bytes, max_iterations=limits.max_iterations)
    cipher = _resolve_provider(provider, settings)

    crypto = document.crypto
    params = crypto.kdfparams
    fields = {"operation": "load", "cipher": crypto.cipher.value,
              "kdf": crypto.kdf.value, "c": params.c}
    derived = bytearray(
        derive_key(params.prf, passphrase, params.salt, params.c, params.dk_len)
    )
    enc_key, auth_key = derived[:KEY_LENGTH], derived[KEY_LENGTH:]
    try:
        expected = mac.digest(MAC_ALGORITHM, auth_key, crypto.ciphertext)
        if not mac.verify(expected, crypto.mac):
            logger.warning("Keystore MAC mismatch",
                           extra={**fields, "outcome": "bad_passphrase"})
            raise BadPassphraseError("HMAC mismatch; passphrase is incorrect")
        plaintext = cipher.decrypt(enc_key, crypto.cipherparams.iv, crypto.ciphertext)
    finally:
        _wipe(derived, enc_key, auth_key)

    try:
        key_pair = key_pair_from_private_key(plaintext)
    except BadKeyError:
        logger.warning("Keystore holds unsupported key material",
                       extra={**fields, "outcome": "bad_key"})
        raise
    finally:
        _wipe(plaintext)
    logger.debug("Keystore loaded", extra={**fields, "outcome": "ok"})
    return key_pair


# ── async wrappers ───────────────────────────────────────────────

async def create_keystore_async(private_key: bytes, passphrase: str, *,
                                provider: CipherProvider | None = None,
                                settings: KeystoreSettings | None = None) -> bytes:
    return await asyncio.to_thread(
        create_keystore, private_key, passphrase, provider=provider, settings=settings,
    )


async def load_keystore_async(keystore_bytes: bytes, passphrase: str, *,
                              provider: CipherProvider | None = None,
                              settings: KeystoreSettings | None = None) -> KeyPair:
    return await asyncio.to_thread(
        load_keystore, keystore_bytes, passphrase, provider=provider, settings=settings,
    )
