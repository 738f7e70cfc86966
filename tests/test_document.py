"""
Tests for keystore_core.document — the persisted JSON record.

Covers:
  - Serialization shape and lowercase hex fields
  - Strict parsing: malformed JSON, missing / mistyped fields
  - Version check ordering
  - Closed algorithm enumerations (cipher, kdf, prf) and parameter limits
  - Hex field validation (iv length, empty salt / ciphertext / mac)
"""

from __future__ import annotations

import copy
import dataclasses
import json
import unittest

from keystore_core.document import (
    CipherAlgorithm,
    CipherParams,
    CryptoSection,
    Kdf,
    KdfParams,
    KeystoreDocument,
)
from keystore_core.errors import (
    FormatError,
    UnsupportedAlgorithmError,
    UnsupportedVersionError,
)
from keystore_core.pbkdf2 import Prf


def _valid() -> dict:
    return {
        "version": 1,
        "crypto": {
            "ciphertext": "ab" * 64,
            "cipherparams": {"iv": "01" * 16},
            "cipher": "aes-128-ctr",
            "kdf": "pbkdf2",
            "kdfparams": {"dkLen": 32, "salt": "02" * 32, "c": 262144, "prf": "hmac-sha256"},
            "mac": "cd" * 48,
        },
    }


class TestSerialize(unittest.TestCase):

    def setUp(self):
        self.doc = KeystoreDocument(
            crypto=CryptoSection(
                ciphertext=b"\xAB" * 4,
                cipherparams=CipherParams(iv=b"\xCD" * 16),
                kdfparams=KdfParams(salt=b"\xEF" * 32),
                mac=b"\x12" * 48,
            ),
        )

    def test_shape(self):
        d = self.doc.to_dict()
        self.assertEqual(d["version"], 1)
        crypto = d["crypto"]
        self.assertEqual(crypto["cipher"], "aes-128-ctr")
        self.assertEqual(crypto["kdf"], "pbkdf2")
        self.assertEqual(
            crypto["kdfparams"],
            {"dkLen": 32, "salt": "ef" * 32, "c": 262144, "prf": "hmac-sha256"},
        )
        self.assertEqual(crypto["cipherparams"], {"iv": "cd" * 16})
        self.assertEqual(crypto["ciphertext"], "abababab")
        self.assertEqual(crypto["mac"], "12" * 48)

    def test_bytes_are_utf8_json(self):
        parsed = json.loads(self.doc.to_bytes().decode("utf-8"))
        self.assertEqual(parsed, self.doc.to_dict())

    def test_parse_back(self):
        self.assertEqual(KeystoreDocument.from_bytes(self.doc.to_bytes()), self.doc)

    def test_immutable(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            self.doc.version = 2


class TestParseValid(unittest.TestCase):

    def test_fields_decoded(self):
        doc = KeystoreDocument.from_dict(_valid())
        self.assertEqual(doc.version, 1)
        self.assertIs(doc.crypto.cipher, CipherAlgorithm.AES_128_CTR)
        self.assertIs(doc.crypto.kdf, Kdf.PBKDF2)
        self.assertIs(doc.crypto.kdfparams.prf, Prf.HMAC_SHA256)
        self.assertEqual(doc.crypto.kdfparams.salt, b"\x02" * 32)
        self.assertEqual(doc.crypto.cipherparams.iv, b"\x01" * 16)
        self.assertEqual(doc.crypto.mac, b"\xcd" * 48)

    def test_uppercase_hex_accepted(self):
        raw = _valid()
        raw["crypto"]["mac"] = "CD" * 48
        self.assertEqual(KeystoreDocument.from_dict(raw).crypto.mac, b"\xcd" * 48)


class TestParseFormatErrors(unittest.TestCase):

    def test_not_json(self):
        with self.assertRaises(FormatError):
            KeystoreDocument.from_bytes(b"{not json")

    def test_not_utf8(self):
        with self.assertRaises(FormatError):
            KeystoreDocument.from_bytes(b"\xff\xff")

    def test_not_object(self):
        with self.assertRaises(FormatError):
            KeystoreDocument.from_bytes(b"[1, 2, 3]")

    def test_missing_version(self):
        raw = _valid()
        del raw["version"]
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_bool_version(self):
        raw = _valid()
        raw["version"] = True
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_string_version(self):
        raw = _valid()
        raw["version"] = "1"
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_missing_fields(self):
        paths = [
            ("crypto",),
            ("crypto", "ciphertext"),
            ("crypto", "cipherparams"),
            ("crypto", "cipherparams", "iv"),
            ("crypto", "cipher"),
            ("crypto", "kdf"),
            ("crypto", "kdfparams"),
            ("crypto", "kdfparams", "dkLen"),
            ("crypto", "kdfparams", "salt"),
            ("crypto", "kdfparams", "c"),
            ("crypto", "kdfparams", "prf"),
            ("crypto", "mac"),
        ]
        for path in paths:
            with self.subTest(path=path):
                raw = _valid()
                node = raw
                for key in path[:-1]:
                    node = node[key]
                del node[path[-1]]
                with self.assertRaises(FormatError):
                    KeystoreDocument.from_dict(raw)

    def test_mistyped_iterations(self):
        raw = _valid()
        raw["crypto"]["kdfparams"]["c"] = "262144"
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_mistyped_crypto(self):
        raw = _valid()
        raw["crypto"] = []
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_bad_hex(self):
        raw = _valid()
        raw["crypto"]["ciphertext"] = "zz"
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_short_iv(self):
        raw = _valid()
        raw["crypto"]["cipherparams"]["iv"] = "01" * 12
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_empty_salt(self):
        raw = _valid()
        raw["crypto"]["kdfparams"]["salt"] = ""
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_empty_ciphertext(self):
        raw = _valid()
        raw["crypto"]["ciphertext"] = ""
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_empty_mac(self):
        raw = _valid()
        raw["crypto"]["mac"] = ""
        with self.assertRaises(FormatError):
            KeystoreDocument.from_dict(raw)

    def test_format_error_is_value_error(self):
        self.assertTrue(issubclass(FormatError, ValueError))


class TestParseUnsupported(unittest.TestCase):

    def test_version_2(self):
        raw = _valid()
        raw["version"] = 2
        with self.assertRaises(UnsupportedVersionError) as ctx:
            KeystoreDocument.from_dict(raw)
        self.assertEqual(ctx.exception.version, 2)

    def test_version_checked_before_crypto_section(self):
        with self.assertRaises(UnsupportedVersionError):
            KeystoreDocument.from_dict({"version": 3})

    def test_scrypt(self):
        raw = _valid()
        raw["crypto"]["kdf"] = "scrypt"
        with self.assertRaises(UnsupportedAlgorithmError) as ctx:
            KeystoreDocument.from_dict(raw)
        self.assertEqual(ctx.exception.field, "kdf")

    def test_hmac_sha512(self):
        raw = _valid()
        raw["crypto"]["kdfparams"]["prf"] = "hmac-sha512"
        with self.assertRaises(UnsupportedAlgorithmError) as ctx:
            KeystoreDocument.from_dict(raw)
        self.assertEqual(ctx.exception.field, "prf")

    def test_other_cipher(self):
        raw = _valid()
        raw["crypto"]["cipher"] = "aes-256-gcm"
        with self.assertRaises(UnsupportedAlgorithmError) as ctx:
            KeystoreDocument.from_dict(raw)
        self.assertEqual(ctx.exception.field, "cipher")

    def test_identifiers_case_sensitive(self):
        raw = _valid()
        raw["crypto"]["kdf"] = "PBKDF2"
        with self.assertRaises(UnsupportedAlgorithmError):
            KeystoreDocument.from_dict(raw)

    def test_dklen_must_be_32(self):
        for dk_len in (16, 31, 64):
            with self.subTest(dk_len=dk_len):
                raw = _valid()
                raw["crypto"]["kdfparams"]["dkLen"] = dk_len
                with self.assertRaises(UnsupportedAlgorithmError):
                    KeystoreDocument.from_dict(raw)

    def test_zero_iterations(self):
        raw = _valid()
        raw["crypto"]["kdfparams"]["c"] = 0
        with self.assertRaises(UnsupportedAlgorithmError):
            KeystoreDocument.from_dict(raw)

    def test_iteration_ceiling(self):
        raw = _valid()
        raw["crypto"]["kdfparams"]["c"] = 1_000_000
        with self.assertRaises(UnsupportedAlgorithmError):
            KeystoreDocument.from_dict(raw, max_iterations=500_000)
        doc = KeystoreDocument.from_dict(copy.deepcopy(raw), max_iterations=1_000_000)
        self.assertEqual(doc.crypto.kdfparams.c, 1_000_000)

    def test_algorithm_checked_before_hex(self):
        raw = _valid()
        raw["crypto"]["kdf"] = "scrypt"
        raw["crypto"]["mac"] = "not hex"
        with self.assertRaises(UnsupportedAlgorithmError):
            KeystoreDocument.from_dict(raw)


if __name__ == "__main__":
    unittest.main()
