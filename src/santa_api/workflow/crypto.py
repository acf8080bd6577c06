"""
Secret Codec

Symmetric at-rest encryption for wish and address text.
AES-256-CBC with a fixed key/IV pair from configuration, PKCS7 padding,
ciphertext stored as base64 text.
"""

import base64
import binascii

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers import modes

from santa_api.workflow.exceptions import CodecError

KEY_LENGTH = 32
IV_LENGTH = 16


def decode_key_material(value: str, expected_length: int, name: str) -> bytes:
    """
    Decode base64 key material and check its length.

    Raises:
        ValueError: If the value is not base64 or has the wrong length
    """
    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"{name} is not valid base64: {e}") from e
    if len(raw) != expected_length:
        raise ValueError(f"{name} must be {expected_length} bytes, got {len(raw)}")
    return raw


class SecretCodec:
    """Encrypts and decrypts short text secrets."""

    def __init__(self, key: bytes, iv: bytes):
        if len(key) != KEY_LENGTH:
            raise ValueError(f"AES key must be {KEY_LENGTH} bytes")
        if len(iv) != IV_LENGTH:
            raise ValueError(f"AES IV must be {IV_LENGTH} bytes")
        self._key = key
        self._iv = iv

    @classmethod
    def from_base64(cls, key_b64: str, iv_b64: str) -> "SecretCodec":
        """Build a codec from base64-encoded key and IV."""
        return cls(
            decode_key_material(key_b64, KEY_LENGTH, "AES key"),
            decode_key_material(iv_b64, IV_LENGTH, "AES IV"),
        )

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def encrypt(self, text: str) -> str:
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(text.encode("utf-8")) + padder.finalize()

        encryptor = self._cipher().encryptor()
        encrypted = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(encrypted).decode("ascii")

    def decrypt(self, token: str) -> str:
        try:
            raw = base64.b64decode(token, validate=True)
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(raw) + decryptor.finalize()

            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except (binascii.Error, ValueError, UnicodeDecodeError) as e:
            raise CodecError(f"Unable to decrypt stored secret: {type(e).__name__}") from e
