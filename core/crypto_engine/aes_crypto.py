"""
AES-GCM symmetric encryption for established sessions.
"""

import os
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.exceptions import InvalidTag

from core.errors import CryptoError
from .symmetric_base import SymmetricCipher


class AESGCMCipher(SymmetricCipher):
    """
    AES in Galois/Counter Mode (authenticated encryption).

    Output format:  [nonce 12B][ciphertext + GCM tag 16B]
    """
    NONCE_SIZE = 12
    TAG_SIZE   = 16

    def __init__(self, key: bytes):
        if len(key) not in (16, 24, 32):
            raise ValueError(
                f"AES key must be 16, 24, or 32 bytes, got {len(key)}"
            )
        self._key    = key
        self._aesgcm = AESGCM(key)

    def encrypt(self, plaintext: bytes) -> bytes:
        nonce = os.urandom(self.NONCE_SIZE)
        ct    = self._aesgcm.encrypt(nonce, plaintext, None)
        return nonce + ct                       # nonce ‖ ct+tag

    def decrypt(self, data: bytes) -> bytes:
        if len(data) < self.NONCE_SIZE + self.TAG_SIZE:
            raise CryptoError(
                f"ciphertext too short: {len(data)} bytes"
            )
        nonce = data[:self.NONCE_SIZE]
        ct    = data[self.NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, ct, None)
        except InvalidTag as exc:
            raise CryptoError(
                "AES-GCM authentication failed: wrong key or tampered data"
            ) from exc

    @property
    def cipher_name(self) -> str:
        return f"AES-{len(self._key) * 8}-GCM"

    @property
    def key_size(self) -> int:
        return len(self._key)
