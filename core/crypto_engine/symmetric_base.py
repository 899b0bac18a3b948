"""
Abstract base class for the symmetric cipher used by a SafeChat session.

encrypt() returns a self-contained blob (nonce + ciphertext_with_tag for
AEAD ciphers); decrypt() accepts that blob and returns plaintext.
"""

from abc import ABC, abstractmethod


class SymmetricCipher(ABC):
    """Unified interface for symmetric encryption."""

    @abstractmethod
    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt plaintext → self-contained encrypted blob."""

    @abstractmethod
    def decrypt(self, data: bytes) -> bytes:
        """Decrypt blob produced by encrypt() → plaintext."""

    @property
    @abstractmethod
    def cipher_name(self) -> str:
        """Human-readable name, e.g. 'AES-256-GCM'."""

    @property
    @abstractmethod
    def key_size(self) -> int:
        """Encryption key size in bytes."""

    @property
    def key_size_bits(self) -> int:
        return self.key_size * 8
