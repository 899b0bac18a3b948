"""
Crypto collaborator consumed by the session protocol.

The protocol layers never touch RSA or AES directly; they go through a
``CryptoProvider`` so the primitives can be swapped as long as the
capability contract holds:

* generate an asymmetric keypair
* marshal a public key to bytes
* decrypt bytes with a private key
* encrypt / decrypt bytes with a 32-byte symmetric key

Client-side helpers (load a marshaled public key, encrypt with it) live
on the same interface so both ends share one implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from config.settings import Settings
from .aes_crypto import AESGCMCipher
from .rsa_crypto import RSACrypto


@dataclass(frozen=True)
class KeyPair:
    """Asymmetric keypair owned by exactly one session."""

    public_key: Any
    private_key: Any = None

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key!r}, private_key=<hidden>)"


class CryptoProvider(ABC):

    @abstractmethod
    def generate_keypair(self) -> KeyPair:
        """Return a fresh keypair."""

    @abstractmethod
    def marshal_public_key(self, public_key) -> bytes:
        """Serialise *public_key* for the wire."""

    @abstractmethod
    def load_public_key(self, data: bytes):
        """Inverse of marshal_public_key()."""

    @abstractmethod
    def encrypt_asymmetric(self, public_key, plaintext: bytes) -> bytes:
        ...

    @abstractmethod
    def decrypt_asymmetric(self, private_key, ciphertext: bytes) -> bytes:
        ...

    @abstractmethod
    def encrypt_symmetric(self, key: bytes, plaintext: bytes) -> bytes:
        ...

    @abstractmethod
    def decrypt_symmetric(self, key: bytes, ciphertext: bytes) -> bytes:
        ...


class DefaultCryptoProvider(CryptoProvider):
    """RSA-OAEP for key transport, AES-256-GCM for messages."""

    def __init__(self, rsa_key_size: int = Settings.RSA_KEY_SIZE):
        self.rsa_key_size = rsa_key_size

    def generate_keypair(self) -> KeyPair:
        private_key, public_key = RSACrypto(self.rsa_key_size).generate_keys()
        return KeyPair(public_key=public_key, private_key=private_key)

    def marshal_public_key(self, public_key) -> bytes:
        return RSACrypto().export_public_key(public_key)

    def load_public_key(self, data: bytes):
        return RSACrypto().load_public_key(data)

    def encrypt_asymmetric(self, public_key, plaintext: bytes) -> bytes:
        return RSACrypto().encrypt(plaintext, public_key)

    def decrypt_asymmetric(self, private_key, ciphertext: bytes) -> bytes:
        return RSACrypto().decrypt(ciphertext, private_key)

    def encrypt_symmetric(self, key: bytes, plaintext: bytes) -> bytes:
        return AESGCMCipher(key).encrypt(plaintext)

    def decrypt_symmetric(self, key: bytes, ciphertext: bytes) -> bytes:
        return AESGCMCipher(key).decrypt(ciphertext)
