"""
RSA asymmetric encryption and public-key serialisation.
"""

from cryptography.hazmat.primitives.asymmetric import rsa, padding as asym_padding
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.exceptions import UnsupportedAlgorithm

from core.errors import CryptoError


def _oaep() -> asym_padding.OAEP:
    return asym_padding.OAEP(
        mgf=asym_padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


class RSACrypto:
    """RSA-OAEP (SHA-256) encryption."""

    def __init__(self, key_size: int = 2048):
        self.key_size    = key_size
        self.private_key = None
        self.public_key  = None

    # ── key generation ───────────────────────────────────────────
    def generate_keys(self):
        self.private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=self.key_size,
        )
        self.public_key = self.private_key.public_key()
        return self.private_key, self.public_key

    # ── encrypt / decrypt ────────────────────────────────────────
    def encrypt(self, plaintext: bytes, public_key=None) -> bytes:
        key = public_key or self.public_key
        return key.encrypt(plaintext, _oaep())

    def decrypt(self, ciphertext: bytes, private_key=None) -> bytes:
        key = private_key or self.private_key
        try:
            return key.decrypt(ciphertext, _oaep())
        except ValueError as exc:
            raise CryptoError(f"RSA decryption failed: {exc}") from exc

    # ── serialisation ────────────────────────────────────────────
    def export_public_key(self, public_key=None) -> bytes:
        key = public_key or self.public_key
        return key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def load_public_key(self, pem_data: bytes):
        try:
            self.public_key = serialization.load_pem_public_key(pem_data)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise CryptoError(f"invalid public key: {exc}") from exc
        return self.public_key
