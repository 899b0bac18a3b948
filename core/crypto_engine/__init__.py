"""
SafeChat Crypto Engine — asymmetric key transport and symmetric
message primitives behind the ``CryptoProvider`` interface.
"""

from .symmetric_base  import SymmetricCipher
from .aes_crypto      import AESGCMCipher
from .rsa_crypto      import RSACrypto
from .crypto_provider import CryptoProvider, DefaultCryptoProvider, KeyPair

__all__ = [
    "SymmetricCipher", "AESGCMCipher", "RSACrypto",
    "CryptoProvider", "DefaultCryptoProvider", "KeyPair",
]
