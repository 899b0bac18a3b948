from .crypto_engine import (
    AESGCMCipher, RSACrypto, CryptoProvider, DefaultCryptoProvider, KeyPair,
)
from .errors import (
    SafeChatError, FramingError, ProtocolViolation, DuplicateKeyError,
    CryptoError, TransportError,
)

__all__ = [
    "AESGCMCipher", "RSACrypto", "CryptoProvider", "DefaultCryptoProvider",
    "KeyPair",
    "SafeChatError", "FramingError", "ProtocolViolation",
    "DuplicateKeyError", "CryptoError", "TransportError",
]
