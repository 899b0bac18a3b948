"""
Error taxonomy shared by every SafeChat layer.

Only ``ProtocolViolation`` is recoverable: the connection reports it to
the peer as an ERROR frame and keeps going.  Everything else ends the
offending connection.
"""


class SafeChatError(Exception):
    """Base class for all SafeChat failures."""


class FramingError(SafeChatError):
    """Empty, malformed or oversized frame."""


class ProtocolViolation(SafeChatError):
    """A well-formed frame arrived out of the legal sequence."""


class DuplicateKeyError(ProtocolViolation):
    """An exactly-once key slot was written a second time."""


class CryptoError(SafeChatError):
    """Decryption failed (bad ciphertext or wrong key)."""


class TransportError(SafeChatError):
    """Read or write failure on the underlying stream."""
