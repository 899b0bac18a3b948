"""
Per-connection session state.

The session's data lives in one *stage* object per protocol state, so a
key can only be reached through the stage that established it:

    New  ──hello──▶  HelloSent(keypair)  ──done──▶  KeyEstablished(keypair, key)
     └───────────────────┴──────────close─────────────────┴──▶  Closed
"""

import enum
import time
import logging
from dataclasses import dataclass
from typing import ClassVar, Union

from config.settings    import Settings
from core.crypto_engine import KeyPair
from core.errors        import DuplicateKeyError, ProtocolViolation
from utils.random_gen   import SecureRandom

logger = logging.getLogger("SafeChat.Session")


class SessionState(enum.Enum):
    NEW             = "new"
    HELLO_SENT      = "hello_sent"
    KEY_ESTABLISHED = "key_established"
    CLOSED          = "closed"


@dataclass(frozen=True)
class New:
    state: ClassVar[SessionState] = SessionState.NEW


@dataclass(frozen=True)
class HelloSent:
    state: ClassVar[SessionState] = SessionState.HELLO_SENT
    keypair: KeyPair


@dataclass(frozen=True)
class KeyEstablished:
    state: ClassVar[SessionState] = SessionState.KEY_ESTABLISHED
    keypair: KeyPair
    symmetric_key: bytes

    def __repr__(self) -> str:
        return f"KeyEstablished(keypair={self.keypair!r}, symmetric_key=<hidden>)"


@dataclass(frozen=True)
class Closed:
    state: ClassVar[SessionState] = SessionState.CLOSED


Stage = Union[New, HelloSent, KeyEstablished, Closed]


class Session:
    """State of one client connection.  Never shared between connections."""

    def __init__(self, session_id: str | None = None,
                 key_size: int = Settings.SYM_KEY_SIZE):
        self.session_id = session_id or SecureRandom.generate_session_id()
        self.key_size   = key_size
        self.stage: Stage = New()
        self.created_at = time.time()
        self.frames_received = 0

    @property
    def state(self) -> SessionState:
        return self.stage.state

    @property
    def is_closed(self) -> bool:
        return isinstance(self.stage, Closed)

    def store_keypair(self, keypair: KeyPair):
        """Record the session keypair.  Allowed exactly once, from NEW."""
        if isinstance(self.stage, (HelloSent, KeyEstablished)):
            raise DuplicateKeyError("private key was already set")
        if not isinstance(self.stage, New):
            raise ProtocolViolation(
                f"cannot store keypair in state {self.state.value}"
            )
        self.stage = HelloSent(keypair)
        logger.debug("Session %s → %s", self.session_id, self.state.value)

    def store_symmetric_key(self, key: bytes):
        """Record the symmetric key.  Allowed exactly once, from HELLO_SENT."""
        if isinstance(self.stage, KeyEstablished):
            raise DuplicateKeyError("symmetric key was already set")
        if not isinstance(self.stage, HelloSent):
            raise ProtocolViolation(
                f"cannot store symmetric key in state {self.state.value}"
            )
        if len(key) != self.key_size:
            raise ValueError(
                f"symmetric key must be {self.key_size} bytes, got {len(key)}"
            )
        self.stage = KeyEstablished(self.stage.keypair, bytes(key))
        logger.debug("Session %s → %s", self.session_id, self.state.value)

    def close(self):
        """Drop all key material; CLOSED is terminal."""
        self.stage = Closed()
        logger.debug("Session %s → %s", self.session_id, self.state.value)

    def info(self) -> dict:
        return {
            "session_id":      self.session_id,
            "state":           self.state.value,
            "created":         self.created_at,
            "frames_received": self.frames_received,
        }
