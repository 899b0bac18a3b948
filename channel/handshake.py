"""
Hybrid handshake: RSA bootstraps transport of a symmetric key.

Flow
----
1. Client  → CLIENT_HELLO  (empty)
2. Server  → SERVER_HELLO  (server public key, PEM)
3. Client  → CLIENT_DONE   (symmetric key encrypted under that public key)
4. Server  → SERVER_DONE   (empty)

The decrypted key is copied into a fixed 32-byte slot: shorter keys are
zero-padded on the right, longer ones truncated.  No KDF is applied, so
both peers end up with exactly the bytes the client sent.
"""

import time
import logging

from config.settings    import Settings
from core.crypto_engine import CryptoProvider
from core.errors        import DuplicateKeyError, ProtocolViolation
from utils.framing      import Frame, MessageType
from .session           import Session, New, HelloSent, KeyEstablished

logger = logging.getLogger("SafeChat.Handshake")

HELLO_TWICE = "client hello failed: received hello request twice"


def fit_symmetric_key(plaintext: bytes,
                      size: int = Settings.SYM_KEY_SIZE) -> bytes:
    """Right-pad with zeros or truncate *plaintext* to *size* bytes."""
    return bytes(plaintext[:size]).ljust(size, b"\x00")


class HandshakeProtocol:
    """Server side of the key-establishment steps."""

    def __init__(self, crypto: CryptoProvider,
                 ack_delay: float = Settings.DONE_ACK_DELAY,
                 sleep=time.sleep):
        self.crypto    = crypto
        self.ack_delay = ack_delay
        self._sleep    = sleep

    # ── step 1: hello ────────────────────────────────────────────
    def client_hello(self, session: Session) -> Frame:
        if not isinstance(session.stage, New):
            logger.warning("Session %s received hello request twice",
                           session.session_id)
            raise DuplicateKeyError(HELLO_TWICE)

        keypair = self.crypto.generate_keypair()
        session.store_keypair(keypair)
        public_bytes = self.crypto.marshal_public_key(keypair.public_key)

        logger.info("Session %s: client hello, sent %d-byte public key",
                    session.session_id, len(public_bytes))
        return Frame(MessageType.SERVER_HELLO, public_bytes)

    # ── step 2: encrypted symmetric key ──────────────────────────
    def client_done(self, session: Session, body: bytes) -> Frame:
        stage = session.stage
        if isinstance(stage, KeyEstablished):
            raise DuplicateKeyError(
                "client done failed: symmetric key was already set"
            )
        if not isinstance(stage, HelloSent):
            raise ProtocolViolation(
                "client done failed: no client hello received"
            )

        logger.debug("Session %s: received %d-byte encrypted key",
                     session.session_id, len(body))
        plaintext = self.crypto.decrypt_asymmetric(
            stage.keypair.private_key, body
        )
        key = fit_symmetric_key(plaintext, session.key_size)
        if len(plaintext) != session.key_size:
            logger.warning(
                "Session %s: client key is %d bytes, fitted to %d",
                session.session_id, len(plaintext), session.key_size,
            )
        logger.debug("Session %s: symmetric key %s",
                     session.session_id, key.hex())
        session.store_symmetric_key(key)

        if self.ack_delay > 0:
            self._sleep(self.ack_delay)

        logger.info("Session %s: key established", session.session_id)
        return Frame(MessageType.SERVER_DONE, b"")
