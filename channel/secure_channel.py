"""
Encrypted application messages on an established session.

The server decrypts every CLIENT_MSG for observation only and answers
with SERVER_MSG carrying the ciphertext exactly as received.
"""

import base64
import logging

from config.settings    import Settings
from core.crypto_engine import CryptoProvider
from core.errors        import ProtocolViolation
from utils.framing      import Frame, MessageType
from .session           import Session, KeyEstablished

logger = logging.getLogger("SafeChat.Channel")

EMPTY_MESSAGE = "there is no point in encrypting null messages"
NO_KEY        = "client message failed: no symmetric key established"


class SecureChannel:
    """
    Parameters
    ----------
    crypto : CryptoProvider
        Symmetric decryption backend.
    strict_ordering : bool
        Reply ERROR to messages sent before key establishment instead of
        dropping them silently.
    on_message : callable | None
        ``callback(session_id: str, plaintext: bytes)`` fired for every
        decrypted message.
    """

    def __init__(self, crypto: CryptoProvider,
                 strict_ordering: bool = Settings.STRICT_ORDERING,
                 on_message=None):
        self.crypto          = crypto
        self.strict_ordering = strict_ordering
        self._on_message     = on_message

    def client_message(self, session: Session, body: bytes) -> Frame | None:
        stage = session.stage
        if not isinstance(stage, KeyEstablished):
            logger.warning(
                "Session %s: client tried to send message without encryption",
                session.session_id,
            )
            if self.strict_ordering:
                raise ProtocolViolation(NO_KEY)
            return None

        if not body:
            raise ProtocolViolation(EMPTY_MESSAGE)

        logger.debug("Session %s: encrypted message %s", session.session_id,
                     base64.urlsafe_b64encode(body).decode())
        plaintext = self.crypto.decrypt_symmetric(stage.symmetric_key, body)
        logger.debug("Session %s: decrypted message %r",
                     session.session_id, plaintext)

        if self._on_message:
            try:
                self._on_message(session.session_id, plaintext)
            except Exception:
                logger.error("on_message callback error", exc_info=True)

        return Frame(MessageType.SERVER_MSG, body)
