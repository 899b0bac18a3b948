"""
Session state machine: the only code that sequences a session.

    NEW ──CLIENT_HELLO──▶ HELLO_SENT ──CLIENT_DONE──▶ KEY_ESTABLISHED
                                                      └─CLIENT_MSG (echo)
    any ──CLIENT_CLOSE──▶ CLOSED

Out-of-sequence frames are answered with an ERROR frame and leave the
state untouched.  Crypto, framing and transport errors propagate to the
connection driver and end the connection.
"""

import logging
from dataclasses import dataclass

from core.errors    import ProtocolViolation
from utils.framing  import Frame, MessageType
from .handshake     import HandshakeProtocol
from .secure_channel import SecureChannel
from .session       import Session

logger = logging.getLogger("SafeChat.Session")

INVALID_HEADER = "received invalid header"
CLOSE_BODY     = b"bye bye!"


@dataclass(frozen=True)
class Reply:
    frame: Frame | None = None
    close: bool = False


class SessionStateMachine:

    def __init__(self, session: Session,
                 handshake: HandshakeProtocol,
                 channel: SecureChannel):
        self.session   = session
        self.handshake = handshake
        self.channel   = channel
        self._handlers = {
            MessageType.CLIENT_HELLO: self._on_hello,
            MessageType.CLIENT_DONE:  self._on_done,
            MessageType.CLIENT_MSG:   self._on_message,
            MessageType.CLIENT_CLOSE: self._on_close,
        }

    def dispatch(self, frame: Frame) -> Reply:
        """Apply one client frame and return what to send back."""
        if self.session.is_closed:
            raise ProtocolViolation("session is closed")
        self.session.frames_received += 1

        handler = self._handlers.get(frame.tag)
        if handler is None:
            logger.warning("Session %s: received invalid header %s",
                           self.session.session_id,
                           MessageType.name_of(frame.tag))
            return Reply(Frame(MessageType.ERROR, INVALID_HEADER.encode()))

        try:
            return handler(frame.body)
        except ProtocolViolation as exc:
            logger.warning("Session %s: %s (state=%s)",
                           self.session.session_id, exc,
                           self.session.state.value)
            return Reply(Frame(MessageType.ERROR, str(exc).encode()))

    def _on_hello(self, body: bytes) -> Reply:
        return Reply(self.handshake.client_hello(self.session))

    def _on_done(self, body: bytes) -> Reply:
        return Reply(self.handshake.client_done(self.session, body))

    def _on_message(self, body: bytes) -> Reply:
        return Reply(self.channel.client_message(self.session, body))

    def _on_close(self, body: bytes) -> Reply:
        logger.info("Session %s: received client close",
                    self.session.session_id)
        self.session.close()
        return Reply(Frame(MessageType.SERVER_CLOSE, CLOSE_BODY), close=True)
