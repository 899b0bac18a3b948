"""
Drives one accepted connection from first frame to teardown.
"""

import logging

from config.settings    import Settings
from core.crypto_engine import CryptoProvider
from core.errors        import SafeChatError
from utils.framing      import LegacyFraming, MessageType
from .handshake         import HandshakeProtocol
from .secure_channel    import SecureChannel
from .session           import Session
from .state_machine     import SessionStateMachine

logger = logging.getLogger("SafeChat.Connection")


class ConnectionDriver:
    """
    Owns *sock* and a fresh ``Session`` for the lifetime of the connection.

    Frames are handled strictly one at a time.  A framing, crypto or
    transport error ends this connection only.
    """

    def __init__(self, sock, peer_addr: tuple,
                 crypto: CryptoProvider,
                 framing=None,
                 read_timeout: float | None = Settings.READ_TIMEOUT,
                 strict_ordering: bool = Settings.STRICT_ORDERING,
                 ack_delay: float = Settings.DONE_ACK_DELAY,
                 on_message=None):
        self.sock         = sock
        self.peer_addr    = peer_addr
        self.framing      = framing or LegacyFraming()
        self.read_timeout = read_timeout
        self.session      = Session()
        self.error: Exception | None = None
        self.state_machine = SessionStateMachine(
            self.session,
            HandshakeProtocol(crypto, ack_delay=ack_delay),
            SecureChannel(crypto, strict_ordering=strict_ordering,
                          on_message=on_message),
        )

    @property
    def connection_id(self) -> str:
        return self.session.session_id

    def run(self):
        """Process frames until the client closes or an error occurs."""
        logger.info("Connection %s from %s", self.connection_id,
                    _format_addr(self.peer_addr))
        try:
            self.sock.settimeout(self.read_timeout)
            while not self.session.is_closed:
                self._step()
        except SafeChatError as exc:
            self.error = exc
            logger.error("Connection %s terminated: %s (%s)",
                         self.connection_id, exc, type(exc).__name__)
        except Exception as exc:
            self.error = exc
            logger.error("Connection %s handler error: %s",
                         self.connection_id, exc, exc_info=True)
        finally:
            if not self.session.is_closed:
                self.session.close()
            try:
                self.sock.close()
            except OSError:
                pass
            logger.info("Connection %s disconnected", self.connection_id)

    def _step(self):
        frame = self.framing.recv_frame(self.sock)
        logger.debug("Connection %s ← %s (%d bytes)", self.connection_id,
                     MessageType.name_of(frame.tag), len(frame.body))

        reply = self.state_machine.dispatch(frame)
        if reply.frame is not None:
            self.framing.send_frame(self.sock, reply.frame.tag,
                                    reply.frame.body)
            logger.debug("Connection %s → %s (%d bytes)", self.connection_id,
                         MessageType.name_of(reply.frame.tag),
                         len(reply.frame.body))


def _format_addr(addr) -> str:
    if isinstance(addr, tuple) and len(addr) >= 2:
        return f"{addr[0]}:{addr[1]}"
    return str(addr)
