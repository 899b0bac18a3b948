"""
Reference SafeChat client.

Runs the client half of the handshake, then sends AES-GCM encrypted
messages and checks that the server acknowledges each one with the
unchanged ciphertext.
"""

import socket
import logging

from config.settings    import Settings
from core.crypto_engine import CryptoProvider, DefaultCryptoProvider
from core.errors        import ProtocolViolation
from utils.framing      import Frame, MessageType, make_framing
from utils.random_gen   import SecureRandom
from .handshake         import fit_symmetric_key

logger = logging.getLogger("SafeChat.Client")


class SafeChatClient:
    """
    Usage::

        with SafeChatClient("127.0.0.1", 3333) as client:
            client.handshake()
            client.send_message(b"hello")
    """

    def __init__(
        self,
        host: str = Settings.SERVER_HOST,
        port: int = Settings.SERVER_PORT,
        crypto: CryptoProvider | None = None,
        framing: str = Settings.FRAMING,
        max_frame_size: int = Settings.MAX_FRAME_SIZE,
        timeout: float | None = Settings.READ_TIMEOUT,
        key_size: int = Settings.SYM_KEY_SIZE,
    ):
        self.host     = host
        self.port     = port
        self.crypto   = crypto or DefaultCryptoProvider()
        self.framing  = make_framing(framing, max_frame_size)
        self.timeout  = timeout
        self.key_size = key_size

        self.symmetric_key: bytes | None = None
        self.server_public_key = None
        self._sock: socket.socket | None = None

    # ── connection ───────────────────────────────────────────────
    def connect(self):
        self._sock = socket.create_connection(
            (self.host, self.port), timeout=self.timeout
        )
        logger.info("Connected to %s:%d", self.host, self.port)
        return self

    def disconnect(self):
        if self._sock:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None

    def __enter__(self):
        if self._sock is None:
            self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    # ── raw exchange ─────────────────────────────────────────────
    def send(self, tag: int, body: bytes = b""):
        if self._sock is None:
            raise RuntimeError("Not connected")
        self.framing.send_frame(self._sock, tag, body)

    def receive(self) -> Frame:
        if self._sock is None:
            raise RuntimeError("Not connected")
        return self.framing.recv_frame(self._sock)

    def request(self, tag: int, body: bytes = b"") -> Frame:
        """Send one frame and return the server's reply."""
        self.send(tag, body)
        return self.receive()

    def _expect(self, reply: Frame, tag: int) -> Frame:
        if reply.tag == MessageType.ERROR:
            raise ProtocolViolation(
                reply.body.decode("utf-8", errors="replace")
            )
        if reply.tag != tag:
            raise ProtocolViolation(
                f"expected {MessageType.name_of(tag)}, "
                f"got {MessageType.name_of(reply.tag)}"
            )
        return reply

    # ── protocol ─────────────────────────────────────────────────
    def handshake(self, symmetric_key: bytes | None = None) -> bytes:
        """Establish the symmetric key; return it."""
        reply = self._expect(self.request(MessageType.CLIENT_HELLO),
                             MessageType.SERVER_HELLO)
        self.server_public_key = self.crypto.load_public_key(reply.body)

        key = symmetric_key or SecureRandom.generate_bytes(self.key_size)
        wrapped = self.crypto.encrypt_asymmetric(self.server_public_key, key)
        self._expect(self.request(MessageType.CLIENT_DONE, wrapped),
                     MessageType.SERVER_DONE)

        # the server zero-pads / truncates to its fixed slot
        self.symmetric_key = fit_symmetric_key(key, self.key_size)
        logger.info("Handshake complete")
        return self.symmetric_key

    def send_message(self, plaintext: bytes) -> bytes:
        """Encrypt and send *plaintext*; return the acknowledged ciphertext."""
        if self.symmetric_key is None:
            raise RuntimeError("Handshake not completed")
        ciphertext = self.crypto.encrypt_symmetric(self.symmetric_key,
                                                   plaintext)
        reply = self._expect(self.request(MessageType.CLIENT_MSG, ciphertext),
                             MessageType.SERVER_MSG)
        if reply.body != ciphertext:
            raise ProtocolViolation("server acknowledgement does not match")
        return reply.body

    def close(self) -> bytes:
        """Send CLIENT_CLOSE, return the server's farewell and disconnect."""
        try:
            reply = self._expect(self.request(MessageType.CLIENT_CLOSE),
                                 MessageType.SERVER_CLOSE)
        finally:
            self.disconnect()
        logger.info("Closed: %s", reply.body.decode("utf-8", "replace"))
        return reply.body
