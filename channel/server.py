"""
SafeChat TCP server.

Binds to ``(host, port)`` and hands every accepted connection to its own
``ConnectionDriver`` running in a daemon thread, so a slow or stalled
client never blocks the accept loop or any other client.  There is no
cap on concurrent connections.
"""

import socket
import threading
import logging

from config.settings    import Settings
from core.crypto_engine import CryptoProvider, DefaultCryptoProvider
from utils.framing      import make_framing
from .connection        import ConnectionDriver

logger = logging.getLogger("SafeChat.Server")


class SafeChatServer:
    """
    Parameters
    ----------
    host : str
        Interface to listen on (default from Settings).
    port : int
        Port to listen on; 0 picks a free port (see ``address``).
    crypto : CryptoProvider | None
        Crypto collaborator shared by all connections.  It holds no
        per-session state.
    framing : str
        ``"legacy"`` (one read per frame) or ``"prefixed"``.
    strict_ordering : bool
        Answer early CLIENT_MSG frames with ERROR instead of silence.
    on_message : callable | None
        ``callback(connection_id: str, plaintext: bytes)`` fired from the
        connection thread for every decrypted message.
    """

    def __init__(
        self,
        host: str = Settings.SERVER_BIND,
        port: int = Settings.SERVER_PORT,
        crypto: CryptoProvider | None = None,
        framing: str = Settings.FRAMING,
        max_frame_size: int = Settings.MAX_FRAME_SIZE,
        read_timeout: float | None = Settings.READ_TIMEOUT,
        strict_ordering: bool = Settings.STRICT_ORDERING,
        ack_delay: float = Settings.DONE_ACK_DELAY,
        on_message=None,
    ):
        self.host = host
        self.port = port
        self.crypto = crypto or DefaultCryptoProvider()
        self.framing_mode = framing
        self.max_frame_size = max_frame_size
        self.read_timeout = read_timeout
        self.strict_ordering = strict_ordering
        self.ack_delay = ack_delay
        self._on_message = on_message

        # fail fast on a bad mode
        make_framing(framing, max_frame_size)

        self._server_sock: socket.socket | None = None
        self._running = False
        self._accept_thread: threading.Thread | None = None
        self._drivers: dict[str, ConnectionDriver] = {}
        self._lock = threading.Lock()

    # ── lifecycle ────────────────────────────────────────────────
    def start(self):
        """Bind, listen and start the accept loop in a background thread."""
        if self._running:
            logger.warning("Server already running")
            return

        self._server_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._server_sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._server_sock.settimeout(1.0)          # so we can check _running
        self._server_sock.bind((self.host, self.port))
        self._server_sock.listen(Settings.LISTEN_BACKLOG)

        self._running = True
        self._accept_thread = threading.Thread(
            target=self._accept_loop, daemon=True,
            name="SafeChatAccept"
        )
        self._accept_thread.start()
        logger.info("Listening on %s:%d (framing=%s)",
                    *self.address, self.framing_mode)

    def stop(self):
        """Stop accepting and close every open connection."""
        self._running = False

        if self._server_sock:
            try:
                self._server_sock.close()
            except OSError:
                pass
            self._server_sock = None

        with self._lock:
            drivers = list(self._drivers.values())
        for driver in drivers:
            try:
                driver.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass

        if self._accept_thread and self._accept_thread.is_alive():
            self._accept_thread.join(timeout=5)
        logger.info("Server stopped")

    def serve_forever(self):
        """Start and block until interrupted."""
        self.start()
        try:
            while self._running:
                self._accept_thread.join(timeout=1.0)
                if not self._accept_thread.is_alive():
                    break
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.stop()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> tuple[str, int]:
        if self._server_sock is not None:
            return self._server_sock.getsockname()[:2]
        return self.host, self.port

    def active_connections(self) -> int:
        with self._lock:
            return len(self._drivers)

    # ── accept loop ──────────────────────────────────────────────
    def _accept_loop(self):
        server_sock = self._server_sock
        while self._running:
            try:
                client_sock, addr = server_sock.accept()
            except socket.timeout:
                continue
            except OSError:
                if self._running:
                    logger.error("Accept error", exc_info=True)
                    continue
                break

            client_sock.settimeout(None)
            driver = ConnectionDriver(
                client_sock, addr, self.crypto,
                framing=make_framing(self.framing_mode, self.max_frame_size),
                read_timeout=self.read_timeout,
                strict_ordering=self.strict_ordering,
                ack_delay=self.ack_delay,
                on_message=self._on_message,
            )
            threading.Thread(
                target=self._handle_client,
                args=(driver,),
                daemon=True,
                name=f"SafeChat-{addr[0]}:{addr[1]}",
            ).start()

    def _handle_client(self, driver: ConnectionDriver):
        with self._lock:
            self._drivers[driver.connection_id] = driver
        try:
            driver.run()
        finally:
            with self._lock:
                self._drivers.pop(driver.connection_id, None)
