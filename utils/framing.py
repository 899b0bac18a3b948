"""
Binary framing for the SafeChat wire protocol.

Frame layout (legacy, the interoperable default):
    [1 byte  – message type]
    [N bytes – payload]

There is no length field, so one transport read must carry exactly one
frame.  That only holds for small request/response exchanges on a quiet
link; ``PrefixedFraming`` is the safe choice for new deployments:
    [4 bytes – payload length (big-endian)]
    [1 byte  – message type]
    [N bytes – payload]

Both modes use the same message-type values.
"""

import socket
import struct
from typing import NamedTuple

from config.settings import Settings
from core.errors import FramingError, TransportError


class MessageType:
    CLIENT_HELLO = 0
    SERVER_HELLO = 1
    CLIENT_DONE  = 2
    SERVER_DONE  = 3
    CLIENT_MSG   = 4
    SERVER_MSG   = 5
    CLIENT_CLOSE = 6
    SERVER_CLOSE = 7
    ERROR        = 8

    ALL = frozenset(range(9))

    @classmethod
    def name_of(cls, tag: int) -> str:
        for name, value in vars(cls).items():
            if name.isupper() and value == tag:
                return name
        return f"UNKNOWN(0x{tag:02x})"


class Frame(NamedTuple):
    tag: int
    body: bytes = b""


def encode(tag: int, body: bytes = b"") -> bytes:
    """Tag byte followed by the body verbatim."""
    if not 0 <= tag <= 0xFF:
        raise FramingError(f"tag out of range: {tag}")
    return bytes((tag,)) + bytes(body)


def decode(raw: bytes) -> Frame:
    """Split a raw frame into *(tag, body)*."""
    if not raw:
        raise FramingError("received null message")
    return Frame(raw[0], bytes(raw[1:]))


class LegacyFraming:
    """One ``recv()`` is one frame.  Compatibility mode only."""

    name = "legacy"

    def __init__(self, max_frame_size: int = Settings.MAX_FRAME_SIZE):
        self.max_frame_size = max_frame_size

    def recv_frame(self, sock) -> Frame:
        try:
            raw = sock.recv(self.max_frame_size + 1)
        except socket.timeout as exc:
            raise TransportError("read timed out") from exc
        except OSError as exc:
            raise TransportError(f"read failed: {exc}") from exc
        if len(raw) > self.max_frame_size:
            raise FramingError(
                f"frame exceeds {self.max_frame_size} bytes"
            )
        return decode(raw)

    def send_frame(self, sock, tag: int, body: bytes = b""):
        try:
            sock.sendall(encode(tag, body))
        except OSError as exc:
            raise TransportError(f"write failed: {exc}") from exc


class PrefixedFraming:
    """Length-prefixed frames; safe over fragmenting/coalescing streams."""

    name = "prefixed"
    HEADER_SIZE = 5
    _HEADER = struct.Struct("!IB")

    def __init__(self, max_frame_size: int = Settings.MAX_FRAME_SIZE):
        self.max_frame_size = max_frame_size

    def create_frame(self, tag: int, body: bytes = b"") -> bytes:
        if len(body) > self.max_frame_size:
            raise FramingError(f"payload too large: {len(body)}")
        if not 0 <= tag <= 0xFF:
            raise FramingError(f"tag out of range: {tag}")
        return self._HEADER.pack(len(body), tag) + bytes(body)

    def parse_header(self, header: bytes) -> tuple[int, int]:
        if len(header) < self.HEADER_SIZE:
            raise FramingError("header too short")
        length, tag = self._HEADER.unpack(header[:self.HEADER_SIZE])
        if length > self.max_frame_size:
            raise FramingError(f"payload too large: {length}")
        return length, tag

    @staticmethod
    def _recv_exact(sock, n: int) -> bytes:
        """Read exactly *n* bytes from *sock*."""
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = sock.recv(n - len(buf))
            except socket.timeout as exc:
                raise TransportError("read timed out") from exc
            except OSError as exc:
                raise TransportError(f"read failed: {exc}") from exc
            if not chunk:
                raise TransportError("connection closed by peer")
            buf.extend(chunk)
        return bytes(buf)

    def recv_frame(self, sock) -> Frame:
        header      = self._recv_exact(sock, self.HEADER_SIZE)
        length, tag = self.parse_header(header)
        body        = self._recv_exact(sock, length) if length else b""
        return Frame(tag, body)

    def send_frame(self, sock, tag: int, body: bytes = b""):
        try:
            sock.sendall(self.create_frame(tag, body))
        except OSError as exc:
            raise TransportError(f"write failed: {exc}") from exc


_FRAMINGS = {
    LegacyFraming.name:   LegacyFraming,
    PrefixedFraming.name: PrefixedFraming,
}


def make_framing(mode: str = Settings.FRAMING,
                 max_frame_size: int = Settings.MAX_FRAME_SIZE):
    """Return the framing implementation registered under *mode*."""
    try:
        cls = _FRAMINGS[mode]
    except KeyError:
        raise ValueError(
            f"unknown framing mode {mode!r} "
            f"(expected one of: {', '.join(sorted(_FRAMINGS))})"
        ) from None
    return cls(max_frame_size)
