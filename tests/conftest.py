"""
Shared fixtures for the SafeChat test-suite.
"""
import pytest

from core.crypto_engine import DefaultCryptoProvider
from channel import SafeChatServer


class SpyCryptoProvider(DefaultCryptoProvider):
    """Real crypto with call counters, small RSA keys for speed."""

    def __init__(self):
        super().__init__(rsa_key_size=1024)
        self.keypairs_generated = 0
        self.asymmetric_decrypts = 0
        self.symmetric_decrypts = 0

    def generate_keypair(self):
        self.keypairs_generated += 1
        return super().generate_keypair()

    def decrypt_asymmetric(self, private_key, ciphertext):
        self.asymmetric_decrypts += 1
        return super().decrypt_asymmetric(private_key, ciphertext)

    def decrypt_symmetric(self, key, ciphertext):
        self.symmetric_decrypts += 1
        return super().decrypt_symmetric(key, ciphertext)


class FakeSocket:
    """Replays queued reads; records writes.  One entry = one recv()."""

    def __init__(self, reads=()):
        self.reads = list(reads)
        self.sent = []
        self.closed = False
        self.timeout = None

    def recv(self, bufsize):
        if not self.reads:
            return b""
        chunk = self.reads.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        if len(chunk) > bufsize:
            self.reads.insert(0, chunk[bufsize:])
            chunk = chunk[:bufsize]
        return chunk

    def sendall(self, data):
        if self.closed:
            raise OSError("socket closed")
        self.sent.append(bytes(data))

    def settimeout(self, value):
        self.timeout = value

    def close(self):
        self.closed = True


@pytest.fixture
def crypto():
    return SpyCryptoProvider()


@pytest.fixture
def fake_socket():
    return FakeSocket


@pytest.fixture(params=["legacy", "prefixed"])
def framing_mode(request):
    return request.param


@pytest.fixture
def received_messages():
    return []


@pytest.fixture
def server(crypto, framing_mode, received_messages):
    srv = SafeChatServer(
        host="127.0.0.1", port=0, crypto=crypto, framing=framing_mode,
        read_timeout=5,
        on_message=lambda cid, pt: received_messages.append((cid, pt)),
    )
    srv.start()
    yield srv
    srv.stop()
