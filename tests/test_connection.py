from channel import ConnectionDriver, SessionState
from core.errors import CryptoError, FramingError, TransportError
from utils.framing import (
    LegacyFraming, MessageType, PrefixedFraming, decode, encode,
)


def run_driver(crypto, sock, **kwargs):
    driver = ConnectionDriver(sock, ("127.0.0.1", 50000), crypto, **kwargs)
    driver.run()
    return driver


def test_close_stops_processing(crypto, fake_socket):
    sock = fake_socket([
        encode(MessageType.CLIENT_CLOSE),
        encode(MessageType.CLIENT_HELLO),
    ])
    driver = run_driver(crypto, sock)

    assert [decode(raw) for raw in sock.sent] == [
        (MessageType.SERVER_CLOSE, b"bye bye!"),
    ]
    assert sock.reads == [encode(MessageType.CLIENT_HELLO)]
    assert driver.session.state is SessionState.CLOSED
    assert driver.error is None
    assert sock.closed


def test_invalid_header_keeps_connection_open(crypto, fake_socket):
    sock = fake_socket([
        bytes([0x99]) + b"junk",
        encode(MessageType.CLIENT_HELLO),
        encode(MessageType.CLIENT_CLOSE),
    ])
    run_driver(crypto, sock)

    tags = [decode(raw).tag for raw in sock.sent]
    assert tags == [MessageType.ERROR, MessageType.SERVER_HELLO,
                    MessageType.SERVER_CLOSE]
    assert decode(sock.sent[0]).body == b"received invalid header"


def test_silent_drop_sends_nothing(crypto, fake_socket):
    sock = fake_socket([
        encode(MessageType.CLIENT_MSG, b"too early"),
        encode(MessageType.CLIENT_CLOSE),
    ])
    run_driver(crypto, sock)
    assert [decode(raw).tag for raw in sock.sent] == [MessageType.SERVER_CLOSE]


def test_null_read_terminates(crypto, fake_socket):
    sock = fake_socket([encode(MessageType.CLIENT_HELLO), b""])
    driver = run_driver(crypto, sock)

    assert isinstance(driver.error, FramingError)
    assert driver.session.state is SessionState.CLOSED
    assert len(sock.sent) == 1
    assert sock.closed


def test_oversized_frame_terminates(crypto, fake_socket):
    sock = fake_socket([b"\x04" + b"a" * 64])
    driver = run_driver(crypto, sock, framing=LegacyFraming(max_frame_size=16))
    assert isinstance(driver.error, FramingError)
    assert sock.sent == []


def test_undecryptable_key_terminates_without_reply(crypto, fake_socket):
    sock = fake_socket([
        encode(MessageType.CLIENT_HELLO),
        encode(MessageType.CLIENT_DONE, b"not rsa"),
        encode(MessageType.CLIENT_CLOSE),
    ])
    driver = run_driver(crypto, sock)

    assert isinstance(driver.error, CryptoError)
    assert [decode(raw).tag for raw in sock.sent] == [MessageType.SERVER_HELLO]
    assert sock.reads == [encode(MessageType.CLIENT_CLOSE)]


def test_read_error_terminates(crypto, fake_socket):
    sock = fake_socket([ConnectionResetError("reset by peer")])
    driver = run_driver(crypto, sock)
    assert isinstance(driver.error, TransportError)
    assert sock.closed


def test_read_timeout_applied(crypto, fake_socket):
    sock = fake_socket([encode(MessageType.CLIENT_CLOSE)])
    run_driver(crypto, sock, read_timeout=7)
    assert sock.timeout == 7


def test_prefixed_framing(crypto, fake_socket):
    framing = PrefixedFraming()
    raw = (framing.create_frame(MessageType.CLIENT_HELLO)
           + framing.create_frame(MessageType.CLIENT_CLOSE))
    sock = fake_socket([raw])
    run_driver(crypto, sock, framing=framing)

    assert len(sock.sent) == 2
    assert sock.sent[0][4] == MessageType.SERVER_HELLO
    assert sock.sent[1] == framing.create_frame(MessageType.SERVER_CLOSE,
                                                b"bye bye!")
