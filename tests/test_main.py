import pytest

import main
from channel import SafeChatServer


def test_parse_serve_defaults():
    args = main.parse_args(["serve", "--port", "4000", "--strict"])
    assert args.command == "serve"
    assert args.port == 4000
    assert args.strict
    assert args.framing in ("legacy", "prefixed")


def test_parse_send_requires_message():
    with pytest.raises(SystemExit):
        main.parse_args(["send"])


def test_parse_rejects_unknown_framing():
    with pytest.raises(SystemExit):
        main.parse_args(["serve", "--framing", "json"])


def test_send_command(crypto, capsys):
    srv = SafeChatServer(host="127.0.0.1", port=0, crypto=crypto,
                         framing="prefixed", read_timeout=5)
    srv.start()
    try:
        host, port = srv.address
        code = main.main(["--log-level", "warning", "send", "--host", host,
                          "--port", str(port), "--framing", "prefixed",
                          "hello", "world"])
    finally:
        srv.stop()

    assert code == 0
    out = capsys.readouterr().out
    assert "sent 'hello'" in out
    assert "bye bye!" in out


def test_send_command_connection_refused(capsys):
    code = main.main(["send", "--host", "127.0.0.1", "--port", "1", "x"])
    assert code == 1
