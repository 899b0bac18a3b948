"""
SafeChat — command-line entry point.

    safechat serve [--host H] [--port P] [--framing legacy|prefixed] [--strict]
    safechat send  [--host H] [--port P] [--framing ...] MESSAGE...
"""

import sys
import logging
import argparse

from config.settings import Settings
from core.errors     import SafeChatError
from channel         import SafeChatServer, SafeChatClient

logger = logging.getLogger("SafeChat.Main")


def setup_logging(level: str = Settings.LOG_LEVEL):
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        Settings.LOG_FORMAT, datefmt=Settings.LOG_DATEFMT,
    ))
    root_logger.addHandler(console_handler)


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="safechat",
        description=f"{Settings.APP_NAME} v{Settings.APP_VERSION}",
    )
    p.add_argument("--log-level", default=Settings.LOG_LEVEL,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   type=str.upper)
    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("serve", help="run the server")
    sp.add_argument("--host", default=Settings.SERVER_BIND)
    sp.add_argument("--port", type=int, default=Settings.SERVER_PORT)
    sp.add_argument("--framing", default=Settings.FRAMING,
                    choices=["legacy", "prefixed"])
    sp.add_argument("--strict", action="store_true",
                    help="reply ERROR to messages sent before the handshake")
    sp.add_argument("--ack-delay", type=float, default=Settings.DONE_ACK_DELAY,
                    help="seconds to wait before SERVER_DONE")

    sp = sub.add_parser("send", help="handshake and send messages")
    sp.add_argument("--host", default=Settings.SERVER_HOST)
    sp.add_argument("--port", type=int, default=Settings.SERVER_PORT)
    sp.add_argument("--framing", default=Settings.FRAMING,
                    choices=["legacy", "prefixed"])
    sp.add_argument("message", nargs="+")

    return p.parse_args(argv)


def run(args: argparse.Namespace):
    if args.command == "serve":
        server = SafeChatServer(
            host=args.host, port=args.port, framing=args.framing,
            strict_ordering=args.strict, ack_delay=args.ack_delay,
        )
        server.serve_forever()
        return

    with SafeChatClient(args.host, args.port, framing=args.framing) as client:
        client.handshake()
        for text in args.message:
            ack = client.send_message(text.encode("utf-8"))
            print(f"sent {text!r} ({len(ack)} bytes acknowledged)")
        print(client.close().decode("utf-8", "replace"))


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    try:
        run(args)
    except (SafeChatError, OSError) as exc:
        logger.error("An error occurred: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
