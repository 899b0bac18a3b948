import os


class Settings:
    """Centralised application configuration."""

    # ── application ──────────────────────────────────────────────
    APP_NAME    = "SafeChat"
    APP_VERSION = "1.0.0"

    # ── network ──────────────────────────────────────────────────
    SERVER_HOST    = os.environ.get("SAFECHAT_HOST", "127.0.0.1")
    SERVER_BIND    = os.environ.get("SAFECHAT_BIND", "0.0.0.0")
    SERVER_PORT    = int(os.environ.get("SAFECHAT_PORT", "3333"))
    LISTEN_BACKLOG = 50
    MAX_FRAME_SIZE = 1024 * 1024                # 1 MiB read ceiling
    FRAMING        = os.environ.get("SAFECHAT_FRAMING", "legacy")

    # ── crypto defaults ──────────────────────────────────────────
    RSA_KEY_SIZE = 2048
    SYM_KEY_SIZE = 32                           # 256 bits

    # ── session ──────────────────────────────────────────────────
    READ_TIMEOUT    = 300                       # seconds
    DONE_ACK_DELAY  = 0.0                       # seconds before SERVER_DONE
    STRICT_ORDERING = False

    # ── logging ──────────────────────────────────────────────────
    LOG_LEVEL  = os.environ.get("SAFECHAT_LOG_LEVEL", "INFO")
    LOG_FORMAT = "[%(asctime)s] [%(levelname)-8s] %(name)s — %(message)s"
    LOG_DATEFMT = "%H:%M:%S"
