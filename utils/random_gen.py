"""
Cryptographically-secure random value generators.
"""

import os
import secrets


class SecureRandom:

    @staticmethod
    def generate_bytes(length: int) -> bytes:
        return os.urandom(length)

    @staticmethod
    def generate_session_id() -> str:
        return secrets.token_hex(8)
