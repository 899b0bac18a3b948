from .random_gen      import SecureRandom
from .framing         import (
    Frame, MessageType, LegacyFraming, PrefixedFraming,
    encode, decode, make_framing,
)

__all__ = ["SecureRandom", "Frame", "MessageType", "LegacyFraming",
           "PrefixedFraming", "encode", "decode", "make_framing"]
