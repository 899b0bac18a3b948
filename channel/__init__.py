"""
SafeChat session protocol and TCP endpoints.
"""

from .session        import Session, SessionState
from .handshake      import HandshakeProtocol, fit_symmetric_key
from .secure_channel import SecureChannel
from .state_machine  import SessionStateMachine, Reply
from .connection     import ConnectionDriver
from .server         import SafeChatServer
from .client         import SafeChatClient

__all__ = [
    "Session",
    "SessionState",
    "HandshakeProtocol",
    "fit_symmetric_key",
    "SecureChannel",
    "SessionStateMachine",
    "Reply",
    "ConnectionDriver",
    "SafeChatServer",
    "SafeChatClient",
]
