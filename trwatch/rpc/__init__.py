"""
Transmission RPC transport.

This package provides:
- Abstract transport interface and tagged results
- Error hierarchy for failed requests
- aiohttp based transport with session id handling
"""

from .transmission import TransmissionTransport
from .transport import (
    AuthChallengeError,
    MalformedPayloadError,
    ProtocolError,
    RpcAuthChallenge,
    RpcError,
    RpcProtocolError,
    RpcResult,
    RpcSuccess,
    RpcTransport,
    TransportError,
)


__all__ = [
    # Interface and results
    "RpcTransport",
    "RpcResult",
    "RpcSuccess",
    "RpcProtocolError",
    "RpcAuthChallenge",
    # Errors
    "RpcError",
    "TransportError",
    "ProtocolError",
    "MalformedPayloadError",
    "AuthChallengeError",
    # Implementations
    "TransmissionTransport",
]
