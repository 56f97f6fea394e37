from abc import ABCMeta, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class RpcError(Exception):
    """Base class of every failure reported by the RPC layer"""

    pass


class TransportError(RpcError):
    """The request never produced an HTTP response"""

    pass


class ProtocolError(RpcError):
    """The daemon answered, but not with a successful result"""

    def __init__(self, message: str, *, status: int, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


class MalformedPayloadError(ProtocolError):
    """The response body is not the structure the caller expected"""

    pass


class AuthChallengeError(RpcError):
    """The daemon rejected the credentials (HTTP 401)"""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


@dataclass(frozen=True)
class RpcSuccess:
    payload: dict[str, Any]


@dataclass(frozen=True)
class RpcProtocolError:
    status: int
    payload: Any


@dataclass(frozen=True)
class RpcAuthChallenge:
    payload: Any


type RpcResult = RpcSuccess | RpcProtocolError | RpcAuthChallenge


class RpcTransport(metaclass=ABCMeta):
    """Abstract request/response primitive used by everything above it"""

    @abstractmethod
    async def call(
        self, method: str, arguments: Mapping[str, Any] | None = None
    ) -> RpcResult:
        """Send one request, raise TransportError if no response arrived"""
        pass


def unwrap(result: RpcResult, method: str) -> dict[str, Any]:
    """Turn a tagged result into the response payload or raise"""
    match result:
        case RpcSuccess(payload=payload):
            return payload
        case RpcAuthChallenge(payload=payload):
            raise AuthChallengeError(f"{method}: unauthorized", payload=payload)
        case RpcProtocolError(status=200, payload=payload) if not isinstance(
            payload, dict
        ):
            raise MalformedPayloadError(
                f"{method}: response is not a json object",
                status=200,
                payload=payload,
            )
        case RpcProtocolError(status=status, payload=payload):
            raise ProtocolError(
                f"{method}: failed with status {status}",
                status=status,
                payload=payload,
            )
        case _:
            raise TypeError(f"unexpected rpc result: {result!r}")
