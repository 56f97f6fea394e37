import json
import logging
from collections.abc import Mapping
from typing import Any, override

from aiohttp import BasicAuth, ClientError, ClientSession

from .transport import (
    RpcAuthChallenge,
    RpcProtocolError,
    RpcResult,
    RpcSuccess,
    RpcTransport,
    TransportError,
)


SESSION_ID_HEADER = "X-Transmission-Session-Id"
_L = logging.getLogger(__name__)


class TransmissionTransport(RpcTransport):
    """JSON over HTTP transport for the Transmission RPC endpoint"""

    def __init__(
        self,
        url: str,
        *,
        session: ClientSession,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        self._url = url
        self._curl = session
        self._auth = _create_auth(username, password)
        self._session_id: str | None = None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @override
    async def call(
        self, method: str, arguments: Mapping[str, Any] | None = None
    ) -> RpcResult:
        body: dict[str, Any] = {"method": method}
        if arguments is not None:
            body["arguments"] = dict(arguments)

        status, raw = await self._post(body)
        if status == 409:
            # the daemon handed out a new session id, resend once with it
            _L.debug(f"{method}: session id refreshed")
            status, raw = await self._post(body)
        return _to_result(status, raw)

    async def _post(self, body: dict[str, Any]) -> tuple[int, bytes]:
        headers = self._create_headers()
        try:
            async with self._curl.post(
                self._url, json=body, headers=headers, auth=self._auth
            ) as response:
                raw = await response.read()
                if response.status == 409:
                    self._session_id = response.headers.get(SESSION_ID_HEADER)
                return response.status, raw
        except (ClientError, TimeoutError) as e:
            raise TransportError(f"{body['method']}: {e!r}") from e

    def _create_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._session_id:
            headers[SESSION_ID_HEADER] = self._session_id
        return headers


def _create_auth(username: str | None, password: str | None) -> BasicAuth | None:
    if username is None and password is None:
        return None
    return BasicAuth(username or "", password or "")


def _to_result(status: int, raw: bytes) -> RpcResult:
    try:
        payload: Any = json.loads(raw)
    except ValueError:
        # also covers bodies that are not valid utf-8
        payload = raw.decode(errors="replace")

    if status == 401:
        return RpcAuthChallenge(payload=payload)
    if status != 200 or not isinstance(payload, dict):
        return RpcProtocolError(status=status, payload=payload)
    if payload.get("result") != "success":
        return RpcProtocolError(status=status, payload=payload)
    return RpcSuccess(payload=payload)
