# -*- coding: utf-8 -*-
"""
HTTP client for the protocol catalog and execution services.

Endpoints:

- `GET /protocols` -> list of protocols
- `GET /protocols/{id}` -> one protocol (404 when unknown)
- `POST /protocols/{id}/run` with `{"params": {...}, "simulate": bool}` -> result

Error mapping:

- network/transport failures -> `CommsError`
- 404 on a protocol -> `ProtocolNotFoundError`
- a rejected run -> `ExecutionError`, message taken from the JSON `detail`
  field when the service sends one
- a payload that is not JSON or not shaped like a result -> `ExecutionError`
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from protorunner.types import (
    CommsError,
    ExecutionError,
    Protocol,
    ProtocolNotFoundError,
    ProtocolResult,
    RunRequest,
)
from protorunner.util import ClientConfig
from protorunner.util.defaults import (
    DEFAULT_API_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_TIMEOUT,
)


def error_detail(response: httpx.Response, fallback: str) -> str:
    """Human-readable message for a failed response.

    Prefers a `detail` string in a JSON body; a FastAPI-style list of
    validation errors is joined into one line. Anything else gives `fallback`.
    """
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if not isinstance(payload, dict):
        return fallback
    detail = payload.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list) and detail:
        parts = []
        for item in detail:
            if isinstance(item, dict) and "msg" in item:
                loc = ".".join(str(p) for p in item.get("loc", ()))
                parts.append(f"{loc}: {item['msg']}" if loc else str(item["msg"]))
            else:
                parts.append(str(item))
        return "; ".join(parts)
    return fallback


class ProtocolClient:
    """Async client implementing both service protocols over HTTP.

    Parameters
    ----------
    base_url : str, optional
        Service root, by default DEFAULT_API_URL
    timeout : float, optional
        Per-request timeout in seconds, by default DEFAULT_TIMEOUT
    transport : httpx.AsyncBaseTransport, optional
        Custom transport (e.g. `httpx.MockTransport` in tests)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, DEFAULT_CONNECT_TIMEOUT)),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> ProtocolClient:
        return cls(config.api_url, timeout=config.timeout, **kwargs)

    def __repr__(self):
        return f"ProtocolClient(base_url={self.base_url!r})"

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ProtocolClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("{} {}{}", method, self.base_url, path)
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("{} {} failed: {}", method, path, e)
            raise CommsError(f"Could not reach {self.base_url}{path}: {e}") from e
        logger.debug("{} {} -> {}", method, path, response.status_code)
        return response

    async def list_protocols(self) -> list[Protocol]:
        response = await self._request("GET", "/protocols")
        if not response.is_success:
            raise CommsError(
                f"Failed to fetch protocols: {response.reason_phrase}\n{response.text}"
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise CommsError(f"Malformed protocol list: {e}") from e
        if not isinstance(payload, list):
            raise CommsError("Malformed protocol list: expected a JSON array")

        protocols = []
        for entry in payload:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed catalog entry {!r}", entry)
                continue
            protocols.append(Protocol.from_dict(entry))
        logger.info("Fetched {} protocols", len(protocols))
        return protocols

    async def get_protocol(self, protocol_id: str) -> Protocol:
        response = await self._request("GET", f"/protocols/{quote(protocol_id, safe='')}")
        if response.status_code == 404:
            raise ProtocolNotFoundError(protocol_id)
        if not response.is_success:
            raise CommsError(f"Failed to fetch protocol: {response.reason_phrase}")
        try:
            payload = response.json()
        except ValueError as e:
            raise CommsError(f"Malformed protocol {protocol_id}: {e}") from e
        if not isinstance(payload, dict):
            raise CommsError(f"Malformed protocol {protocol_id}: expected a JSON object")
        return Protocol.from_dict(payload)

    async def run_protocol(
        self, protocol_id: str, params: dict[str, Any], simulate: bool = False
    ) -> ProtocolResult:
        body = RunRequest(params=params, simulate=simulate).to_dict()
        response = await self._request(
            "POST", f"/protocols/{quote(protocol_id, safe='')}/run", json=body
        )
        if not response.is_success:
            message = error_detail(
                response, f"Failed to run protocol: {response.reason_phrase}"
            )
            raise ExecutionError(message, status_code=response.status_code)
        try:
            payload = response.json()
        except ValueError as e:
            raise ExecutionError(
                f"Malformed result from execution service: {e}",
                status_code=response.status_code,
            ) from e
        if not isinstance(payload, dict):
            raise ExecutionError(
                "Malformed result from execution service: expected a JSON object",
                status_code=response.status_code,
            )
        return ProtocolResult.from_dict(payload)
