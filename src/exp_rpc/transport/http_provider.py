"""JSON-RPC over HTTP provider for an exp node.

Blocking requests go through a lazily created ``httpx.Client``. Callback
requests are scheduled as tasks on the running asyncio event loop and use
a lazily created ``httpx.AsyncClient``, so they never block the loop.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any

import httpx

from ..config import DEFAULT_TIMEOUT, DEFAULT_URL
from ..errors import TransportFailure
from ..protocol.jsonrpc import (
    RequestEnvelope,
    ResponseEnvelope,
    parse_response,
    to_payload,
)
from .base import ResponseCallback

logger = logging.getLogger(__name__)

HEADERS = {
    "content-type": "application/json",
    "accept": "application/json",
}


class HttpProvider:
    """Sends request envelopes to a node's HTTP JSON-RPC endpoint.

    Usage::

        provider = HttpProvider("http://localhost:8545")
        response = provider.send(build_request("exp_blockNumber"))
        provider.close()
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._async_transport = async_transport
        self._client: httpx.Client | None = None
        self._async_client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        return self._url

    def _next_payload(self, envelope: RequestEnvelope) -> dict[str, Any]:
        return to_payload(envelope, next(self._ids))

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._timeout, headers=HEADERS, transport=self._transport
            )
        return self._client

    def _get_async_client(self) -> httpx.AsyncClient:
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                timeout=self._timeout, headers=HEADERS, transport=self._async_transport
            )
        return self._async_client

    @staticmethod
    def _decode(response: httpx.Response) -> ResponseEnvelope:
        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportFailure(f"Bad response from node: {e}") from e
        return parse_response(data)

    def send(self, envelope: RequestEnvelope) -> ResponseEnvelope:
        """Send an envelope and block until the node answers.

        Raises:
            TransportFailure: If the node cannot be reached or the body
                is not a JSON-RPC response.
        """
        payload = self._next_payload(envelope)
        logger.debug("POST %s id=%s method=%s", self._url, payload["id"], envelope.method)
        try:
            response = self._get_client().post(self._url, json=payload)
        except httpx.HTTPError as e:
            raise TransportFailure(
                f"Could not connect to node at {self._url}: {e}"
            ) from e
        return self._decode(response)

    async def _send_async(self, payload: dict[str, Any]) -> ResponseEnvelope:
        try:
            response = await self._get_async_client().post(self._url, json=payload)
        except httpx.HTTPError as e:
            raise TransportFailure(
                f"Could not connect to node at {self._url}: {e}"
            ) from e
        return self._decode(response)

    def send_async(
        self, envelope: RequestEnvelope, callback: ResponseCallback
    ) -> asyncio.Task | None:
        """Schedule the exchange on the running event loop.

        ``callback(error, response)`` is invoked once when the task
        finishes. The task is returned so callers may await it. Outside a
        running event loop nothing is sent; the callback receives a
        ``TransportFailure`` and ``None`` is returned.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback(TransportFailure("No running event loop for async request"), None)
            return None
        payload = self._next_payload(envelope)
        logger.debug(
            "POST %s id=%s method=%s (async)", self._url, payload["id"], envelope.method
        )
        task = loop.create_task(self._send_async(payload))

        def _done(finished: asyncio.Task) -> None:
            if finished.cancelled():
                callback(TransportFailure("Request cancelled"), None)
                return
            error = finished.exception()
            if error is not None:
                callback(error, None)
            else:
                callback(None, finished.result())

        task.add_done_callback(_done)
        return task

    def close(self) -> None:
        """Close the blocking client. Use :meth:`aclose` for the async one."""
        if self._client is None:
            return
        try:
            self._client.close()
        except Exception as e:
            logger.warning("Error closing HTTP client: %s", e)
        finally:
            self._client = None

    async def aclose(self) -> None:
        self.close()
        if self._async_client is not None:
            try:
                await self._async_client.aclose()
            finally:
                self._async_client = None

    def __enter__(self) -> HttpProvider:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> HttpProvider:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
