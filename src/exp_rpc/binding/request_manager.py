"""Request manager: hands envelopes to the current provider."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..errors import InvalidProvider, RemoteError
from ..protocol.jsonrpc import RequestEnvelope, ResponseEnvelope
from ..transport.base import Provider

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Optional[Exception], Any], None]


def _unwrap(response: ResponseEnvelope) -> Any:
    if response.error is not None:
        raise RemoteError(response.error.code, response.error.message, response.error.data)
    return response.result


class RequestManager:
    """Owns the provider reference shared by all bindings of one client.

    Remote errors become ``RemoteError``; transport errors from the
    provider are relayed untouched. Nothing is retried.
    """

    def __init__(self, provider: Provider | None = None) -> None:
        self._provider = provider

    @property
    def provider(self) -> Provider | None:
        return self._provider

    def set_provider(self, provider: Provider | None) -> None:
        self._provider = provider

    def _require_provider(self) -> Provider:
        if self._provider is None:
            raise InvalidProvider()
        return self._provider

    def send(self, envelope: RequestEnvelope) -> Any:
        """Send and block; return the raw result or raise."""
        provider = self._require_provider()
        logger.debug("-> %r", envelope)
        response = provider.send(envelope)
        logger.debug("<- %s %r", envelope.method, response)
        return _unwrap(response)

    def send_async(self, envelope: RequestEnvelope, callback: ResultCallback) -> Any:
        """Send without blocking; ``callback(error, raw_result)`` fires once."""
        provider = self._require_provider()
        logger.debug("-> %r (async)", envelope)

        def _on_response(error: Exception | None, response: ResponseEnvelope | None) -> None:
            if error is not None:
                callback(error, None)
                return
            try:
                result = _unwrap(response)
            except RemoteError as e:
                callback(e, None)
                return
            callback(None, result)

        return provider.send_async(envelope, _on_response)
