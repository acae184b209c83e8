"""Provider contract: the only boundary the binding engine depends on."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ..protocol.jsonrpc import RequestEnvelope, ResponseEnvelope

ResponseCallback = Callable[[Optional[Exception], Optional[ResponseEnvelope]], None]


@runtime_checkable
class Provider(Protocol):
    """Moves request envelopes to a node and brings responses back.

    ``send`` blocks until the response arrives. ``send_async`` returns
    immediately (optionally with a handle on the pending exchange) and
    calls ``callback(error, response)`` exactly once.
    Transport problems are reported as ``TransportFailure``.
    """

    def send(self, envelope: RequestEnvelope) -> ResponseEnvelope:
        ...

    def send_async(self, envelope: RequestEnvelope, callback: ResponseCallback) -> Any:
        ...
