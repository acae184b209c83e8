"""Request and response envelopes for the JSON-RPC 2.0 wire protocol.

Request payload layout::

    {"jsonrpc": "2.0", "id": <int>, "method": <target name>, "params": [...]}

Response payload layout::

    {"jsonrpc": "2.0", "id": <int>, "result": <value>}
    {"jsonrpc": "2.0", "id": <int>, "error": {"code": <int>, "message": <str>}}

The binding engine only builds ``RequestEnvelope`` objects. Assigning the
correlation id and encoding the payload is the provider's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import InvalidResponse

JSONRPC_VERSION = "2.0"


@dataclass(frozen=True)
class RequestEnvelope:
    """A single remote call, created fresh for every invocation."""

    method: str
    params: tuple[Any, ...] = ()

    def __repr__(self) -> str:
        return f"RequestEnvelope(method={self.method!r}, params={list(self.params)!r})"


@dataclass(frozen=True)
class RpcErrorDetail:
    """The ``error`` member of a JSON-RPC response."""

    code: int | None
    message: str
    data: Any = None


@dataclass(frozen=True)
class ResponseEnvelope:
    """A decoded response: exactly one of ``result`` / ``error`` is meaningful."""

    id: int | str | None = None
    result: Any = None
    error: RpcErrorDetail | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_request(method: str, params=()) -> RequestEnvelope:
    """Assemble a request envelope from a target name and formatted arguments.

    Args:
        method: Target-operation name, e.g. ``exp_getBalance``.
        params: Already formatted arguments in positional order.
    """
    if not isinstance(method, str) or not method:
        raise ValueError(f"Target-operation name must be a non-empty string, got {method!r}")
    return RequestEnvelope(method=method, params=tuple(params))


def to_payload(envelope: RequestEnvelope, request_id: int) -> dict[str, Any]:
    """Frame an envelope as a JSON-RPC 2.0 request object."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "method": envelope.method,
        "params": list(envelope.params),
    }


def parse_response(data: Any) -> ResponseEnvelope:
    """Validate a decoded JSON-RPC response object.

    Raises:
        InvalidResponse: If ``data`` is not a well-formed JSON-RPC 2.0
            response carrying a ``result`` or an ``error`` object.
    """
    if not isinstance(data, dict) or data.get("jsonrpc") != JSONRPC_VERSION:
        raise InvalidResponse(data)

    error = data.get("error")
    if error is not None:
        if not isinstance(error, dict):
            raise InvalidResponse(data)
        return ResponseEnvelope(
            id=data.get("id"),
            error=RpcErrorDetail(
                code=error.get("code"),
                message=str(error.get("message", "")),
                data=error.get("data"),
            ),
        )

    if "result" not in data:
        raise InvalidResponse(data)
    return ResponseEnvelope(id=data.get("id"), result=data["result"])
