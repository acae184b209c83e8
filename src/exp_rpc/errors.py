"""Error taxonomy shared by the binding engine and the providers.

Local errors (argument count, formatter rejections) never reach the
network. Remote and transport errors are relayed unchanged.
"""

from __future__ import annotations

from typing import Any


class ExpRpcError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentCount(ExpRpcError, TypeError):
    """A bound method was called with the wrong number of arguments."""

    def __init__(self, name: str, expected: int, got: int) -> None:
        super().__init__(
            f"Invalid number of parameters for '{name}'. "
            f"Got {got}, expected {expected}"
        )
        self.name = name
        self.expected = expected
        self.got = got


class FormatterRejected(ExpRpcError, ValueError):
    """A formatter received a value outside its accepted shape."""


class RemoteError(ExpRpcError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, code: int | None, message: str, data: Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class TransportFailure(ExpRpcError, ConnectionError):
    """The provider could not complete the exchange."""


class InvalidResponse(TransportFailure):
    """The peer answered with something that is not a JSON-RPC response."""

    def __init__(self, response: Any) -> None:
        super().__init__(f"Invalid JSON RPC response: {response!r}")
        self.response = response


class InvalidProvider(ExpRpcError, RuntimeError):
    """A request was issued while no provider was set."""

    def __init__(self) -> None:
        super().__init__("Provider not set or invalid")
