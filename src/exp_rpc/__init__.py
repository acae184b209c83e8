"""Descriptor-driven bindings for an exp node's JSON-RPC surface."""

from .client import Client, ExpNamespace
from .config import ClientConfig
from .errors import (
    ExpRpcError,
    FormatterRejected,
    InvalidArgumentCount,
    InvalidProvider,
    InvalidResponse,
    RemoteError,
    TransportFailure,
)
from .transport.http_provider import HttpProvider
