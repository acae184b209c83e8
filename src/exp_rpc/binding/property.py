"""Property binding: compiles a ``PropertyDescriptor`` into an accessor."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..errors import FormatterRejected
from ..protocol.jsonrpc import RequestEnvelope, build_request
from .descriptors import PropertyDescriptor
from .method import apply_output_formatter
from .request_manager import RequestManager

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[Exception], Any], None]

_UNSET = object()


class PropertyBinding:
    """A compiled read-only remote property.

    Live properties read from the node on every :meth:`get`. Cached ones
    return the last known value and only read from the node on
    :meth:`refresh`, or on the first :meth:`get` when nothing is known.
    """

    def __init__(self, descriptor: PropertyDescriptor, manager: RequestManager) -> None:
        self._descriptor = descriptor
        self._manager = manager
        self._cached = (
            descriptor.default
            if descriptor.cached and descriptor.default is not None
            else _UNSET
        )

    @property
    def descriptor(self) -> PropertyDescriptor:
        return self._descriptor

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def has_cached_value(self) -> bool:
        return self._cached is not _UNSET

    def request(self) -> RequestEnvelope:
        return build_request(self._descriptor.getter)

    def _store(self, value: Any) -> Any:
        if self._descriptor.cached:
            self._cached = value
        return value

    def refresh(self) -> Any:
        """Read the value from the node, updating the cache if any."""
        raw = self._manager.send(self.request())
        return self._store(apply_output_formatter(self._descriptor.output_formatter, raw))

    def get(self) -> Any:
        if self._descriptor.cached and self._cached is not _UNSET:
            return self._cached
        return self.refresh()

    def get_async(self, callback: Callback) -> Any:
        """Read without blocking; ``callback(error, value)`` fires once.

        A cached value is delivered immediately without a request.
        """
        if self._descriptor.cached and self._cached is not _UNSET:
            callback(None, self._cached)
            return None

        def _on_result(error: Exception | None, raw: Any) -> None:
            value = None
            if error is None:
                try:
                    value = self._store(
                        apply_output_formatter(self._descriptor.output_formatter, raw)
                    )
                except FormatterRejected as e:
                    error = e
            if error is not None:
                logger.debug("%s failed: %s", self._descriptor.name, error)
            callback(error, value)

        return self._manager.send_async(self.request(), _on_result)

    def __repr__(self) -> str:
        policy = "cached" if self._descriptor.cached else "live"
        return f"PropertyBinding({self._descriptor.name!r}, {policy})"


def compile_property(descriptor: PropertyDescriptor, manager: RequestManager) -> PropertyBinding:
    """Compile a descriptor into a bound accessor."""
    return PropertyBinding(descriptor, manager)
