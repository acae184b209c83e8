"""Method binding: compiles a ``MethodDescriptor`` into a callable.

Every call goes through the same pipeline::

    validate arity -> resolve target (raw args) -> format inputs
        -> build envelope -> provider -> format output

Calling the binding directly blocks; ``call_async`` hands the result to a
completion callback instead. Both share the first four steps.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional

from ..config import ClientConfig
from ..errors import FormatterRejected, InvalidArgumentCount
from ..protocol.formatters import is_config_aware
from ..protocol.jsonrpc import RequestEnvelope, build_request
from .descriptors import Formatter, MethodDescriptor
from .request_manager import RequestManager

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[Exception], Any], None]


def bind_formatter(formatter: Formatter | None, config: ClientConfig) -> Formatter | None:
    """Attach the client config to a config-aware formatter."""
    if formatter is not None and is_config_aware(formatter):
        return functools.partial(formatter, config=config)
    return formatter


def apply_output_formatter(formatter: Formatter | None, result: Any) -> Any:
    """Format a raw result; ``None`` results are returned unchanged."""
    if formatter is None or result is None:
        return result
    try:
        return formatter(result)
    except FormatterRejected:
        raise
    except Exception as e:
        raise FormatterRejected(f"Output formatter rejected {result!r}: {e}") from e


class MethodBinding:
    """A compiled, reusable remote method.

    Holds only the descriptor, the request manager and the bound input
    formatters, so one instance can serve any number of concurrent calls.
    """

    def __init__(
        self,
        descriptor: MethodDescriptor,
        manager: RequestManager,
        config: ClientConfig,
    ) -> None:
        self._descriptor = descriptor
        self._manager = manager
        self._input_formatters = tuple(
            bind_formatter(f, config) for f in descriptor.input_formatter
        )
        self.__name__ = descriptor.name.rsplit(".", 1)[-1]
        self.__doc__ = f"Remote method '{descriptor.name}' ({descriptor.params} params)."

    @property
    def descriptor(self) -> MethodDescriptor:
        return self._descriptor

    @property
    def name(self) -> str:
        return self._descriptor.name

    def validate_args(self, args: tuple[Any, ...]) -> None:
        if len(args) != self._descriptor.params:
            raise InvalidArgumentCount(self._descriptor.name, self._descriptor.params, len(args))

    def format_input(self, args: tuple[Any, ...]) -> list[Any]:
        """Apply the input formatters slot by slot."""
        formatted = []
        for index, arg in enumerate(args):
            formatter = (
                self._input_formatters[index]
                if index < len(self._input_formatters)
                else None
            )
            if formatter is None:
                formatted.append(arg)
                continue
            try:
                formatted.append(formatter(arg))
            except FormatterRejected:
                raise
            except (TypeError, ValueError, KeyError) as e:
                raise FormatterRejected(
                    f"Argument {index} of '{self._descriptor.name}' rejected: {e}"
                ) from e
        return formatted

    def request(self, *args: Any) -> RequestEnvelope:
        """Build the envelope for these arguments without sending it."""
        self.validate_args(args)
        target = self._descriptor.resolve_call(args)
        return build_request(target, self.format_input(args))

    def format_output(self, result: Any) -> Any:
        return apply_output_formatter(self._descriptor.output_formatter, result)

    def __call__(self, *args: Any) -> Any:
        """Call the remote method and block for the formatted result."""
        envelope = self.request(*args)
        return self.format_output(self._manager.send(envelope))

    def call_async(self, *args: Any, callback: Callback) -> Any:
        """Call the remote method without blocking.

        ``callback(error, result)`` fires exactly once, with either
        ``(None, formatted_result)`` or ``(error, None)``. Argument count
        and input formatting errors are raised here, before dispatch.
        Returns whatever the provider returns for the pending exchange.
        """
        envelope = self.request(*args)

        def _on_result(error: Exception | None, result: Any) -> None:
            if error is None:
                try:
                    result = self.format_output(result)
                except FormatterRejected as e:
                    error, result = e, None
            if error is not None:
                logger.debug("%s failed: %s", self._descriptor.name, error)
            callback(error, result)

        return self._manager.send_async(envelope, _on_result)

    def __repr__(self) -> str:
        return f"MethodBinding({self._descriptor.name!r})"


def compile_method(
    descriptor: MethodDescriptor,
    manager: RequestManager,
    config: ClientConfig | None = None,
) -> MethodBinding:
    """Compile a descriptor into a bound callable."""
    return MethodBinding(descriptor, manager, config or ClientConfig())
