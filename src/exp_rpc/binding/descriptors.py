"""Descriptors: static configuration records compiled into bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

Formatter = Callable[..., Any]
CallResolver = Callable[[Sequence[Any]], str]


@dataclass(frozen=True)
class MethodDescriptor:
    """Describes one remote operation.

    Attributes:
        name: Dotted logical name, e.g. ``compile.solidity``.
        call: Fixed target-operation name, or a pure resolver that picks
            one from the raw (unformatted) argument list.
        params: Exact number of positional arguments.
        input_formatter: One slot per leading argument; ``None`` slots
            pass the argument through unchanged.
        output_formatter: Applied to a non-``None`` result.
    """

    name: str
    call: Union[str, CallResolver]
    params: int = 0
    input_formatter: tuple[Optional[Formatter], ...] = ()
    output_formatter: Optional[Formatter] = None

    def __post_init__(self) -> None:
        if self.params < 0:
            raise ValueError(f"params must be non-negative, got {self.params}")
        # Accept lists for convenience; keep the record hashable.
        object.__setattr__(self, "input_formatter", tuple(self.input_formatter))
        if len(self.input_formatter) > self.params:
            raise ValueError(
                f"'{self.name}' declares {len(self.input_formatter)} input "
                f"formatters for {self.params} params"
            )

    def resolve_call(self, args: Sequence[Any]) -> str:
        """Return the target-operation name for these raw arguments."""
        if callable(self.call):
            return self.call(args)
        return self.call


@dataclass(frozen=True)
class PropertyDescriptor:
    """Describes one read-only remote property.

    ``cached`` selects the read policy: live properties hit the node on
    every access; cached ones serve the last known value (seeded with
    ``default``) and only go to the node on ``refresh()`` or when no value
    is known yet.
    """

    name: str
    getter: str
    output_formatter: Optional[Formatter] = None
    cached: bool = False
    default: Any = None
