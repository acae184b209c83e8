"""Client configuration and connection defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import FormatterRejected

DEFAULT_URL = "http://localhost:8545"
DEFAULT_TIMEOUT = 10.0
DEFAULT_BLOCK = "latest"

PREDEFINED_BLOCKS = ("latest", "earliest", "pending")


def validate_default_block(block: str | int) -> str | int:
    """Check that ``block`` is a predefined token or a block number."""
    if isinstance(block, str) and block in PREDEFINED_BLOCKS:
        return block
    if isinstance(block, int) and not isinstance(block, bool) and block >= 0:
        return block
    raise FormatterRejected(
        f"Default block must be one of {PREDEFINED_BLOCKS} "
        f"or a non-negative block number, got {block!r}"
    )


@dataclass
class ClientConfig:
    """Per-client defaults consulted by the config-aware formatters.

    ``default_block`` and ``default_account`` are local values: reading
    them never touches the network.
    """

    default_block: str | int = DEFAULT_BLOCK
    default_account: str | None = None

    def __setattr__(self, name: str, value) -> None:
        if name == "default_block":
            value = validate_default_block(value)
        super().__setattr__(name, value)
