"""Input and output formatters for exp namespace operations.

Input formatters turn Python-side arguments into protocol values; output
formatters decode protocol results. All of them are pure and raise
``FormatterRejected`` on a value outside their accepted shape.

Formatters that depend on client defaults (default block, default
account) are decorated with :func:`config_aware` and take the client's
``ClientConfig`` as a ``config`` keyword; the method compiler binds it.
"""

from __future__ import annotations

from typing import Any, Callable

from ..config import PREDEFINED_BLOCKS, ClientConfig
from ..errors import FormatterRejected
from ..utils.hexutils import (
    from_decimal,
    is_address,
    is_strict_address,
    to_big_number,
    to_decimal,
    to_hex,
)

# Python-friendly spellings accepted in call/transaction objects
FIELD_ALIASES: dict[str, str] = {
    "from_": "from",
    "gas_price": "gasPrice",
}

QUANTITY_FIELDS = ("gasPrice", "gas", "value", "nonce")


def config_aware(fn: Callable) -> Callable:
    """Mark a formatter as needing the client config bound at compile time."""
    fn.config_aware = True
    return fn


def is_config_aware(fn: Callable | None) -> bool:
    return bool(getattr(fn, "config_aware", False))


def is_predefined_block_number(block_number: Any) -> bool:
    return isinstance(block_number, str) and block_number in PREDEFINED_BLOCKS


# ─── INPUT FORMATTERS ────────────────────────────────────────────────


def input_address_formatter(address: Any) -> str:
    """Normalize an address to its ``0x``-prefixed form."""
    if is_strict_address(address):
        return address
    if is_address(address):
        return "0x" + address
    raise FormatterRejected(f"Invalid address: {address!r}")


def input_block_number_formatter(block_number: Any) -> str | None:
    if block_number is None:
        return None
    if is_predefined_block_number(block_number):
        return block_number
    return to_hex(block_number)


@config_aware
def input_default_block_number_formatter(
    block_number: Any, config: ClientConfig
) -> str | None:
    """Fall back to the configured default block when none is given."""
    if block_number is None:
        return input_block_number_formatter(config.default_block)
    return input_block_number_formatter(block_number)


def input_bool_formatter(value: Any) -> bool:
    return bool(value)


def _normalize_options(options: Any, config: ClientConfig) -> dict[str, Any]:
    if not isinstance(options, dict):
        raise FormatterRejected(
            f"Expected a call/transaction object, got {type(options).__name__}"
        )
    result = {FIELD_ALIASES.get(key, key): value for key, value in options.items()}
    result["from"] = result.get("from") or config.default_account
    if result["from"] is None:
        del result["from"]
    else:
        result["from"] = input_address_formatter(result["from"])
    if result.get("to"):
        result["to"] = input_address_formatter(result["to"])
    for key in QUANTITY_FIELDS:
        if result.get(key) is not None:
            result[key] = from_decimal(result[key])
    return result


@config_aware
def input_call_formatter(options: Any, config: ClientConfig) -> dict[str, Any]:
    """Format a call object; ``from`` is optional."""
    return _normalize_options(options, config)


@config_aware
def input_transaction_formatter(
    options: Any, config: ClientConfig
) -> dict[str, Any]:
    """Format a transaction object; ``from`` is required."""
    result = _normalize_options(options, config)
    if "from" not in result:
        raise FormatterRejected("Transaction requires a 'from' address")
    return result


# ─── OUTPUT FORMATTERS ───────────────────────────────────────────────


def output_big_number_formatter(number: Any) -> str:
    """Decode a quantity into its full-precision decimal string."""
    return str(to_big_number(number))


def _require_dict(value: Any, kind: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise FormatterRejected(f"Expected a {kind} object, got {type(value).__name__}")
    return dict(value)


def _decode_fields(
    obj: dict[str, Any],
    fields: tuple[str, ...],
    decode: Callable[[Any], Any],
    nullable: bool = False,
) -> None:
    for key in fields:
        if key not in obj:
            continue
        if obj[key] is None and nullable:
            continue
        obj[key] = decode(obj[key])


def output_log_formatter(log: Any) -> dict[str, Any]:
    log = _require_dict(log, "log")
    _decode_fields(
        log, ("blockNumber", "transactionIndex", "logIndex"), to_decimal, nullable=True
    )
    return log


def output_transaction_formatter(tx: Any) -> dict[str, Any]:
    tx = _require_dict(tx, "transaction")
    _decode_fields(tx, ("blockNumber", "transactionIndex"), to_decimal, nullable=True)
    _decode_fields(tx, ("nonce", "gas"), to_decimal)
    _decode_fields(tx, ("gasPrice", "value"), output_big_number_formatter)
    return tx


def output_transaction_receipt_formatter(receipt: Any) -> dict[str, Any]:
    receipt = _require_dict(receipt, "receipt")
    _decode_fields(
        receipt, ("blockNumber", "transactionIndex"), to_decimal, nullable=True
    )
    _decode_fields(receipt, ("cumulativeGasUsed", "gasUsed"), to_decimal)
    if isinstance(receipt.get("logs"), list):
        receipt["logs"] = [output_log_formatter(log) for log in receipt["logs"]]
    return receipt


def output_block_formatter(block: Any) -> dict[str, Any]:
    """Decode a block; full transaction objects are decoded too.

    Transactions given as hashes (plain strings) are left untouched.
    """
    block = _require_dict(block, "block")
    _decode_fields(block, ("gasLimit", "gasUsed", "size", "timestamp"), to_decimal)
    _decode_fields(block, ("number",), to_decimal, nullable=True)
    _decode_fields(block, ("difficulty", "totalDifficulty"), output_big_number_formatter)
    if isinstance(block.get("transactions"), list):
        block["transactions"] = [
            tx if isinstance(tx, str) else output_transaction_formatter(tx)
            for tx in block["transactions"]
        ]
    return block
