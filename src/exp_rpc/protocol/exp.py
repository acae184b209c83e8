"""Descriptors for the ``exp`` namespace of a node.

An example method descriptor::

    MethodDescriptor(
        name="get_block",
        call=block_call,
        params=2,
        input_formatter=(input_block_number_formatter, input_bool_formatter),
        output_formatter=output_block_formatter,
    )

Operations that address a block either by hash or by number pick their
target name from the shape of the raw first argument.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from ..binding.descriptors import MethodDescriptor, PropertyDescriptor
from ..utils.hexutils import to_decimal, to_hex
from .formatters import (
    input_address_formatter,
    input_block_number_formatter,
    input_bool_formatter,
    input_call_formatter,
    input_default_block_number_formatter,
    input_transaction_formatter,
    output_big_number_formatter,
    output_block_formatter,
    output_transaction_formatter,
    output_transaction_receipt_formatter,
)

NAMESPACE = "exp"


def is_hash_argument(args: Sequence[Any]) -> bool:
    """True when the first raw argument looks like a ``0x`` identifier."""
    return bool(args) and isinstance(args[0], str) and args[0].startswith("0x")


def hash_or_number(by_hash: str, by_number: str) -> Callable[[Sequence[Any]], str]:
    """Build a resolver choosing between a by-hash and a by-number target."""

    def resolve(args: Sequence[Any]) -> str:
        return by_hash if is_hash_argument(args) else by_number

    resolve.__name__ = f"resolve_{by_hash}"
    return resolve


block_call = hash_or_number("exp_getBlockByHash", "exp_getBlockByNumber")
transaction_from_block_call = hash_or_number(
    "exp_getTransactionByBlockHashAndIndex",
    "exp_getTransactionByBlockNumberAndIndex",
)
uncle_call = hash_or_number(
    "exp_getUncleByBlockHashAndIndex", "exp_getUncleByBlockNumberAndIndex"
)
block_transaction_count_call = hash_or_number(
    "exp_getBlockTransactionCountByHash", "exp_getBlockTransactionCountByNumber"
)
uncle_count_call = hash_or_number(
    "exp_getUncleCountByBlockHash", "exp_getUncleCountByBlockNumber"
)


METHODS: tuple[MethodDescriptor, ...] = (
    MethodDescriptor(
        name="get_balance",
        call="exp_getBalance",
        params=2,
        input_formatter=(input_address_formatter, input_default_block_number_formatter),
        output_formatter=output_big_number_formatter,
    ),
    MethodDescriptor(
        name="get_storage_at",
        call="exp_getStorageAt",
        params=3,
        input_formatter=(None, to_hex, input_default_block_number_formatter),
    ),
    MethodDescriptor(
        name="get_code",
        call="exp_getCode",
        params=2,
        input_formatter=(input_address_formatter, input_default_block_number_formatter),
    ),
    MethodDescriptor(
        name="get_block",
        call=block_call,
        params=2,
        input_formatter=(input_block_number_formatter, input_bool_formatter),
        output_formatter=output_block_formatter,
    ),
    MethodDescriptor(
        name="get_uncle",
        call=uncle_call,
        params=2,
        input_formatter=(input_block_number_formatter, to_hex),
        output_formatter=output_block_formatter,
    ),
    MethodDescriptor(
        name="get_compilers",
        call="exp_getCompilers",
        params=0,
    ),
    MethodDescriptor(
        name="get_block_transaction_count",
        call=block_transaction_count_call,
        params=1,
        input_formatter=(input_block_number_formatter,),
        output_formatter=to_decimal,
    ),
    MethodDescriptor(
        name="get_block_uncle_count",
        call=uncle_count_call,
        params=1,
        input_formatter=(input_block_number_formatter,),
        output_formatter=to_decimal,
    ),
    MethodDescriptor(
        name="get_transaction",
        call="exp_getTransactionByHash",
        params=1,
        output_formatter=output_transaction_formatter,
    ),
    MethodDescriptor(
        name="get_transaction_from_block",
        call=transaction_from_block_call,
        params=2,
        input_formatter=(input_block_number_formatter, to_hex),
        output_formatter=output_transaction_formatter,
    ),
    MethodDescriptor(
        name="get_transaction_receipt",
        call="exp_getTransactionReceipt",
        params=1,
        output_formatter=output_transaction_receipt_formatter,
    ),
    MethodDescriptor(
        name="get_transaction_count",
        call="exp_getTransactionCount",
        params=2,
        input_formatter=(None, input_default_block_number_formatter),
        output_formatter=to_decimal,
    ),
    MethodDescriptor(
        name="call",
        call="exp_call",
        params=2,
        input_formatter=(input_call_formatter, input_default_block_number_formatter),
    ),
    MethodDescriptor(
        name="estimate_gas",
        call="exp_estimateGas",
        params=1,
        input_formatter=(input_call_formatter,),
        output_formatter=to_decimal,
    ),
    MethodDescriptor(
        name="send_raw_transaction",
        call="exp_sendRawTransaction",
        params=1,
        input_formatter=(None,),
    ),
    MethodDescriptor(
        name="send_transaction",
        call="exp_sendTransaction",
        params=1,
        input_formatter=(input_transaction_formatter,),
    ),
    MethodDescriptor(name="compile.solidity", call="exp_compileSolidity", params=1),
    MethodDescriptor(name="compile.lll", call="exp_compileLLL", params=1),
    MethodDescriptor(name="compile.serpent", call="exp_compileSerpent", params=1),
    MethodDescriptor(name="submit_work", call="exp_submitWork", params=3),
    MethodDescriptor(name="get_work", call="exp_getWork", params=0),
)

# All live reads: every access goes to the node.
PROPERTIES: tuple[PropertyDescriptor, ...] = (
    PropertyDescriptor(name="coinbase", getter="exp_coinbase"),
    PropertyDescriptor(name="mining", getter="exp_mining"),
    PropertyDescriptor(name="hashrate", getter="exp_hashrate", output_formatter=to_decimal),
    PropertyDescriptor(
        name="gas_price", getter="exp_gasPrice", output_formatter=output_big_number_formatter
    ),
    PropertyDescriptor(name="accounts", getter="exp_accounts"),
    PropertyDescriptor(
        name="block_number", getter="exp_blockNumber", output_formatter=to_decimal
    ),
)
