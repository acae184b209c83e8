"""MCP server entry point for an exp node.

Exposes the exp namespace (methods, properties, default block) as tools
via the Model Context Protocol using the official Python MCP SDK with
stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import Client
from .config import DEFAULT_TIMEOUT, DEFAULT_URL
from .errors import ExpRpcError
from .protocol.exp import METHODS, PROPERTIES
from .transport.http_provider import HttpProvider

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "exp-rpc",
    instructions="MCP server exposing the exp JSON-RPC namespace of a node",
)

# Global connection state
_provider: HttpProvider | None = None
_client: Client | None = None


def _get_client() -> Client:
    """Get the connected client, raising if not connected."""
    if _client is None:
        raise RuntimeError(
            "Not connected to a node. Use the 'connect' tool first."
        )
    return _client


def _describe_call(call: Any) -> str:
    return call if isinstance(call, str) else f"<resolved by {call.__name__}>"


def _operations() -> dict[str, Any]:
    return {
        "methods": [
            {
                "name": d.name,
                "call": _describe_call(d.call),
                "params": d.params,
            }
            for d in METHODS
        ],
        "properties": [
            {"name": d.name, "getter": d.getter, "cached": d.cached}
            for d in PROPERTIES
        ],
    }


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(url: str = DEFAULT_URL, timeout: float = DEFAULT_TIMEOUT) -> dict[str, Any]:
    """Connect to a node's HTTP JSON-RPC endpoint.

    Reads the current block number to confirm the node answers.

    Args:
        url: Endpoint URL (default http://localhost:8545).
        timeout: Request timeout in seconds.
    """
    global _provider, _client
    if _client is not None and _provider is not None and _provider.url == url:
        return {"connected": True, "message": "Already connected", "url": url}

    disconnect()
    provider = HttpProvider(url, timeout=timeout)
    client = Client(provider)
    try:
        block_number = client.exp.block_number
    except ExpRpcError:
        provider.close()
        raise

    _provider, _client = provider, client
    logger.info("Connected to %s at block %s", url, block_number)
    return {"connected": True, "url": url, "block_number": block_number}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the node."""
    global _provider, _client
    if _provider is not None:
        _provider.close()
    _provider = None
    _client = None
    return {"disconnected": True}


# ─── GENERIC DISPATCH TOOLS ───────────────────────────────────────────

@mcp.tool()
def list_operations() -> dict[str, Any]:
    """List every exp method (with arity) and property."""
    return _operations()


@mcp.tool()
def call_method(name: str, args: list[Any] | None = None) -> dict[str, Any]:
    """Call an exp method by its logical name.

    Args:
        name: Method name, e.g. 'get_balance' or 'compile.solidity'.
        args: Positional arguments; use null for an omitted default block.
    """
    exp = _get_client().exp
    if name not in exp.method_names():
        return {"error": f"Unknown method '{name}'. Valid: {exp.method_names()}"}
    try:
        result = exp.method_binding(name)(*(args or []))
    except ExpRpcError as e:
        return {"error": str(e)}
    return {"method": name, "result": result}


@mcp.tool()
def read_property(name: str) -> dict[str, Any]:
    """Read an exp property (coinbase, mining, hashrate, gas_price, accounts, block_number).

    Args:
        name: Property name.
    """
    exp = _get_client().exp
    if name not in exp.property_names():
        return {"error": f"Unknown property '{name}'. Valid: {exp.property_names()}"}
    try:
        value = exp.property_binding(name).get()
    except ExpRpcError as e:
        return {"error": str(e)}
    return {"property": name, "value": value}


@mcp.tool()
def set_default_block(block: str | int) -> dict[str, Any]:
    """Set the block used when a query omits its block argument.

    Args:
        block: 'latest', 'earliest', 'pending' or a block number.
    """
    exp = _get_client().exp
    try:
        exp.default_block = block
    except ExpRpcError as e:
        return {"error": str(e)}
    return {"default_block": exp.default_block}


# ─── CONVENIENCE TOOLS ────────────────────────────────────────────────

@mcp.tool()
def get_balance(address: str, block: str | int | None = None) -> dict[str, Any]:
    """Get an account balance in base units as a decimal string.

    Args:
        address: 0x-prefixed account address.
        block: Block to query; the default block when omitted.
    """
    try:
        balance = _get_client().exp.get_balance(address, block)
    except ExpRpcError as e:
        return {"error": str(e)}
    return {"address": address, "balance": balance}


@mcp.tool()
def get_block(block: str | int, full_transactions: bool = False) -> dict[str, Any]:
    """Get a block by hash or number.

    Args:
        block: Block hash (0x...), block number, or 'latest'/'earliest'/'pending'.
        full_transactions: Include transaction objects instead of hashes.
    """
    try:
        result = _get_client().exp.get_block(block, full_transactions)
    except ExpRpcError as e:
        return {"error": str(e)}
    if result is None:
        return {"error": f"Block {block!r} not found"}
    return result


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("exp://operations")
def resource_operations() -> str:
    """Catalog of exp methods and properties."""
    return json.dumps(_operations(), indent=2)


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def inspect_account(address: str) -> str:
    """Guide the AI through summarizing an account's on-chain state.

    Args:
        address: Account address to inspect.
    """
    return f"""Inspect account {address}.
Steps:
- Use get_balance for the current balance
- Use call_method with 'get_transaction_count' and [address, null] for the nonce
- Use call_method with 'get_code' and [address, null] to tell contracts from plain accounts

Summarize balance, nonce and whether the account holds code."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
