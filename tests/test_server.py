"""Tests for the MCP tool layer over the exp namespace."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from exp_rpc.client import Client
from exp_rpc.errors import TransportFailure
from exp_rpc.protocol.jsonrpc import ResponseEnvelope, RpcErrorDetail

ADDRESS = "0x407d73d8a49eeb85d32cf465507dd71d507100c1"


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("exp_rpc.server", None)
        import exp_rpc.server as server_mod

    return server_mod


def _make_client(result=None, error=None) -> tuple[Client, MagicMock]:
    provider = MagicMock()
    provider.send.return_value = ResponseEnvelope(id=1, result=result, error=error)
    return Client(provider), provider


def test_tools_require_connection():
    server = _get_server_module()
    with pytest.raises(RuntimeError):
        server.call_method("get_compilers", [])


def test_list_operations():
    server = _get_server_module()
    ops = server.list_operations()

    names = [m["name"] for m in ops["methods"]]
    assert "get_balance" in names
    assert "compile.solidity" in names
    get_block = next(m for m in ops["methods"] if m["name"] == "get_block")
    assert get_block["params"] == 2
    assert get_block["call"].startswith("<resolved by")
    assert {p["name"] for p in ops["properties"]} == {
        "coinbase", "mining", "hashrate", "gas_price", "accounts", "block_number",
    }
    assert json.loads(server.resource_operations()) == ops


def test_call_method_dispatches_by_name():
    server = _get_server_module()
    client, provider = _make_client(result=["solidity"])

    with patch.object(server, "_get_client", return_value=client):
        result = server.call_method("get_compilers", [])

    assert result == {"method": "get_compilers", "result": ["solidity"]}
    assert provider.send.call_args.args[0].method == "exp_getCompilers"


def test_call_method_reports_binding_errors():
    server = _get_server_module()
    client, provider = _make_client()

    with patch.object(server, "_get_client", return_value=client):
        unknown = server.call_method("get_everything", [])
        wrong_arity = server.call_method("get_balance", [ADDRESS])

    assert "Unknown method" in unknown["error"]
    assert "Invalid number of parameters" in wrong_arity["error"]
    provider.send.assert_not_called()


def test_call_method_reports_remote_errors():
    server = _get_server_module()
    client, _ = _make_client(error=RpcErrorDetail(code=-32000, message="execution reverted"))

    with patch.object(server, "_get_client", return_value=client):
        result = server.call_method("call", [{"to": ADDRESS}, None])

    assert "execution reverted" in result["error"]


def test_read_property():
    server = _get_server_module()
    client, _ = _make_client(result="0x3b9aca00")

    with patch.object(server, "_get_client", return_value=client):
        assert server.read_property("gas_price") == {"property": "gas_price", "value": "1000000000"}
        assert "Unknown property" in server.read_property("difficulty")["error"]


def test_set_default_block():
    server = _get_server_module()
    client, provider = _make_client(result="0x0")

    with patch.object(server, "_get_client", return_value=client):
        assert server.set_default_block("pending") == {"default_block": "pending"}
        assert "error" in server.set_default_block("yesterday")
        server.get_balance(ADDRESS)

    assert provider.send.call_args.args[0].params == (ADDRESS, "pending")


def test_get_balance_and_block():
    server = _get_server_module()
    client, provider = _make_client(result="0x2386f26fc10000")

    with patch.object(server, "_get_client", return_value=client):
        assert server.get_balance(ADDRESS) == {"address": ADDRESS, "balance": "10000000000000000"}

        provider.send.return_value = ResponseEnvelope(id=2, result=None)
        assert "not found" in server.get_block(123)["error"]
        assert provider.send.call_args.args[0].method == "exp_getBlockByNumber"


def test_connect_and_disconnect():
    server = _get_server_module()
    provider = MagicMock()
    provider.url = "http://node.test:8545"
    provider.send.return_value = ResponseEnvelope(id=1, result="0x64")

    with patch.object(server, "HttpProvider", return_value=provider):
        result = server.connect("http://node.test:8545")

    assert result == {"connected": True, "url": "http://node.test:8545", "block_number": 100}
    assert server.connect("http://node.test:8545")["message"] == "Already connected"

    assert server.disconnect() == {"disconnected": True}
    provider.close.assert_called_once()
    with pytest.raises(RuntimeError):
        server.read_property("coinbase")


def test_connect_failure_closes_provider():
    server = _get_server_module()
    provider = MagicMock()
    provider.send.side_effect = TransportFailure("refused")

    with patch.object(server, "HttpProvider", return_value=provider):
        with pytest.raises(TransportFailure):
            server.connect("http://node.test:8545")

    provider.close.assert_called_once()
    with pytest.raises(RuntimeError):
        server.read_property("coinbase")
