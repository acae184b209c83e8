"""Tests for the HTTP JSON-RPC provider using httpx mock transports."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock

import httpx
import pytest

from exp_rpc.client import Client
from exp_rpc.errors import InvalidResponse, RemoteError, TransportFailure
from exp_rpc.protocol.jsonrpc import build_request
from exp_rpc.transport.base import Provider
from exp_rpc.transport.http_provider import HttpProvider

URL = "http://node.test:8545"


def _echo_handler(result):
    """Handler answering every request with ``result`` and recording payloads."""
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.append(payload)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})

    return handler, seen


def test_provider_satisfies_protocol():
    assert isinstance(HttpProvider(URL), Provider)


def test_send_frames_payload_with_increasing_ids():
    handler, seen = _echo_handler("0x10")
    with HttpProvider(URL, transport=httpx.MockTransport(handler)) as provider:
        first = provider.send(build_request("exp_blockNumber"))
        second = provider.send(build_request("exp_getBalance", ["0xabc", "latest"]))

    assert first.result == "0x10"
    assert second.id == 2
    assert seen[0] == {"jsonrpc": "2.0", "id": 1, "method": "exp_blockNumber", "params": []}
    assert seen[1]["method"] == "exp_getBalance"
    assert seen[1]["params"] == ["0xabc", "latest"]


def test_send_connection_error_is_transport_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    provider = HttpProvider(URL, transport=httpx.MockTransport(handler))
    with pytest.raises(TransportFailure):
        provider.send(build_request("exp_coinbase"))


def test_send_http_error_status_is_transport_failure():
    provider = HttpProvider(URL, transport=httpx.MockTransport(lambda r: httpx.Response(500)))
    with pytest.raises(TransportFailure):
        provider.send(build_request("exp_coinbase"))


def test_send_non_jsonrpc_body_is_invalid_response():
    provider = HttpProvider(
        URL, transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"hello": 1}))
    )
    with pytest.raises(InvalidResponse):
        provider.send(build_request("exp_coinbase"))


def test_client_end_to_end_over_http():
    """A bound method formats, sends through httpx, and formats the reply."""
    handler, seen = _echo_handler("0x2386f26fc10000")
    client = Client(HttpProvider(URL, transport=httpx.MockTransport(handler)))

    balance = client.exp.get_balance("0x407d73d8a49eeb85d32cf465507dd71d507100c1", None)

    assert balance == "10000000000000000"
    assert seen[0]["method"] == "exp_getBalance"
    assert seen[0]["params"] == ["0x407d73d8a49eeb85d32cf465507dd71d507100c1", "latest"]


def test_client_remote_error_over_http():
    def handler(request):
        payload = json.loads(request.content)
        return httpx.Response(200, json={
            "jsonrpc": "2.0", "id": payload["id"],
            "error": {"code": -32601, "message": "Method not found"},
        })

    client = Client(HttpProvider(URL, transport=httpx.MockTransport(handler)))
    with pytest.raises(RemoteError) as excinfo:
        client.exp.get_work()
    assert excinfo.value.message == "Method not found"


def test_send_async_invokes_callback_once():
    """The callback fires once from the event loop with the response."""
    handler, seen = _echo_handler(["solidity"])
    callback = MagicMock()

    async def run():
        provider = HttpProvider(URL, async_transport=httpx.MockTransport(handler))
        task = provider.send_async(build_request("exp_getCompilers"), callback)
        await asyncio.wait([task])
        await asyncio.sleep(0)
        await provider.aclose()

    asyncio.run(run())

    callback.assert_called_once()
    error, response = callback.call_args.args
    assert error is None
    assert response.result == ["solidity"]
    assert seen[0]["method"] == "exp_getCompilers"


def test_send_async_transport_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    callback = MagicMock()

    async def run():
        provider = HttpProvider(URL, async_transport=httpx.MockTransport(handler))
        task = provider.send_async(build_request("exp_coinbase"), callback)
        await asyncio.wait([task])
        await asyncio.sleep(0)
        await provider.aclose()

    asyncio.run(run())

    callback.assert_called_once()
    error, response = callback.call_args.args
    assert isinstance(error, TransportFailure)
    assert response is None


def test_method_call_async_over_http():
    """Bound methods in callback mode run on the loop and format the result."""
    handler, _ = _echo_handler("0x2a")
    callback = MagicMock()

    async def run():
        provider = HttpProvider(URL, async_transport=httpx.MockTransport(handler))
        client = Client(provider)
        task = client.exp.get_block_transaction_count.call_async(5, callback=callback)
        callback.assert_not_called()
        await asyncio.wait([task])
        await asyncio.sleep(0)
        await provider.aclose()

    asyncio.run(run())
    callback.assert_called_once_with(None, 42)


def test_send_async_without_loop_reports_through_callback():
    """Outside an event loop nothing is sent and the callback gets a TransportFailure."""
    handler, seen = _echo_handler("0x1")
    provider = HttpProvider(URL, async_transport=httpx.MockTransport(handler))
    callback = MagicMock()

    assert provider.send_async(build_request("exp_coinbase"), callback) is None

    callback.assert_called_once()
    error, response = callback.call_args.args
    assert isinstance(error, TransportFailure)
    assert response is None
    assert seen == []


def test_method_call_async_from_sync_code():
    """call_async from plain synchronous code fires the callback once with the failure."""
    handler, seen = _echo_handler(["solidity"])
    client = Client(HttpProvider(URL, async_transport=httpx.MockTransport(handler)))
    callback = MagicMock()

    client.exp.get_compilers.call_async(callback=callback)

    callback.assert_called_once()
    error, result = callback.call_args.args
    assert isinstance(error, TransportFailure)
    assert result is None
    assert seen == []


def test_async_context_manager_closes_async_client():
    """Leaving ``async with`` closes the lazily created AsyncClient."""
    handler, _ = _echo_handler("0x1")
    callback = MagicMock()
    state = {}

    async def run():
        async with HttpProvider(URL, async_transport=httpx.MockTransport(handler)) as provider:
            task = provider.send_async(build_request("exp_blockNumber"), callback)
            await asyncio.wait([task])
            await asyncio.sleep(0)
            state["client"] = provider._async_client
        state["after"] = provider._async_client

    asyncio.run(run())

    assert state["client"].is_closed
    assert state["after"] is None
    callback.assert_called_once()
