"""Tests for the async JSON-RPC client against a fake node."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from tictactoe_query.chain.rpc import RpcClient, normalize_block_tag
from tictactoe_query.errors import RpcResponseError, RpcTransportError

URL = "https://rpc.example.test"


def _run(coro):
    return asyncio.run(coro)


async def _request(transport: httpx.AsyncBaseTransport, method: str, params: list):
    async with RpcClient(URL, transport=transport) as client:
        return await client.request(method, params)


class TestNormalizeBlockTag:
    @pytest.mark.parametrize("tag", ["latest", "earliest", "pending", "safe", "finalized"])
    def test_named_tags(self, tag: str) -> None:
        assert normalize_block_tag(tag) == tag

    def test_tag_case_and_whitespace(self) -> None:
        assert normalize_block_tag(" Latest ") == "latest"

    def test_none_means_latest(self) -> None:
        assert normalize_block_tag(None) == "latest"

    @pytest.mark.parametrize(
        "value, expected",
        [(0, "0x0"), (255, "0xff"), ("1000", "0x3e8"), ("0x3E8", "0x3e8")],
    )
    def test_block_numbers(self, value, expected: str) -> None:
        assert normalize_block_tag(value) == expected

    @pytest.mark.parametrize("value", ["newest", "-1", -5, "0xzz", True])
    def test_invalid(self, value) -> None:
        with pytest.raises(ValueError):
            normalize_block_tag(value)


class TestRequest:
    def test_envelope_and_result(self, make_node) -> None:
        node = make_node({"eth_blockNumber": "0x10"})
        assert _run(_request(node.transport, "eth_blockNumber", [])) == "0x10"
        assert node.requests == [
            {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1}
        ]

    def test_ids_increase(self, make_node) -> None:
        node = make_node({"eth_chainId": "0xaef3", "eth_blockNumber": "0x1"})

        async def scenario():
            async with RpcClient(URL, transport=node.transport) as client:
                await client.chain_id()
                await client.block_number()

        _run(scenario())
        assert [r["id"] for r in node.requests] == [1, 2]

    def test_error_object(self, make_node) -> None:
        def reverted(body):
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": -32000, "message": "execution reverted"},
                },
            )

        node = make_node({"eth_call": reverted})
        with pytest.raises(RpcResponseError, match="execution reverted") as excinfo:
            _run(_request(node.transport, "eth_call", []))
        assert excinfo.value.code == -32000
        assert excinfo.value.exit_code == 5

    def test_missing_result(self, make_node) -> None:
        node = make_node({"eth_call": lambda body: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})})
        with pytest.raises(RpcResponseError, match="no result"):
            _run(_request(node.transport, "eth_call", []))

    def test_non_json_body(self, make_node) -> None:
        node = make_node({"eth_call": lambda body: httpx.Response(200, text="<html>bad gateway</html>")})
        with pytest.raises(RpcResponseError, match="non-JSON"):
            _run(_request(node.transport, "eth_call", []))

    def test_http_status_error(self, make_node) -> None:
        node = make_node({"eth_call": lambda body: httpx.Response(503, text="unavailable")})
        with pytest.raises(RpcTransportError, match="HTTP 503"):
            _run(_request(node.transport, "eth_call", []))

    def test_connection_refused(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RpcTransportError, match="Cannot reach") as excinfo:
            _run(_request(httpx.MockTransport(refuse), "eth_call", []))
        assert excinfo.value.exit_code == 4

    def test_timeout(self) -> None:
        def stall(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        with pytest.raises(RpcTransportError, match="timed out"):
            _run(_request(httpx.MockTransport(stall), "eth_call", []))


class TestMethods:
    def test_eth_call_sends_explicit_block(self, make_node) -> None:
        node = make_node({"eth_call": "0x"})

        async def scenario():
            async with RpcClient(URL, transport=node.transport) as client:
                return await client.eth_call("0x" + "22" * 20, "0xabcdef01", 1234)

        assert _run(scenario()) == "0x"
        assert node.requests[0]["params"] == [
            {"to": "0x" + "22" * 20, "data": "0xabcdef01"},
            "0x4d2",
        ]

    def test_eth_call_rejects_non_string(self, make_node) -> None:
        node = make_node({"eth_call": None})

        async def scenario():
            async with RpcClient(URL, transport=node.transport) as client:
                return await client.eth_call("0x" + "22" * 20, "0x")

        with pytest.raises(RpcResponseError, match="non-string"):
            _run(scenario())

    def test_chain_id_and_block_number(self, make_node) -> None:
        node = make_node({"eth_chainId": "0xaef3", "eth_blockNumber": "0x1b4"})

        async def scenario():
            async with RpcClient(URL, transport=node.transport) as client:
                return await client.chain_id(), await client.block_number()

        assert _run(scenario()) == (44787, 436)

    def test_invalid_quantity(self, make_node) -> None:
        node = make_node({"eth_chainId": "celo"})

        async def scenario():
            async with RpcClient(URL, transport=node.transport) as client:
                return await client.chain_id()

        with pytest.raises(RpcResponseError, match="invalid quantity"):
            _run(scenario())
