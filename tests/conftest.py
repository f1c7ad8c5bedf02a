from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from tictactoe_query import config

CONTRACT = "0x0f6E0e3F5df62d4067D9969Cd3c9F34cc2b238C9"


class FakeNode:
    """Records JSON-RPC requests and answers them from a method table."""

    def __init__(self, results: dict[str, Any] | None = None) -> None:
        self.results = results or {}
        self.requests: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        answer = self.results.get(body["method"])
        if callable(answer):
            answer = answer(body)
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": answer})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's TICTACTOE_* settings out of the tests."""
    for name in (
        config.RPC_URL_ENV,
        config.CONTRACT_ADDRESS_ENV,
        config.ABI_PATH_ENV,
        config.BLOCK_ENV,
        config.TIMEOUT_ENV,
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def uint256_hex() -> Callable[[int], str]:
    return lambda value: "0x" + value.to_bytes(32, "big").hex()


@pytest.fixture()
def contract_address() -> str:
    return CONTRACT


@pytest.fixture()
def make_node() -> Callable[..., FakeNode]:
    return FakeNode
