"""
JSON-RPC Client for EVM-compatible nodes.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Only the read-side methods needed for contract queries are provided.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Union

import httpx

from ..errors import RpcResponseError, RpcTransportError

logger = logging.getLogger(__name__)

BLOCK_TAGS = ("latest", "earliest", "pending", "safe", "finalized")


def normalize_block_tag(value: Union[str, int, None]) -> str:
    """
    Turn a block tag or block number into an RPC block parameter.

    Numbers (int, decimal string or 0x hex string) become hex quantities.

    Raises:
        ValueError: If the value is neither a known tag nor a block number
    """
    if value is None:
        return "latest"
    if isinstance(value, bool):
        raise ValueError(f"Invalid block: {value!r}")
    if isinstance(value, int):
        number = value
    else:
        text = value.strip().lower()
        if text in BLOCK_TAGS:
            return text
        try:
            number = int(text, 16) if text.startswith("0x") else int(text, 10)
        except ValueError:
            raise ValueError(
                f"Invalid block {value!r}: expected one of {', '.join(BLOCK_TAGS)} "
                f"or a block number"
            ) from None
    if number < 0:
        raise ValueError(f"Block number must be non-negative: {value!r}")
    return hex(number)


class RpcClient:
    """
    Async JSON-RPC 2.0 client over HTTP.

    Use as an async context manager; the underlying connection pool is
    closed on exit.
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcTransportError: If the endpoint cannot be reached or answers
                with an HTTP error status
            RpcResponseError: If the body is not a JSON-RPC success response
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("RPC %s -> %s %s", self.url, method, params)

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise RpcTransportError(f"RPC request to {self.url} timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise RpcTransportError(
                f"RPC endpoint {self.url} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RpcTransportError(f"Cannot reach RPC endpoint {self.url}: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise RpcResponseError(f"RPC endpoint {self.url} returned non-JSON body") from exc

        if not isinstance(data, dict):
            raise RpcResponseError(f"Unexpected RPC response: {data!r}")

        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcResponseError(
                    f"RPC error: {error.get('message', error)}",
                    code=error.get("code"),
                )
            raise RpcResponseError(f"RPC error: {error}")

        if "result" not in data:
            raise RpcResponseError(f"RPC response for {method} has no result")

        logger.debug("RPC %s <- %r", method, data["result"])
        return data["result"]

    async def eth_call(self, to: str, data: str, block: Union[str, int, None] = "latest") -> str:
        """
        Read-only contract call.

        Returns:
            0x-prefixed hex return data
        """
        result = await self.request(
            "eth_call",
            [{"to": to, "data": data}, normalize_block_tag(block)],
        )
        if not isinstance(result, str):
            raise RpcResponseError(f"eth_call returned non-string result: {result!r}")
        return result

    async def chain_id(self) -> int:
        result = await self.request("eth_chainId", [])
        return _parse_quantity(result, "eth_chainId")

    async def block_number(self) -> int:
        result = await self.request("eth_blockNumber", [])
        return _parse_quantity(result, "eth_blockNumber")


def _parse_quantity(value: Any, method: str) -> int:
    try:
        return int(value, 16)
    except (TypeError, ValueError) as exc:
        raise RpcResponseError(f"{method} returned invalid quantity: {value!r}") from exc
