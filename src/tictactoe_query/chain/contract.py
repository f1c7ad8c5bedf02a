from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence, Union

from .abi import decode_result, encode_call, find_function
from .address import parse_address
from .rpc import RpcClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractProxy:
    """A deployed contract bound to an ABI and an RPC client."""

    client: RpcClient
    address: str
    abi: Sequence[dict[str, Any]]

    async def query(
        self,
        function_name: str,
        args: Sequence[Any] = (),
        block: Union[str, int, None] = "latest",
    ) -> Any:
        """
        Read from the contract (eth_call).

        Returns:
            The decoded value for single-output functions, otherwise a tuple
        """
        entry = find_function(self.abi, function_name)
        calldata = encode_call(entry, args)
        logger.debug("Querying %s.%s at block %s", self.address, function_name, block)

        result = await self.client.eth_call(self.address, calldata, block)
        decoded = decode_result(entry, result)

        if len(decoded) == 1:
            return decoded[0]
        return decoded


def bind(client: RpcClient, address: str, abi: Sequence[dict[str, Any]]) -> ContractProxy:
    return ContractProxy(client=client, address=parse_address(address), abi=abi)
