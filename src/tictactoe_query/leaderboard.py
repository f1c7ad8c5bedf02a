"""
Leaderboard query workflow.

Opens the RPC transport, binds the TicTacToe contract and reads
getLeaderboardLength() once. Failures propagate as LeaderboardError
subclasses; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import httpx

from . import config
from .chain.abi import find_function, load_abi, output_types
from .chain.address import parse_address
from .chain.contract import bind
from .chain.rpc import RpcClient, normalize_block_tag
from .errors import AbiInvalidError

logger = logging.getLogger(__name__)

LEADERBOARD_FUNCTION = "getLeaderboardLength"
REPORT_LABEL = "Total leaderboard"


@dataclass(frozen=True)
class LeaderboardQuery:
    """
    Where and how to read the leaderboard length.

    Unset fields fall back to the environment, then to the Celo
    Alfajores defaults. The contract address is validated on
    construction, before any network traffic.
    """

    rpc_url: str = field(default_factory=config.get_rpc_url)
    contract_address: str = field(default_factory=config.get_contract_address)
    abi_path: Optional[Path] = field(default_factory=config.get_abi_path)
    block: str = field(default_factory=config.get_block)
    timeout: Optional[float] = field(default_factory=config.get_timeout)

    def __post_init__(self) -> None:
        object.__setattr__(self, "contract_address", parse_address(self.contract_address))
        object.__setattr__(self, "block", normalize_block_tag(self.block))
        if self.timeout is not None:
            object.__setattr__(self, "timeout", config.timeout_seconds(self.timeout))


async def fetch_leaderboard_length(
    query: Optional[LeaderboardQuery] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """
    Read the current leaderboard length from the contract.

    Args:
        query: Endpoint, contract and block settings (default: environment)
        transport: Optional httpx transport, for tests

    Returns:
        The leaderboard length as an unsigned 256-bit integer

    Raises:
        LeaderboardError: On any failure along the way
    """
    query = query or LeaderboardQuery()

    abi = load_abi(query.abi_path)
    entry = find_function(abi, LEADERBOARD_FUNCTION)
    if output_types(entry) != ["uint256"]:
        raise AbiInvalidError(
            f"{LEADERBOARD_FUNCTION} must return a single uint256, "
            f"ABI declares ({','.join(output_types(entry))})"
        )

    async with RpcClient(query.rpc_url, timeout=query.timeout, transport=transport) as client:
        contract = bind(client, query.contract_address, abi)
        length = await contract.query(LEADERBOARD_FUNCTION, (), block=query.block)

    logger.debug("Leaderboard length at %s: %s", query.block, length)
    return length


def format_report(length: int) -> str:
    return f"{REPORT_LABEL}: {length}"


async def fetch_chain_status(
    query: Optional[LeaderboardQuery] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[str, int]:
    """Chain id and latest block number of the configured endpoint."""
    query = query or LeaderboardQuery()
    async with RpcClient(query.rpc_url, timeout=query.timeout, transport=transport) as client:
        chain_id = await client.chain_id()
        block_number = await client.block_number()
    return {"chain_id": chain_id, "block_number": block_number}
