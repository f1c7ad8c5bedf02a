__all__ = [
    # Workflow
    "LeaderboardQuery",
    "fetch_chain_status",
    "fetch_leaderboard_length",
    "format_report",
    # Chain access
    "ContractProxy",
    "RpcClient",
    "bind",
    "load_abi",
    "normalize_block_tag",
    "parse_abi",
    "parse_address",
    # Errors
    "LeaderboardError",
    "AddressInvalidError",
    "AbiInvalidError",
    "AbiFunctionNotFoundError",
    "RpcTransportError",
    "RpcResponseError",
    "ResultDecodeError",
]

from .errors import (
    AbiFunctionNotFoundError,
    AbiInvalidError,
    AddressInvalidError,
    LeaderboardError,
    ResultDecodeError,
    RpcResponseError,
    RpcTransportError,
)
from .chain.abi import load_abi, parse_abi
from .chain.address import parse_address
from .chain.contract import ContractProxy, bind
from .chain.rpc import RpcClient, normalize_block_tag
from .leaderboard import (
    LeaderboardQuery,
    fetch_chain_status,
    fetch_leaderboard_length,
    format_report,
)
