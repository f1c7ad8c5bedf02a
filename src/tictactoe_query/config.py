"""
Runtime configuration.

Defaults point at the TicTacToe contract on Celo Alfajores. Each value can
be overridden from the environment, optionally loaded from
~/.tictactoe/.env.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

CONFIG_DIR = Path.home() / ".tictactoe"
CONFIG_ENV = CONFIG_DIR / ".env"

DEFAULT_RPC_URL = "https://alfajores-forno.celo-testnet.org"
DEFAULT_CONTRACT_ADDRESS = "0x0f6E0e3F5df62d4067D9969Cd3c9F34cc2b238C9"
DEFAULT_BLOCK = "latest"
DEFAULT_TIMEOUT = 30.0
ALFAJORES_CHAIN_ID = 44787

RPC_URL_ENV = "TICTACTOE_RPC_URL"
CONTRACT_ADDRESS_ENV = "TICTACTOE_CONTRACT_ADDRESS"
ABI_PATH_ENV = "TICTACTOE_ABI_PATH"
BLOCK_ENV = "TICTACTOE_BLOCK"
TIMEOUT_ENV = "TICTACTOE_RPC_TIMEOUT"


def load_env(env_path: Optional[Path] = None) -> Optional[Path]:
    """
    Load settings from a .env file without overriding the environment.

    Returns:
        The loaded path, or None if the file does not exist
    """
    env_path = env_path or CONFIG_ENV
    if not env_path.exists():
        return None
    load_dotenv(env_path, override=False)
    return env_path


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get(RPC_URL_ENV, DEFAULT_RPC_URL)


def get_contract_address() -> str:
    return os.environ.get(CONTRACT_ADDRESS_ENV, DEFAULT_CONTRACT_ADDRESS)


def get_abi_path() -> Optional[Path]:
    value = os.environ.get(ABI_PATH_ENV)
    return Path(value).expanduser() if value else None


def get_block() -> str:
    return os.environ.get(BLOCK_ENV, DEFAULT_BLOCK)


def get_timeout() -> float:
    """Request timeout in seconds; 0 disables it."""
    value = os.environ.get(TIMEOUT_ENV)
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid {TIMEOUT_ENV}: {value!r}") from None


def timeout_seconds(value: float) -> Optional[float]:
    if value < 0:
        raise ValueError(f"Timeout must be non-negative: {value}")
    return value or None
