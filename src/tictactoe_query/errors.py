"""
Error types for leaderboard queries.

Every failure in the query workflow surfaces as a ``LeaderboardError``
subclass. The CLI turns these into an ``ERROR:`` line on stderr and
exits with the class's ``exit_code``.
"""

from __future__ import annotations


class LeaderboardError(RuntimeError):
    exit_code: int = 1


class AddressInvalidError(LeaderboardError):
    exit_code = 2


class AbiInvalidError(LeaderboardError):
    exit_code = 3

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class AbiFunctionNotFoundError(AbiInvalidError):
    pass


class RpcTransportError(LeaderboardError):
    exit_code = 4


class RpcResponseError(LeaderboardError):
    exit_code = 5

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ResultDecodeError(LeaderboardError):
    exit_code = 6
