"""Exception hierarchy raised by gasless sagas and service bindings."""

from __future__ import annotations

from typing import Optional


class GaslessError(Exception):
    """Base class for all gasless orchestration errors."""


class ConfigurationError(GaslessError):
    """Raised before any step runs when required configuration is missing."""


class AccountNotFoundError(GaslessError):
    """Raised by an account service when the signer has no account yet."""


class AccountCreationError(GaslessError):
    """Raised when account creation returned no account."""


class PollingTimeoutError(GaslessError):
    """Raised when a polled condition never holds within the attempt budget."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class CensusSyncTimeoutError(PollingTimeoutError):
    """Census token did not finish synchronizing."""


class MissingElectionError(GaslessError):
    """A proposal has no associated off-chain election."""


class FaucetExhaustedError(GaslessError):
    """The faucet request cap was reached before the cost was covered."""

    def __init__(self, message: str, balance: int, cost: int) -> None:
        super().__init__(message)
        self.balance = balance
        self.cost = cost


class SagaInProgressError(GaslessError):
    """A saga entry point was re-entered while a previous call is running."""


class Census3Error(GaslessError):
    """Error returned by the Census3 indexing service."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "GaslessError",
    "ConfigurationError",
    "AccountNotFoundError",
    "AccountCreationError",
    "PollingTimeoutError",
    "CensusSyncTimeoutError",
    "MissingElectionError",
    "FaucetExhaustedError",
    "SagaInProgressError",
    "Census3Error",
]
