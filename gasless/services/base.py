"""Capability interfaces for the external services a gasless saga calls."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol

from ..contracts import (
    AccountData,
    Census3Census,
    CensusToken,
    ElectionSpec,
    GaslessVotingProposal,
    Vote,
)

# Records the proposal on-chain. Called with the election id, or with no
# arguments when only the on-chain transaction is resubmitted. May return an
# exception instead of raising it.
OnchainHandler = Callable[..., Awaitable[Any]]


class AccountService(Protocol):
    """Off-chain voting account of the current signer."""

    async def fetch_account_info(self) -> AccountData:
        """Return the account or raise ``AccountNotFoundError``."""

    async def create_account(self) -> Optional[AccountData]:
        """Provision a new account for the signer."""

    async def collect_faucet_tokens(self) -> AccountData:
        """Request a faucet disbursement and return the updated account."""


class ElectionService(Protocol):
    """Election lifecycle and ballot submission."""

    async def calculate_election_cost(self, election: ElectionSpec) -> int:
        """Return the cost of publishing ``election``."""

    async def create_election(self, election: ElectionSpec) -> str:
        """Publish ``election`` and return its identifier."""

    async def set_election_id(self, election_id: str) -> None:
        """Bind the election subsequent votes target."""

    async def submit_vote(self, vote: Vote) -> str:
        """Cast ``vote`` on the bound election and return the vote id."""

    async def has_already_voted(self, election_id: str) -> Optional[str]:
        """Return the signer's vote id on ``election_id`` if any."""


class CensusService(Protocol):
    """Token indexer able to build censuses from token holders."""

    async def get_token(self, address: str) -> CensusToken:
        """Return the indexed token including its sync status."""

    async def create_census(self, strategy_id: int) -> Census3Census:
        """Build a census for ``strategy_id``."""


class PluginQueryService(Protocol):
    async def get_proposal(
        self, proposal_id: str, dao_ens_domain: str, dao_address: str
    ) -> Optional[GaslessVotingProposal]:
        """Return the gasless proposal view, or ``None`` if unknown."""


class MembershipService(Protocol):
    async def is_multisig_member(self, plugin_address: str, address: str) -> bool:
        """Return whether ``address`` belongs to the approval committee."""


__all__ = [
    "OnchainHandler",
    "AccountService",
    "ElectionService",
    "CensusService",
    "PluginQueryService",
    "MembershipService",
]
