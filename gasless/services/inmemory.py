"""In-memory service bindings for testing and local runs."""

from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..contracts import (
    AccountData,
    Census3Census,
    CensusToken,
    ElectionSpec,
    GaslessVotingProposal,
    Vote,
)
from ..errors import AccountNotFoundError


class InMemoryVocdoniClient:
    """Account and election service kept in local memory.

    Publishing an election deducts its cost from the account balance, as the
    real network does. Nothing is persisted across process restarts.
    """

    def __init__(
        self,
        account: Optional[AccountData] = None,
        address: str = "0x0000000000000000000000000000000000000001",
        election_cost: int = 0,
        faucet_amount: int = 100,
    ) -> None:
        self.account = account
        self.address = address
        self.election_cost = election_cost
        self.faucet_amount = faucet_amount
        self.faucet_requests = 0
        self.elections: Dict[str, ElectionSpec] = {}
        self.votes: Dict[str, Tuple[str, Vote]] = {}
        self.bound_election_id: Optional[str] = None

    # ------------------------------------------------------------------
    async def fetch_account_info(self) -> AccountData:
        if self.account is None:
            raise AccountNotFoundError(f"Account {self.address} not found")
        return self.account.model_copy()

    async def create_account(self) -> Optional[AccountData]:
        if self.account is None:
            self.account = AccountData(address=self.address, balance=0)
        return self.account.model_copy()

    async def collect_faucet_tokens(self) -> AccountData:
        account = await self.fetch_account_info()
        self.faucet_requests += 1
        self.account = account.model_copy(
            update={"balance": account.balance + self.faucet_amount}
        )
        return self.account.model_copy()

    # ------------------------------------------------------------------
    async def calculate_election_cost(self, election: ElectionSpec) -> int:
        return self.election_cost

    async def create_election(self, election: ElectionSpec) -> str:
        account = await self.fetch_account_info()
        if account.balance < self.election_cost:
            raise ValueError(
                f"Insufficient balance {account.balance} for cost {self.election_cost}"
            )
        self.account = account.model_copy(
            update={"balance": account.balance - self.election_cost}
        )
        election_id = uuid.uuid4().hex
        self.elections[election_id] = election
        return election_id

    async def set_election_id(self, election_id: str) -> None:
        self.bound_election_id = election_id

    async def submit_vote(self, vote: Vote) -> str:
        if self.bound_election_id is None:
            raise ValueError("No election bound for voting")
        vote_id = uuid.uuid4().hex
        self.votes[vote_id] = (self.bound_election_id, vote)
        return vote_id

    async def has_already_voted(self, election_id: str) -> Optional[str]:
        for vote_id, (voted_election, _) in self.votes.items():
            if voted_election == election_id:
                return vote_id
        return None


class InMemoryCensusService:
    """Census indexer whose token becomes synced after ``synced_after`` reads."""

    def __init__(
        self,
        token: CensusToken,
        synced_after: Optional[int] = 1,
        census_size: int = 10,
        census_weight: int = 1000,
    ) -> None:
        self.token = token
        self.synced_after = synced_after
        self.census_size = census_size
        self.census_weight = census_weight
        self.token_requests = 0
        self.censuses: List[Census3Census] = []

    async def get_token(self, address: str) -> CensusToken:
        self.token_requests += 1
        synced = (
            self.synced_after is not None and self.token_requests >= self.synced_after
        )
        token = self.token.model_copy(deep=True)
        token.status.synced = synced
        return token

    async def create_census(self, strategy_id: int) -> Census3Census:
        census = Census3Census(
            census_id=len(self.censuses) + 1,
            strategy_id=strategy_id,
            merkle_root=uuid.uuid4().hex,
            uri=f"ipfs://census/{strategy_id}",
            size=self.census_size,
            weight=self.census_weight,
        )
        self.censuses.append(census)
        return census


class InMemoryPluginQueryService:
    def __init__(self, proposals: Iterable[GaslessVotingProposal] = ()) -> None:
        self.proposals: Dict[str, GaslessVotingProposal] = {p.id: p for p in proposals}
        self.queries = 0

    async def get_proposal(
        self, proposal_id: str, dao_ens_domain: str, dao_address: str
    ) -> Optional[GaslessVotingProposal]:
        self.queries += 1
        return self.proposals.get(proposal_id)


class InMemoryMembershipService:
    def __init__(self, members: Iterable[str] = ()) -> None:
        self.members: Set[str] = set(members)
        self.queries = 0

    async def is_multisig_member(self, plugin_address: str, address: str) -> bool:
        self.queries += 1
        return address in self.members


__all__ = [
    "InMemoryVocdoniClient",
    "InMemoryCensusService",
    "InMemoryPluginQueryService",
    "InMemoryMembershipService",
]
