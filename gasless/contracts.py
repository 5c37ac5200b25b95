"""Domain contracts exchanged between gasless sagas and external services."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VoteValue(IntEnum):
    """Caller-facing vote options. Values start at 1."""

    ABSTAIN = 1
    YES = 2
    NO = 3


# Order matters: an election choice value is its index in this tuple.
VOTE_CHOICES = ("ABSTAIN", "YES", "NO")


class ProposalStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    SUCCEEDED = "Succeeded"
    EXECUTED = "Executed"
    DEFEATED = "Defeated"


class AccountData(BaseModel):
    """Off-chain voting account of the current signer."""

    address: str
    balance: int = 0


class DaoToken(BaseModel):
    """ERC20 (or wrapped ERC20) governance token of a DAO."""

    address: str
    name: Optional[str] = None
    symbol: Optional[str] = None
    decimals: int = 18


class DaoDetails(BaseModel):
    address: str
    ens_domain: str = ""


class TokenStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    synced: bool = False
    at_block: Optional[int] = Field(default=None, alias="atBlock")
    progress: Optional[int] = None


class CensusToken(BaseModel):
    """Token view reported by the Census3 indexer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="ID")
    chain_id: Optional[int] = Field(default=None, alias="chainID")
    name: Optional[str] = None
    symbol: Optional[str] = None
    default_strategy: int = Field(alias="defaultStrategy")
    size: Optional[int] = None
    status: TokenStatus = Field(default_factory=TokenStatus)


class Census3Census(BaseModel):
    """Census published by the Census3 indexer for a strategy."""

    model_config = ConfigDict(populate_by_name=True)

    census_id: Optional[int] = Field(default=None, alias="censusID")
    strategy_id: Optional[int] = Field(default=None, alias="strategyID")
    merkle_root: str = Field(alias="merkleRoot")
    uri: str
    size: int
    weight: int
    anonymous: bool = False

    @field_validator("weight", mode="before")
    @classmethod
    def _parse_weight(cls, value: Any) -> Any:
        # weights are decimal strings, possibly beyond 64 bits
        if isinstance(value, str):
            return int(value)
        return value


class TokenCensus(BaseModel):
    """Census reference attached to an election."""

    merkle_root: str
    uri: str
    anonymous: bool
    token: CensusToken
    size: int
    weight: int


class Choice(BaseModel):
    title: str
    value: int


class Question(BaseModel):
    title: str
    description: str = ""
    choices: List[Choice] = Field(default_factory=list)


class ElectionSpec(BaseModel):
    """Unpublished election, ready for cost estimation and submission."""

    title: str
    description: str = ""
    start_date: Optional[datetime] = None
    end_date: datetime
    census: TokenCensus
    max_census_size: Optional[int] = None
    meta: Dict[str, Any] = Field(default_factory=dict)
    questions: List[Question] = Field(default_factory=list)

    def add_question(
        self, title: str, description: str, choices: List[Choice]
    ) -> "ElectionSpec":
        """Append a question and return ``self`` for chaining."""
        self.questions.append(
            Question(title=title, description=description, choices=choices)
        )
        return self


class Vote(BaseModel):
    """Ballot in the external voting system's zero-based representation."""

    votes: List[int]


class ProposalMetadata(BaseModel):
    title: str
    summary: str = ""
    description: str = ""
    resources: List[Dict[str, str]] = Field(default_factory=list)


class CreateProposalParams(BaseModel):
    """On-chain proposal parameters. Stored verbatim as election metadata."""

    plugin_address: str
    metadata_uri: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    actions: List[Dict[str, Any]] = Field(default_factory=list)


class VoteProposalParams(BaseModel):
    proposal_id: str
    vote: VoteValue


class GaslessSettings(BaseModel):
    min_tally_approvals: int


class GaslessVotingProposal(BaseModel):
    """Read-only view of a gasless proposal as returned by the plugin."""

    id: str
    end_date: datetime
    expiration_date: datetime
    status: ProposalStatus
    approvers: List[str] = Field(default_factory=list)
    settings: GaslessSettings
    executed: bool = False
    vochain_proposal_id: Optional[str] = None

    @field_validator("end_date", "expiration_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # plugin timestamps without an offset are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ApprovalState(BaseModel):
    """Committee approval flags derived for one caller at one instant."""

    is_approval_period: bool
    proposal_can_be_approved: bool
    approved: bool
    is_approved: bool
    can_be_executed: bool
    next_vote_will_approve: bool
    executed: bool
    not_began: bool
    can_approve: bool = False


__all__ = [
    "VoteValue",
    "VOTE_CHOICES",
    "ProposalStatus",
    "AccountData",
    "DaoToken",
    "DaoDetails",
    "TokenStatus",
    "CensusToken",
    "Census3Census",
    "TokenCensus",
    "Choice",
    "Question",
    "ElectionSpec",
    "Vote",
    "ProposalMetadata",
    "CreateProposalParams",
    "VoteProposalParams",
    "GaslessSettings",
    "GaslessVotingProposal",
    "ApprovalState",
]
