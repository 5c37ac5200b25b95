"""Mapping from DAO proposals to off-chain elections."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from .contracts import (
    VOTE_CHOICES,
    Census3Census,
    CensusToken,
    Choice,
    CreateProposalParams,
    ElectionSpec,
    ProposalMetadata,
    TokenCensus,
)


def vote_choices() -> List[Choice]:
    """Election choices in declaration order, valued by zero-based position."""
    return [Choice(title=title, value=i) for i, title in enumerate(VOTE_CHOICES)]


def token_census(token: CensusToken, census: Census3Census) -> TokenCensus:
    return TokenCensus(
        merkle_root=census.merkle_root,
        uri=census.uri,
        anonymous=census.anonymous,
        token=token,
        size=census.size,
        weight=census.weight,
    )


def proposal_to_election(
    metadata: ProposalMetadata,
    params: CreateProposalParams,
    census: TokenCensus,
    now: Optional[datetime] = None,
) -> ElectionSpec:
    """Build an election for ``metadata`` with a single vote question.

    The full proposal parameters are stored as election metadata so the DAO
    proposal can be recovered from the election alone. A missing end date
    falls back to ``now``.
    """
    election = ElectionSpec(
        title=metadata.title,
        description=metadata.description,
        start_date=params.start_date,
        end_date=params.end_date or now or datetime.now(timezone.utc),
        census=census,
        max_census_size=census.size,
        meta=params.model_dump(mode="json"),
    )
    return election.add_question(metadata.summary, "", vote_choices())


__all__ = ["vote_choices", "token_census", "proposal_to_election"]
