"""Saga casting a vote on a gasless proposal's off-chain election."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .contracts import DaoDetails, GaslessVotingProposal, Vote, VoteProposalParams
from .errors import MissingElectionError
from .history import StepRecorder
from .services.base import ElectionService, PluginQueryService
from .stepper import Saga

logger = logging.getLogger(__name__)


class GaslessVotingStepId(str, Enum):
    CREATE_VOTE_ID = "CREATE_VOTE_ID"
    PUBLISH_VOTE = "PUBLISH_VOTE"


def to_external_choice(vote: int) -> int:
    """Map a 1-based vote value to the election's 0-based choice."""
    return vote - 1


class GaslessVoting(Saga[GaslessVotingStepId]):
    """Resolves a proposal's election and submits the caller's vote."""

    step_ids = GaslessVotingStepId

    def __init__(
        self,
        election_service: ElectionService,
        plugin_query: PluginQueryService,
        dao: Optional[DaoDetails],
        recorder: Optional[StepRecorder] = None,
    ) -> None:
        super().__init__(recorder=recorder)
        self._elections = election_service
        self._plugin = plugin_query
        self.dao = dao

    async def get_election_id(self, proposal_id: str) -> str:
        """Return the election bound to ``proposal_id`` or an empty string."""
        if self.dao is None:
            return ""
        proposal = await self._plugin.get_proposal(
            proposal_id, self.dao.ens_domain, self.dao.address
        )
        if proposal is None:
            return ""
        return proposal.vochain_proposal_id or ""

    async def vote(self, params: VoteProposalParams) -> str:
        """Run the voting saga and return the external vote id.

        Raises:
            SagaInProgressError: If a previous call has not finished.
            MissingElectionError: If the proposal has no election.
        """
        with self._exclusive():
            logger.info(f"Voting on proposal {params.proposal_id}")
            self._reset_if_failed()

            async def resolve_election() -> str:
                election_id = await self.get_election_id(params.proposal_id)
                if not election_id:
                    raise MissingElectionError(
                        f"Proposal {params.proposal_id} has no associated election"
                    )
                return election_id

            election_id = await self.stepper.do_step(
                GaslessVotingStepId.CREATE_VOTE_ID, resolve_election
            )
            logger.info(f"Election {election_id} found for proposal {params.proposal_id}")

            async def publish() -> str:
                ballot = Vote(votes=[to_external_choice(int(params.vote))])
                await self._elections.set_election_id(election_id)
                return await self._elections.submit_vote(ballot)

            vote_id = await self.stepper.do_step(
                GaslessVotingStepId.PUBLISH_VOTE, publish
            )
            logger.info(f"Vote {vote_id} submitted on election {election_id}")
            return vote_id

    async def has_already_voted(
        self, proposal: Optional[GaslessVotingProposal]
    ) -> bool:
        """Return whether the signer voted on ``proposal``'s election.

        Failures are reported as ``False`` since the answer is unknown.
        """
        if proposal is None or not proposal.vochain_proposal_id:
            return False
        try:
            return bool(
                await self._elections.has_already_voted(proposal.vochain_proposal_id)
            )
        except Exception as e:
            logger.warning(
                f"Could not check vote on election {proposal.vochain_proposal_id}: {e}"
            )
            return False


__all__ = ["GaslessVotingStepId", "GaslessVoting", "to_external_choice"]
