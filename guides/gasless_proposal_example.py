"""Example creating a gasless proposal and voting on it with in-memory services."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from gasless import GaslessProposalCreator, GaslessVoting, InMemoryStepRecorder
from gasless.contracts import (
    CensusToken,
    CreateProposalParams,
    DaoDetails,
    DaoToken,
    GaslessSettings,
    GaslessVotingProposal,
    ProposalMetadata,
    ProposalStatus,
    VoteProposalParams,
    VoteValue,
)
from gasless.services import (
    InMemoryCensusService,
    InMemoryPluginQueryService,
    InMemoryVocdoniClient,
)


async def main():
    logging.basicConfig(level=logging.INFO)

    dao = DaoDetails(address="0xdao", ens_domain="example.dao.eth")
    token = DaoToken(address="0xtoken", symbol="EXM")
    vocdoni = InMemoryVocdoniClient(election_cost=250, faucet_amount=100)
    census = InMemoryCensusService(
        CensusToken(id=token.address, default_strategy=1), synced_after=1
    )
    plugin = InMemoryPluginQueryService()
    recorder = InMemoryStepRecorder()

    creator = GaslessProposalCreator(
        vocdoni, vocdoni, census, token, recorder=recorder
    )
    end = datetime.now(timezone.utc) + timedelta(days=3)

    async def register_onchain(election_id=None):
        # stands in for the DAO plugin transaction
        plugin.proposals["0xdao_0x0"] = GaslessVotingProposal(
            id="0xdao_0x0",
            end_date=end,
            expiration_date=end + timedelta(days=2),
            status=ProposalStatus.ACTIVE,
            settings=GaslessSettings(min_tally_approvals=2),
            vochain_proposal_id=election_id,
        )

    election_id = await creator.create_proposal(
        ProposalMetadata(title="Example", summary="Ship it?"),
        CreateProposalParams(plugin_address="0xplugin", end_date=end),
        register_onchain,
    )
    print(f"Election: {election_id}, state: {creator.global_state.value}")

    voting = GaslessVoting(vocdoni, plugin, dao, recorder=recorder)
    vote_id = await voting.vote(
        VoteProposalParams(proposal_id="0xdao_0x0", vote=VoteValue.YES)
    )
    print(f"Vote: {vote_id}")

    for run in recorder.list_runs():
        print(run.saga, [(s.step_name, s.status) for s in run.steps])


if __name__ == "__main__":
    asyncio.run(main())
