"""Committee approval state of gasless proposals."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .contracts import ApprovalState, GaslessVotingProposal, ProposalStatus
from .services.base import MembershipService


def derive_approval_state(
    proposal: GaslessVotingProposal,
    now: datetime,
    caller: Optional[str],
    client_available: bool = True,
) -> ApprovalState:
    """Compute approval flags for ``caller`` at ``now`` without any I/O.

    ``can_approve`` is always ``False`` here; it needs a membership lookup,
    see ``committee_approval_state``. A naive ``now`` is taken as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    is_approval_period = proposal.end_date < now < proposal.expiration_date
    proposal_can_be_approved = (
        is_approval_period and proposal.status == ProposalStatus.SUCCEEDED
    )
    approvals = len(proposal.approvers)
    min_approvals = proposal.settings.min_tally_approvals
    is_approved = approvals >= min_approvals

    return ApprovalState(
        is_approval_period=is_approval_period,
        proposal_can_be_approved=proposal_can_be_approved,
        approved=caller is not None and caller in proposal.approvers,
        is_approved=is_approved,
        can_be_executed=client_available and is_approved and proposal_can_be_approved,
        next_vote_will_approve=approvals + 1 == min_approvals,
        executed=proposal.executed,
        not_began=proposal.end_date > now,
    )


async def committee_approval_state(
    proposal: GaslessVotingProposal,
    membership: Optional[MembershipService],
    plugin_address: str,
    caller: Optional[str],
    now: Optional[datetime] = None,
) -> ApprovalState:
    """Derive approval flags and resolve whether ``caller`` may approve."""
    now = now or datetime.now(timezone.utc)
    state = derive_approval_state(
        proposal, now, caller, client_available=membership is not None
    )

    if not caller or membership is None:
        return state
    # skip the lookup whenever the answer is already known to be no
    if (
        state.approved
        or not state.is_approval_period
        or not state.proposal_can_be_approved
    ):
        return state

    can_approve = await membership.is_multisig_member(plugin_address, caller)
    return state.model_copy(update={"can_approve": bool(can_approve)})


__all__ = ["derive_approval_state", "committee_approval_state"]
