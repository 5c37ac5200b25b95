"""Gasless: saga orchestration for off-chain tallied DAO proposals and votes."""

from .approval import committee_approval_state, derive_approval_state
from .config import GaslessConfig, load_config
from .faucet import collect_faucet
from .history import InMemoryStepRecorder
from .proposal import GaslessProposalCreator, GaslessProposalStepId
from .services import get_census_service
from .stepper import StepEngine, StepState, StepStatus
from .utils.retry import poll_until
from .voting import GaslessVoting, GaslessVotingStepId

__version__ = "0.1.0"
__all__ = [
    "GaslessConfig",
    "GaslessProposalCreator",
    "GaslessProposalStepId",
    "GaslessVoting",
    "GaslessVotingStepId",
    "InMemoryStepRecorder",
    "StepEngine",
    "StepState",
    "StepStatus",
    "collect_faucet",
    "committee_approval_state",
    "derive_approval_state",
    "get_census_service",
    "load_config",
    "poll_until",
]
