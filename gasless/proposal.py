"""Saga creating a gasless proposal backed by an off-chain election."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .config import GaslessConfig
from .contracts import (
    AccountData,
    CensusToken,
    CreateProposalParams,
    DaoToken,
    ProposalMetadata,
    TokenCensus,
)
from .election import proposal_to_election, token_census
from .errors import (
    AccountCreationError,
    AccountNotFoundError,
    CensusSyncTimeoutError,
    ConfigurationError,
)
from .faucet import collect_faucet
from .history import StepRecorder
from .services.base import AccountService, CensusService, ElectionService, OnchainHandler
from .stepper import Saga, StepStatus
from .utils.retry import Sleep, poll_until

logger = logging.getLogger(__name__)


class GaslessProposalStepId(str, Enum):
    REGISTER_VOCDONI_ACCOUNT = "REGISTER_VOCDONI_ACCOUNT"
    CREATE_VOCDONI_ELECTION = "CREATE_VOCDONI_ELECTION"
    CREATE_ONCHAIN_PROPOSAL = "CREATE_ONCHAIN_PROPOSAL"
    PROPOSAL_IS_READY = "PROPOSAL_IS_READY"


class GaslessProposalCreator(Saga[GaslessProposalStepId]):
    """Creates the account, census and election behind a gasless proposal,
    then hands the election id to the caller's on-chain handler.

    Completed steps are not repeated on a later call. A failed run is reset
    and restarted from the first step on the next call.
    """

    step_ids = GaslessProposalStepId

    def __init__(
        self,
        account_service: AccountService,
        election_service: ElectionService,
        census_service: CensusService,
        dao_token: Optional[DaoToken],
        config: Optional[GaslessConfig] = None,
        recorder: Optional[StepRecorder] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        super().__init__(recorder=recorder)
        self._accounts = account_service
        self._elections = election_service
        self._census = census_service
        self.dao_token = dao_token
        self.config = config or GaslessConfig()
        self._sleep = sleep
        self.election_id: Optional[str] = None

    async def create_proposal(
        self,
        metadata: ProposalMetadata,
        params: CreateProposalParams,
        onchain_handler: OnchainHandler,
    ) -> Optional[str]:
        """Run the proposal saga and return the election id.

        Raises:
            SagaInProgressError: If a previous call has not finished.
            ConfigurationError: If no DAO token is configured.
        """
        with self._exclusive():
            logger.info(
                f"Creating gasless proposal, global state {self.global_state.value}"
            )
            self._reset_if_failed()

            if self.global_state is StepStatus.SUCCESS:
                # Election exists already, only the on-chain transaction is retried.
                await self._register_onchain(onchain_handler, None)
                return self.election_id

            if self.dao_token is None:
                raise ConfigurationError("DAO token is not configured")

            await self.stepper.do_step(
                GaslessProposalStepId.REGISTER_VOCDONI_ACCOUNT, self._create_account
            )

            async def create_election() -> str:
                census = await self._create_census()
                return await self._create_election(metadata, params, census)

            election_id = await self.stepper.do_step(
                GaslessProposalStepId.CREATE_VOCDONI_ELECTION, create_election
            )
            self.election_id = election_id
            logger.info(f"Election {election_id} created")

            try:
                await self.stepper.do_step(
                    GaslessProposalStepId.CREATE_ONCHAIN_PROPOSAL,
                    lambda: self._register_onchain(onchain_handler, election_id),
                )
            except Exception:
                logger.warning(
                    f"On-chain registration failed, election {election_id} has no proposal"
                )
                raise

            self.stepper.update_step_status(
                GaslessProposalStepId.PROPOSAL_IS_READY, StepStatus.SUCCESS
            )
            logger.info(f"Gasless proposal ready for election {election_id}")
            return election_id

    async def _register_onchain(
        self, onchain_handler: OnchainHandler, election_id: Optional[str]
    ) -> Any:
        if election_id is None:
            outcome = await onchain_handler()
        else:
            outcome = await onchain_handler(election_id)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def _create_account(self) -> AccountData:
        try:
            account = await self._accounts.fetch_account_info()
        except AccountNotFoundError:
            logger.info("Vocdoni account not found, creating it")
            account = await self._accounts.create_account()

        if not account:
            raise AccountCreationError("Error creating a Vocdoni account")
        return account

    async def _wait_for_synced_token(self) -> CensusToken:
        address = self.dao_token.address
        settings = self.config.census3
        return await poll_until(
            lambda: self._census.get_token(address),
            lambda token: token.status.synced,
            settings.sync_attempts,
            settings.sync_interval,
            sleep=self._sleep,
            error_cls=CensusSyncTimeoutError,
            message="Census token is not already calculated, try again later",
        )

    async def _create_census(self) -> TokenCensus:
        token = await self._wait_for_synced_token()
        logger.info(
            f"Token {token.id} synced, creating census for strategy {token.default_strategy}"
        )
        census = await self._census.create_census(token.default_strategy)
        return token_census(token, census)

    async def _create_election(
        self,
        metadata: ProposalMetadata,
        params: CreateProposalParams,
        census: TokenCensus,
    ) -> str:
        election = proposal_to_election(metadata, params, census)

        cost = await self._elections.calculate_election_cost(election)
        account = await self._accounts.fetch_account_info()
        logger.info(f"Estimated election cost {cost}, balance {account.balance}")
        await collect_faucet(
            cost, account, self._accounts, self.config.faucet.max_requests
        )

        return await self._elections.create_election(election)


__all__ = ["GaslessProposalStepId", "GaslessProposalCreator"]
