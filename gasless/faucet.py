"""Faucet collection loop used to fund election costs."""

from __future__ import annotations

import logging
from typing import Optional

from .contracts import AccountData
from .errors import FaucetExhaustedError
from .services.base import AccountService

logger = logging.getLogger(__name__)


async def collect_faucet(
    cost: int,
    account: AccountData,
    account_service: AccountService,
    max_requests: Optional[int] = None,
) -> int:
    """Request faucet tokens until ``account.balance`` covers ``cost``.

    ``account.balance`` is updated in place from each faucet response. The
    loop is uncapped unless ``max_requests`` is given; it relies on the
    faucet eventually granting enough funds.

    Returns:
        Number of faucet requests issued.
    """
    requests = 0
    while account.balance < cost:
        if max_requests is not None and requests >= max_requests:
            raise FaucetExhaustedError(
                f"Faucet cap of {max_requests} requests reached with balance "
                f"{account.balance} below cost {cost}",
                balance=account.balance,
                cost=cost,
            )
        updated = await account_service.collect_faucet_tokens()
        requests += 1
        account.balance = updated.balance
        logger.debug(
            f"Faucet request {requests}: balance {account.balance}, cost {cost}"
        )

    if requests:
        logger.info(f"Collected faucet tokens in {requests} request(s)")
    return requests
