"""External service contracts and bindings."""

from __future__ import annotations

from typing import Optional

import httpx

from ..config import GaslessConfig, load_config
from ..errors import ConfigurationError
from .base import (
    AccountService,
    CensusService,
    ElectionService,
    MembershipService,
    OnchainHandler,
    PluginQueryService,
)
from .census3 import Census3Client
from .inmemory import (
    InMemoryCensusService,
    InMemoryMembershipService,
    InMemoryPluginQueryService,
    InMemoryVocdoniClient,
)


def get_census_service(
    config: Optional[GaslessConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Census3Client:
    """Factory returning a Census3 client for the configured environment."""

    config = config or load_config()
    if config.census3.chain_id is None:
        raise ConfigurationError("census3.chain_id must be configured")

    return Census3Client(
        config.census3_url(),
        config.census3.chain_id,
        client=client,
        queue_attempts=config.census3.queue_attempts,
        queue_interval=config.census3.queue_interval,
    )


__all__ = [
    "AccountService",
    "CensusService",
    "ElectionService",
    "MembershipService",
    "OnchainHandler",
    "PluginQueryService",
    "Census3Client",
    "InMemoryCensusService",
    "InMemoryMembershipService",
    "InMemoryPluginQueryService",
    "InMemoryVocdoniClient",
    "get_census_service",
]
