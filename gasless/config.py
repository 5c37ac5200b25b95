from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

from .constants import (
    CENSUS3_URLS,
    DEFAULT_CENSUS_QUEUE_ATTEMPTS,
    DEFAULT_CENSUS_QUEUE_INTERVAL,
    DEFAULT_CENSUS_SYNC_ATTEMPTS,
    DEFAULT_CENSUS_SYNC_INTERVAL,
)

VocdoniEnv = Literal["dev", "stg", "prod"]


class VocdoniConfig(BaseModel):
    """Vocdoni network selection."""

    env: VocdoniEnv = "stg"


class Census3Config(BaseModel):
    """Census3 indexer settings."""

    url: Optional[str] = None
    chain_id: Optional[int] = None
    sync_attempts: int = DEFAULT_CENSUS_SYNC_ATTEMPTS
    sync_interval: float = DEFAULT_CENSUS_SYNC_INTERVAL
    queue_attempts: int = DEFAULT_CENSUS_QUEUE_ATTEMPTS
    queue_interval: float = DEFAULT_CENSUS_QUEUE_INTERVAL


class FaucetConfig(BaseModel):
    """Faucet collection settings. ``None`` leaves the loop uncapped."""

    max_requests: Optional[int] = None


class GaslessConfig(BaseModel):
    """Top-level configuration model."""

    vocdoni: VocdoniConfig = VocdoniConfig()
    census3: Census3Config = Census3Config()
    faucet: FaucetConfig = FaucetConfig()

    def census3_url(self) -> str:
        """Return the configured Census3 URL or the default for the env."""
        return self.census3.url or CENSUS3_URLS[self.vocdoni.env]


def load_config(path: Optional[str] = None) -> GaslessConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to GASLESS_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("GASLESS_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = GaslessConfig(**data)
    else:
        config = GaslessConfig()

    env_name = os.getenv("GASLESS_VOCDONI_ENV")
    if env_name:
        config.vocdoni = VocdoniConfig(env=env_name.lower())
    env_url = os.getenv("GASLESS_CENSUS3_URL")
    if env_url:
        config.census3.url = env_url
    return config
