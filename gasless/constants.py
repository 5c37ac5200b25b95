"""Shared constants for gasless saga orchestration."""

DEFAULT_CENSUS_SYNC_ATTEMPTS = 5
DEFAULT_CENSUS_SYNC_INTERVAL = 6.0

DEFAULT_CENSUS_QUEUE_ATTEMPTS = 10
DEFAULT_CENSUS_QUEUE_INTERVAL = 2.0

CENSUS3_URLS = {
    "dev": "https://census3-dev.vocdoni.net/api",
    "stg": "https://census3-stg.vocdoni.net/api",
    "prod": "https://census3.vocdoni.net/api",
}
