"""HTTP binding for the Census3 token indexing service."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..constants import DEFAULT_CENSUS_QUEUE_ATTEMPTS, DEFAULT_CENSUS_QUEUE_INTERVAL
from ..contracts import Census3Census, CensusToken
from ..errors import Census3Error, PollingTimeoutError
from ..utils.retry import Sleep, poll_until

logger = logging.getLogger(__name__)


class Census3Client:
    """Async Census3 REST client.

    Census creation is queued server side; ``create_census`` polls the queue
    until the census is published.
    """

    def __init__(
        self,
        base_url: str,
        chain_id: int,
        client: Optional[httpx.AsyncClient] = None,
        queue_attempts: int = DEFAULT_CENSUS_QUEUE_ATTEMPTS,
        queue_interval: float = DEFAULT_CENSUS_QUEUE_INTERVAL,
        timeout: float = 10.0,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.chain_id = chain_id
        self.queue_attempts = queue_attempts
        self.queue_interval = queue_interval
        # an injected client belongs to the caller and is left open
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._sleep = sleep

    async def __aenter__(self) -> "Census3Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise Census3Error(f"Census3 request {method} {path} failed: {e}") from e
        if response.is_error:
            raise Census3Error(
                f"Census3 request {method} {path} returned "
                f"{response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    # ------------------------------------------------------------------
    async def get_token(self, address: str) -> CensusToken:
        data = await self._request(
            "GET", f"/tokens/{address}", params={"chainID": self.chain_id}
        )
        return CensusToken.model_validate(data)

    async def create_census(
        self, strategy_id: int, anonymous: bool = False
    ) -> Census3Census:
        queued = await self._request(
            "POST",
            "/censuses",
            json={"strategyID": strategy_id, "anonymous": anonymous},
        )
        queue_id = queued["queueID"]
        logger.info(f"Census for strategy {strategy_id} queued as {queue_id}")

        async def fetch_queue() -> Dict[str, Any]:
            status = await self._request("GET", f"/censuses/queue/{queue_id}")
            error = status.get("error")
            if error:
                message = error.get("err") if isinstance(error, dict) else error
                raise Census3Error(f"Census3 census {queue_id} failed: {message}")
            return status

        status = await poll_until(
            fetch_queue,
            lambda s: bool(s.get("done")),
            self.queue_attempts,
            self.queue_interval,
            sleep=self._sleep,
            error_cls=PollingTimeoutError,
            message=f"Census3 census {queue_id} was not published in time",
        )
        return Census3Census.model_validate(status["census"])

    async def supported_chains(self) -> List[Dict[str, Any]]:
        info = await self._request("GET", "/info")
        return list(info.get("supportedChains") or [])

    async def is_chain_supported(self, chain_id: Optional[int] = None) -> bool:
        """Return whether gasless voting can be offered on ``chain_id``."""
        chain_id = self.chain_id if chain_id is None else chain_id
        chains = await self.supported_chains()
        return any(chain.get("chainID") == chain_id for chain in chains)


__all__ = ["Census3Client"]
