"""Polling helper tests."""

import pytest

from gasless.errors import CensusSyncTimeoutError, PollingTimeoutError
from gasless.utils.retry import poll_until


class Recorder:
    def __init__(self, ready_on=None):
        self.ready_on = ready_on
        self.checks = 0
        self.delays = []

    async def fetch(self):
        self.checks += 1
        return self.ready_on is not None and self.checks >= self.ready_on

    async def sleep(self, delay):
        self.delays.append(delay)


@pytest.mark.asyncio
@pytest.mark.parametrize("k", [1, 2, 3, 4, 5])
async def test_poll_stops_at_first_success(k):
    rec = Recorder(ready_on=k)

    result = await poll_until(rec.fetch, bool, 5, 6.0, sleep=rec.sleep)

    assert result is True
    assert rec.checks == k
    assert rec.delays == [6.0] * (k - 1)


@pytest.mark.asyncio
async def test_poll_times_out_without_trailing_sleep():
    rec = Recorder(ready_on=None)

    with pytest.raises(CensusSyncTimeoutError) as excinfo:
        await poll_until(
            rec.fetch,
            bool,
            5,
            6.0,
            sleep=rec.sleep,
            error_cls=CensusSyncTimeoutError,
            message="not synced",
        )

    assert rec.checks == 5
    assert rec.delays == [6.0] * 4
    assert excinfo.value.attempts == 5
    assert isinstance(excinfo.value, PollingTimeoutError)
    assert "not synced" in str(excinfo.value)


@pytest.mark.asyncio
async def test_poll_requires_positive_attempts():
    rec = Recorder(ready_on=1)
    with pytest.raises(ValueError):
        await poll_until(rec.fetch, bool, 0, 1.0, sleep=rec.sleep)
    assert rec.checks == 0


@pytest.mark.asyncio
async def test_poll_propagates_fetch_errors():
    async def fetch():
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        await poll_until(fetch, bool, 3, 0.0)
