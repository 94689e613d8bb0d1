import logging
from contextlib import asynccontextmanager

import pytest

from app import main


class StopSweeper(BaseException):
    """Not an ``Exception``, so it ends the sweep loop."""


async def test_sweeper_survives_failed_sweeps(monkeypatch, caplog):
    sweeps = []

    @asynccontextmanager
    async def flaky_scope():
        sweeps.append(len(sweeps) + 1)
        if len(sweeps) == 1:
            raise RuntimeError("disk full")
        raise StopSweeper
        yield

    monkeypatch.setattr(main, "session_scope", flaky_scope)

    with caplog.at_level(logging.ERROR, logger="app.main"):
        with pytest.raises(StopSweeper):
            await main.expire_spots_periodically(0)

    assert sweeps == [1, 2]
    assert "Spot expiry sweep failed" in caplog.text
