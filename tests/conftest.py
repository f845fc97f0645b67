import pytest

from matchclock.services import ManualIntervalScheduler
from support import FakeClock, Ticker


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return ManualIntervalScheduler(clock)


@pytest.fixture
def tick(clock, scheduler):
    return Ticker(clock, scheduler)
