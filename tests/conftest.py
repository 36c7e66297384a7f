import pytest
from event_bus import EventBus

from powlab.hashrate_meter import HashrateMeter
from powlab.miner import Miner
from powlab.session import MiningJob, MiningState


class FakeClock:
    """Seconds-based clock that only moves when told to"""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class Recorder:
    def __init__(self):
        self.messages = []

    def of_type(self, clz):
        return [m for m in self.messages if isinstance(m, clz)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    rec = Recorder()

    @bus.on("miner")
    def record(session_uid, message):
        rec.messages.append(message)

    return rec


@pytest.fixture
def genesis_job():
    return MiningJob.from_input("genesis", "hello", 1)


@pytest.fixture
def miner(bus, clock, genesis_job):
    session = MiningState(meter=HashrateMeter(clock=clock))
    return Miner("miner", bus, job=genesis_job, session=session)
