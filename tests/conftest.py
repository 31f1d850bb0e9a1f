import pytest

from groovebox.routing.link import RelayLink
from groovebox.sequencing.clock import step_period_ms


class ManualClock:
    """Clock stand-in that ticks only when told to."""

    def __init__(self, bpm=120, steps_per_beat=4):
        self.bpm = bpm
        self.steps_per_beat = steps_per_beat
        self.tick_fn = None
        self.starts = 0
        self.stops = 0

    @property
    def running(self):
        return self.tick_fn is not None

    @property
    def period_ms(self):
        return step_period_ms(self.bpm, self.steps_per_beat)

    @property
    def period(self):
        return self.period_ms / 1000.0

    def start(self, tick_fn):
        if self.tick_fn is not None:
            return False
        self.tick_fn = tick_fn
        self.starts += 1
        return True

    def stop(self):
        if self.tick_fn is None:
            return False
        self.tick_fn = None
        self.stops += 1
        return True

    def tick(self, n=1):
        for _ in range(n):
            assert self.tick_fn is not None, "clock is stopped"
            self.tick_fn()


class FakeSocketClient:
    """Records emits the way socketio.Client would send them."""

    def __init__(self, connected=True):
        self.connected = connected
        self.sent = []
        self.handlers = {}

    def on(self, event, handler):
        self.handlers[event] = handler

    def emit(self, event, data):
        self.sent.append((event, data))

    def connect(self, url):
        self.connected = True

    def disconnect(self):
        self.connected = False

    def events(self, name=None):
        return [(e, d) for e, d in self.sent if name is None or e == name]


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def sock():
    return FakeSocketClient()


@pytest.fixture
def link(sock):
    return RelayLink(client=sock)
