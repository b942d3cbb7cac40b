import matplotlib
matplotlib.use("Agg")

import pytest

from flowfield import config
from flowfield.core.frame_host import ManualFrameHost
from flowfield.core.scheduler import RenderSink
from flowfield.physics.grid_computation import generate_field


class RecordingSink(RenderSink):
    """Sink that remembers every call it receives."""

    def __init__(self):
        self.fields = []
        self.frames = []
        self.stops = []

    def draw_field(self, field, scale_factor, extent):
        self.fields.append((field, scale_factor, extent))

    def draw_frame(self, particle, match, scale_factor):
        self.frames.append(((particle.x, particle.y), match, scale_factor))

    def on_stop(self, summary):
        self.stops.append(summary)


@pytest.fixture(autouse=True)
def quiet_config():
    verbose = config.VERBOSE
    config.VERBOSE = False
    yield
    config.VERBOSE = verbose


@pytest.fixture
def small_field():
    return generate_field(config.N_FIELD_SHAPE, config.N_FIELD_SHAPE, 8, "SINUSOIDAL")


@pytest.fixture
def host():
    return ManualFrameHost()


@pytest.fixture
def sink():
    return RecordingSink()
