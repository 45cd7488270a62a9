import matplotlib

matplotlib.use('Agg')

import pytest

from lsystems import Segment


class FakeSurface:
    def __init__(self):
        self.calls = []

    def clear(self):
        self.calls.append(('clear', None))

    def stroke(self, segments):
        self.calls.append(('stroke', list(segments)))

    @property
    def strokes(self):
        return [segs for name, segs in self.calls if name == 'stroke']


class RecordingPacer:
    """Stands in for plt.pause; optionally runs a callback on each wait."""

    def __init__(self, on_wait=None):
        self.gaps = []
        self.on_wait = on_wait

    def wait(self, seconds):
        self.gaps.append(seconds)
        if self.on_wait is not None:
            self.on_wait(len(self.gaps))


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def pacer():
    return RecordingPacer()


@pytest.fixture
def five_segments():
    return [Segment(float(i), 0.0, float(i + 1), 0.0) for i in range(5)]


@pytest.fixture
def make_pacer():
    return RecordingPacer
