######################################################################
#
# grow_animation.py
#
# Draw a list of segments a few at a time, one batch per frame, so the
# L-system appears to grow.
#
######################################################################
#
# Everything runs on one thread. GrowAnimator.run is an explicit loop:
# draw a batch, then let the pacer wait one frame gap. With the default
# pacer that wait is plt.pause, which also runs the GUI event loop, so
# key presses and resizes land between ticks and may cancel the handle.
# A cancelled handle is noticed at the next tick boundary, never in the
# middle of a batch.

import matplotlib.pyplot as plt

# one frame at 60 fps, in seconds
FRAME_INTERVAL = 1.0 / 60

######################################################################
# state of a single growth animation: which segments, how far along,
# and whether someone asked it to stop

class AnimationHandle:

    def __init__(self, segments, batch=1, delay=0):
        self.segments = segments
        self.batch = batch
        self.delay = delay
        self.cursor = 0
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    @property
    def done(self):
        return self.cursor >= len(self.segments)

    # seconds between the end of one tick and the start of the next
    def frame_gap(self):
        if self.delay > 0:
            return self.delay + FRAME_INTERVAL
        return FRAME_INTERVAL

    def __repr__(self):
        return 'AnimationHandle({}/{}, batch={}, cancelled={})'.format(
            self.cursor, len(self.segments), self.batch, self.cancelled)

######################################################################
# waits by pumping the matplotlib event loop

class PyplotPacer:

    def wait(self, seconds):
        plt.pause(seconds)

######################################################################

class GrowAnimator:

    def __init__(self, surface, pacer=None):
        self.surface = surface
        self.pacer = pacer if pacer is not None else PyplotPacer()
        self._live = None

    @property
    def live(self):
        return self._live

    def _release(self, handle):
        if self._live is handle:
            self._live = None

    def stop(self):

        if self._live is not None:
            self._live.cancel()

        self._live = None

    # cancel whatever is growing now, wipe the surface and hand back a
    # fresh handle; nothing is drawn until the first tick
    def start(self, segments, batch=1, delay=0):

        if batch < 1:
            raise ValueError('batch must be at least 1, got {!r}'.format(batch))

        if delay < 0:
            raise ValueError('delay must be >= 0, got {!r}'.format(delay))

        self.stop()
        self.surface.clear()

        handle = AnimationHandle(segments, int(batch), delay)
        self._live = handle

        return handle

    # draw the next batch; returns True if another tick should follow
    def tick(self, handle):

        if handle.cancelled or handle is not self._live:
            self._release(handle)
            return False

        end = min(handle.cursor + handle.batch, len(handle.segments))

        self.surface.stroke(handle.segments[handle.cursor:end])
        handle.cursor = end

        if handle.done or handle.cancelled:
            self._release(handle)
            return False

        return True

    def run(self, handle):

        while self.tick(handle):
            self.pacer.wait(handle.frame_gap())

        return handle

    def grow(self, segments, batch=1, delay=0):
        return self.run(self.start(segments, batch, delay))

    # no animation: everything in a single stroke
    def draw_all(self, segments):

        self.stop()
        self.surface.clear()
        self.surface.stroke(segments)
