######################################################################
#
# visualizer.py
#
# Interactive matplotlib window around the L-system pipeline.
#
######################################################################
#
# Keys:
#
#   r        render everything at once
#   g        grow it batch by batch
#   up/down  one more / one fewer iteration, then redraw
#   escape   stop growing
#
# Errors in the configuration never close the window; they show up in
# the status line and the next run starts from a clean slate.

import matplotlib.pyplot as plt

from lsystems import (LSystemError, MAX_EXPANDED_LENGTH,
                      compute_segments, make_config)
from plot_segments import SegmentSurface, STROKE_COLOR
from grow_animation import GrowAnimator, FRAME_INTERVAL

MODES = ('render', 'grow')

ERROR_COLOR = '#ff6b6b'

class Visualizer:

    def __init__(self, fig, ax, config, batch=1, delay=0.01,
                 max_length=MAX_EXPANDED_LENGTH, pacer=None):

        self.fig = fig
        self.config = config
        self.batch = batch
        self.delay = delay
        self.max_length = max_length

        self.surface = SegmentSurface(ax)
        self.animator = GrowAnimator(self.surface, pacer)

        self.viewport = None
        self.last_segments = None
        self.last_mode = 'grow'
        self.stats = None
        self.status = ''
        self.status_is_error = False

        # mode of the next run, and whether a run loop is active
        self.pending = None
        self._running = False

        self.status_text = fig.text(0.01, 0.99, '', va='top', ha='left',
                                    color=STROKE_COLOR, family='monospace')
        self.stats_text = fig.text(0.99, 0.99, '', va='top', ha='right',
                                   color=STROKE_COLOR, family='monospace')

    def connect(self):

        canvas = self.fig.canvas

        canvas.mpl_connect('resize_event', self.resize)
        canvas.mpl_connect('key_press_event', self.on_key)
        canvas.mpl_connect('close_event', self.on_close)

    def set_status(self, msg, is_error=False):

        self.status = msg or ''
        self.status_is_error = is_error

        self.status_text.set_text(self.status)
        self.status_text.set_color(ERROR_COLOR if is_error else STROKE_COLOR)

        if self.status:
            print(self.status)

        self.surface.redraw()

    def update_stats(self, stats):

        self.stats = stats

        self.stats_text.set_text(
            'expanded length: {:,}\nsegments: {:,}'.format(
                stats.expanded_length, stats.segment_count))

    # match the viewport to the canvas size; returns True if it changed
    def _apply_viewport(self):

        width, height = self.fig.canvas.get_width_height()

        if not width or not height:
            print('canvas has zero size: {}x{}'.format(width, height))
            return False

        if self.viewport == (width, height):
            return False

        self.viewport = (width, height)
        self.surface.set_viewport(width, height)

        return True

    def resize(self, event=None):

        if not self._apply_viewport():
            return

        # a growing drawing is not resumed, just shown in full
        if self.last_segments is not None:
            self.animator.draw_all(self.last_segments)
            self.set_status('Rendered.')

    # Keys arrive while a growth is waiting on plt.pause. Asking for a
    # run then only queues it and stops the current growth; the loop
    # below starts it once animator.run returns.
    def request(self, mode):

        if mode not in MODES:
            raise ValueError('mode must be one of {}, got {!r}'.format(MODES, mode))

        self.pending = mode

        if self._running:
            self.animator.stop()
            return None

        return self.run(mode)

    def run(self, mode=None):

        if mode is None:
            mode = self.last_mode

        if mode not in MODES:
            raise ValueError('mode must be one of {}, got {!r}'.format(MODES, mode))

        if self._running:
            return self.request(mode)

        self.pending = mode
        self._running = True

        handle = None

        try:
            while self.pending is not None:
                mode, self.pending = self.pending, None
                handle = self._run_once(mode)
        finally:
            self._running = False

        return handle

    def _run_once(self, mode):

        self.animator.stop()
        self._apply_viewport()
        self.set_status('')

        try:
            segments, stats = compute_segments(self.config, self.max_length)
        except LSystemError as e:
            self.set_status(str(e), is_error=True)
            return None

        self.last_segments = segments
        self.last_mode = mode
        self.update_stats(stats)

        if mode == 'render':
            self.animator.draw_all(segments)
            self.set_status('Rendered.')
            return None

        handle = self.animator.start(segments, self.batch, self.delay)
        self.set_status('Growing...')

        self.animator.run(handle)

        if handle.done and not handle.cancelled:
            self.set_status('Grown.')

        return handle

    def stop(self):
        self.pending = None
        self.animator.stop()
        self.set_status('Stopped.')

    def change_iterations(self, delta):

        c = self.config

        try:
            self.config = make_config(c.axiom, c.rules_text,
                                      c.iterations + delta, c.angle_deg,
                                      c.step, c.draw_chars)
        except LSystemError as e:
            self.set_status(str(e), is_error=True)
            return

        self.request(self.last_mode)

    def on_key(self, event):

        if event.key == 'r':
            self.request('render')
        elif event.key == 'g':
            self.request('grow')
        elif event.key == 'escape':
            self.stop()
        elif event.key == 'up':
            self.change_iterations(1)
        elif event.key == 'down':
            self.change_iterations(-1)

    def on_close(self, event):
        self.animator.stop()

    # open a window, run once in the given mode and keep it open
    @classmethod
    def show(cls, config, mode='grow', batch=1, delay=0.01,
             max_length=MAX_EXPANDED_LENGTH):

        # 'r' and 'g' are ours, not home/grid
        for name, key in (('keymap.home', 'r'), ('keymap.grid', 'g')):
            plt.rcParams[name] = [k for k in plt.rcParams[name] if k != key]

        fig, ax = plt.subplots()
        fig.canvas.manager.set_window_title('L-System Visualizer')

        vis = cls(fig, ax, config, batch=batch, delay=delay,
                  max_length=max_length)

        # let the window settle on its first size before listening
        plt.show(block=False)
        plt.pause(FRAME_INTERVAL)

        vis.connect()
        vis.run(mode)

        plt.show()

        return vis
