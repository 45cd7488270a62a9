######################################################################
#
# plot_segments.py
#
# Drawing surface for L-system segments on top of a matplotlib Axes.
#
######################################################################
#
# Turtle coordinates put +y down the screen, with the turtle starting
# at the origin and heading up. The surface decides where that origin
# lands: either the fixed canvas placement (centered horizontally, 95%
# of the way down) or fitted to the bounds of the drawing.

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from lsystems import segments_to_array, segment_bounds

BACKGROUND = '#000'
STROKE_COLOR = '#7CFC00'
LINE_WIDTH = 1

# fraction of the height between the top of the view and the origin
ORIGIN_HEIGHT = 0.95

class SegmentSurface:

    def __init__(self, ax):
        self.ax = ax
        self.ax.set_position([0, 0, 1, 1])
        self.ax.axis('off')
        self.clear()

    def clear(self):

        for collection in list(self.ax.collections):
            collection.remove()

        self.ax.figure.set_facecolor(BACKGROUND)
        self.ax.set_facecolor(BACKGROUND)

        self.redraw()

    # stroke a batch of segments as one LineCollection
    def stroke(self, segments):

        if len(segments) == 0:
            return None

        lc = LineCollection(segments_to_array(segments),
                            colors=STROKE_COLOR, linewidths=LINE_WIDTH)

        self.ax.add_collection(lc, autolim=False)
        self.redraw()

        return lc

    def set_viewport(self, width, height):

        self.ax.set_aspect('auto')
        self.ax.set_xlim(-width / 2, width / 2)

        # y increases downward
        self.ax.set_ylim((1 - ORIGIN_HEIGHT) * height, -ORIGIN_HEIGHT * height)

        self.redraw()

    def fit(self, segments, margin=0.05):

        xmin, ymin, xmax, ymax = segment_bounds(segments)

        pad = margin * max(xmax - xmin, ymax - ymin, 1.0)

        self.ax.set_xlim(xmin - pad, xmax + pad)
        self.ax.set_ylim(ymax + pad, ymin - pad)
        self.ax.set_aspect('equal', adjustable='datalim')

        self.redraw()

    def stroke_count(self):
        return sum(len(c.get_segments()) for c in self.ax.collections)

    def redraw(self):
        self.ax.figure.canvas.draw_idle()

######################################################################
# draw everything in one go and save it to an image

def plot_segments(segments, image_filename='segment_plot.png'):

    fig, ax = plt.subplots()

    surface = SegmentSurface(ax)
    surface.stroke(segments)
    surface.fit(segments)

    fig.savefig(image_filename, facecolor=fig.get_facecolor())
    plt.close(fig)

    print('wrote {}'.format(image_filename))


if __name__ == '__main__':

    segments = np.genfromtxt('segments.txt').reshape(-1, 2, 2)

    plot_segments(segments)
