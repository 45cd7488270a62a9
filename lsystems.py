#!/usr/bin/env python
######################################################################
#
# lsystems.py
#
# L-System growth visualizer: rule parsing, string expansion and
# turtle interpretation, plus the command-line driver.
#
######################################################################
#
# Based on documentation in https://en.wikipedia.org/wiki/L-system and
# http://paulbourke.net/fractals/lsys/
#
# Strings are built by iteration and explicit string representation,
# then walked once by a turtle to produce line segments. Drawing (all
# at once or grown a few segments per frame) lives in plot_segments.py
# and grow_animation.py.

import sys
import math
import argparse
from datetime import datetime
from collections import namedtuple
import numpy as np

LSystem = namedtuple('LSystem', 'start, rules, turn_angle_deg, draw_chars')

RunConfig = namedtuple('RunConfig',
                       'axiom, rules_text, iterations, angle_deg, step, draw_chars')

RunStats = namedtuple('RunStats', 'expanded_length, segment_count')

Segment = namedtuple('Segment', 'x1, y1, x2, y2')

# symbols that move the turtle forward and draw
DEFAULT_DRAW_CHARS = 'ABF'

DEFAULT_AXIOM = 'F'

# start pointing "up" on a surface where +y is down
INITIAL_HEADING = -math.pi / 2

# guard against exponential blowup during expansion
MAX_EXPANDED_LENGTH = 2000000

# dictionary mapping names to a few L-Systems found on the pages
# linked above; rules are in the same text format parse_rules reads

KNOWN_LSYSTEMS = {

    'sierpinski_triangle': LSystem(
        start = 'F-G-G',
        rules = 'F=F-G+F+G-F\nG=GG',
        turn_angle_deg = 120,
        draw_chars = 'FG'
    ),

    'sierpinski_arrowhead': LSystem(
        start = 'A',
        rules = 'A=B-A-B\nB=A+B+A',
        turn_angle_deg = 60,
        draw_chars = 'AB'
    ),

    'dragon_curve': LSystem(
        start = 'FX',
        rules = 'X=X+YF+\nY=-FX-Y',
        turn_angle_deg = 90,
        draw_chars = 'F'
    ),

    'barnsley_fern': LSystem(
        start = 'X',
        rules = 'X=F+[[X]-X]-F[-FX]+X\nF=FF',
        turn_angle_deg = 25,
        draw_chars = 'F'
    ),

    'sticks': LSystem(
        start = 'X',
        rules = 'X=F[+X]F[-X]+X\nF=FF',
        turn_angle_deg = 20,
        draw_chars = 'F'
    ),

    'hilbert': LSystem(
        start = 'L',
        rules = 'L=+RF-LFL-FR+\nR=-LF+RFR+FL-',
        turn_angle_deg = 90,
        draw_chars = 'F'
    ),

    'pentaplexity': LSystem(
        start = 'F++F++F++F++F',
        rules = 'F=F++F++F+++++F-F++F',
        turn_angle_deg = 36,
        draw_chars = 'F'
    ),

    'algae': LSystem(
        start = 'A',
        rules = 'A=AB\nB=A',
        turn_angle_deg = 25,
        draw_chars = 'AB'
    ),

    'bush': LSystem(
        start = 'F',
        rules = 'F=F[+F]F[-F]F',
        turn_angle_deg = 25,
        draw_chars = 'F'
    )

}

######################################################################
# errors raised while validating input; all of them are ValueErrors so
# callers that only care about "bad input" can catch that

class LSystemError(ValueError):
    pass

class MalformedRuleError(LSystemError):
    pass

class InvalidIterationCountError(LSystemError):
    pass

class InvalidAngleError(LSystemError):
    pass

class InvalidStepError(LSystemError):
    pass

class IterationLimitExceededError(LSystemError):
    pass

######################################################################
# parse rule text like
#
#   A=AB
#   B=A
#
# into a dictionary mapping symbols -> replacements. Blank lines and
# lines starting with '#' are skipped; a later rule for the same
# symbol replaces an earlier one.

def parse_rules(text):

    rules = dict()

    text = (text or '').strip()

    for line in text.split('\n'):

        line = line.strip()

        if not line or line.startswith('#'):
            continue

        lhs, sep, rhs = line.partition('=')

        if not sep:
            raise MalformedRuleError(
                'bad rule line (expected X=...): {!r}'.format(line))

        lhs = lhs.strip()

        if len(lhs) != 1:
            raise MalformedRuleError(
                'rule LHS must be a single character: {!r}'.format(lhs))

        rules[lhs] = rhs.strip()

    return rules

######################################################################
# make a big ol' string from an axiom using repeated string
# replacement. If max_length is given, stop as soon as a generation
# grows past it.

def lsys_build_string(axiom, rules, iterations, max_length=None):

    lstring = axiom

    for i in range(iterations):

        expanded = ''.join([rules.get(symbol, symbol) for symbol in lstring])

        # nothing left to rewrite
        if expanded == lstring:
            break

        lstring = expanded

        if max_length is not None and len(lstring) > max_length:
            raise IterationLimitExceededError(
                'expansion exceeds {} symbols after {} of {} iterations'.format(
                    max_length, i+1, iterations))

    return lstring

######################################################################
# take a string and turn it into a list of line segments, where each
# segment is a Segment(x1, y1, x2, y2) in turtle coordinates.
#
# draw_chars lists the symbols that draw; None means every letter
# draws. Symbols other than letters, + - [ ] are ignored, and a ']'
# with nothing saved leaves the turtle where it is.

def lsys_segments_from_string(lstring, step, angle_deg,
                              draw_chars=DEFAULT_DRAW_CHARS):

    turn = angle_deg * math.pi / 180

    x, y = 0.0, 0.0
    heading = INITIAL_HEADING

    # stack of x, y, heading tuples
    stack = []

    segments = []

    for symbol in lstring:

        if symbol == '+':

            heading += turn

        elif symbol == '-':

            heading -= turn

        elif symbol == '[':

            stack.append( (x, y, heading) )

        elif symbol == ']':

            if stack:
                x, y, heading = stack.pop()

        elif (symbol.isalpha() if draw_chars is None else symbol in draw_chars):

            new_x = x + step * math.cos(heading)
            new_y = y + step * math.sin(heading)
            segments.append(Segment(x, y, new_x, new_y))
            x, y = new_x, new_y

    return segments

######################################################################
# segments as an n-by-2-by-2 array where each segment is represented as
#
#  [(x0, y0), (x1, y1)]

def segments_to_array(segments):
    return np.array(segments, dtype=float).reshape(-1, 2, 2)

def segment_bounds(segments):

    if len(segments) == 0:
        return 0.0, 0.0, 0.0, 0.0

    points = segments_to_array(segments).reshape(-1, 2)
    xmin, ymin = points.min(axis=0)
    xmax, ymax = points.max(axis=0)

    return float(xmin), float(ymin), float(xmax), float(ymax)

######################################################################
# validate user input and bundle it up as a RunConfig. Numbers may
# come in as strings straight from a text field.

def _as_number(value, error_cls, what):

    if isinstance(value, bool):
        raise error_cls('{} must be a number'.format(what))

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise error_cls('{} must be a number, got {!r}'.format(what, value))

    if not math.isfinite(number):
        raise error_cls('{} must be finite'.format(what))

    return number

def make_config(axiom, rules_text, iterations, angle_deg, step,
                draw_chars=DEFAULT_DRAW_CHARS):

    axiom = (axiom or '').strip() or DEFAULT_AXIOM

    iterations = _as_number(iterations, InvalidIterationCountError,
                            'iterations')

    if iterations < 0 or iterations != int(iterations):
        raise InvalidIterationCountError(
            'iterations must be an integer >= 0, got {!r}'.format(iterations))

    angle_deg = _as_number(angle_deg, InvalidAngleError, 'angle')

    step = _as_number(step, InvalidStepError, 'step')

    if step <= 0:
        raise InvalidStepError('step must be > 0, got {!r}'.format(step))

    return RunConfig(axiom=axiom,
                     rules_text=rules_text or '',
                     iterations=int(iterations),
                     angle_deg=angle_deg,
                     step=step,
                     draw_chars=draw_chars)

def config_from_preset(name, iterations, step=8):

    lsys = KNOWN_LSYSTEMS[name]

    return make_config(lsys.start, lsys.rules, iterations,
                       lsys.turn_angle_deg, step, lsys.draw_chars)

######################################################################
# full pipeline: rules -> expanded string -> segments, plus the stats
# shown next to the drawing

def compute_segments(config, max_length=MAX_EXPANDED_LENGTH):

    rules = parse_rules(config.rules_text)

    lstring = lsys_build_string(config.axiom, rules, config.iterations,
                                max_length)

    segments = lsys_segments_from_string(lstring, config.step,
                                         config.angle_deg, config.draw_chars)

    return segments, RunStats(len(lstring), len(segments))

######################################################################
# parse command-line options for this program

def parse_options(argv=None):

    parser = argparse.ArgumentParser(
        description='L-system growth visualizer')

    parser.add_argument('lname', metavar='LSYSTEM', nargs='?',
                        help='name of a known L-system (omit to use --axiom/--rules)',
                        type=str, default=None,
                        choices=KNOWN_LSYSTEMS)

    parser.add_argument('-n', dest='max_depth', metavar='MAXDEPTH',
                        type=int, default=4,
                        help='number of rewriting iterations')

    parser.add_argument('--axiom', dest='axiom', default=DEFAULT_AXIOM,
                        help='start string')

    parser.add_argument('--rules', dest='rules_text', default='F=F[+F]F[-F]F',
                        help='rules as X=... lines (use \\n between rules)')

    parser.add_argument('--rules-file', dest='rules_file', default=None,
                        help='read rules from a file instead')

    parser.add_argument('--angle', dest='angle_deg', type=float, default=None,
                        help='turn angle in degrees (default 25)')

    parser.add_argument('--step', dest='step', type=float, default=8,
                        help='segment length')

    parser.add_argument('--draw-chars', dest='draw_chars', default=None,
                        help='symbols that draw (default ABF)')

    parser.add_argument('--mode', dest='mode', choices=('render', 'grow'),
                        default='grow',
                        help='draw all at once or grow it frame by frame')

    parser.add_argument('--batch', dest='batch', type=int, default=1,
                        help='segments drawn per frame in grow mode')

    parser.add_argument('--delay', dest='delay_ms', type=float, default=10,
                        help='extra delay between frames in ms')

    parser.add_argument('-x', dest='max_segments', metavar='MAXSEGMENTS',
                        type=int, default=100000,
                        help='maximum number of segments to plot')

    parser.add_argument('--max-length', dest='max_length', type=int,
                        default=MAX_EXPANDED_LENGTH,
                        help='maximum expanded string length')

    parser.add_argument('-t', dest='text_only', action='store_true',
                        help='use text output instead of plotting')

    parser.add_argument('-o', dest='output', metavar='IMAGE', default=None,
                        help='save a PNG of the full drawing and exit')

    opts = parser.parse_args(argv)

    if opts.batch < 1:
        parser.error('--batch must be at least 1')

    if opts.delay_ms < 0:
        parser.error('--delay must be >= 0')

    if opts.rules_file is not None:
        with open(opts.rules_file, 'r') as istr:
            opts.rules_text = istr.read()
    else:
        opts.rules_text = opts.rules_text.replace('\\n', '\n')

    return opts

def config_from_options(opts):

    if opts.lname is not None:

        lsys = KNOWN_LSYSTEMS[opts.lname]

        angle_deg = lsys.turn_angle_deg if opts.angle_deg is None else opts.angle_deg
        draw_chars = lsys.draw_chars if opts.draw_chars is None else opts.draw_chars

        return make_config(lsys.start, lsys.rules, opts.max_depth,
                           angle_deg, opts.step, draw_chars)

    angle_deg = 25 if opts.angle_deg is None else opts.angle_deg
    draw_chars = DEFAULT_DRAW_CHARS if opts.draw_chars is None else opts.draw_chars

    return make_config(opts.axiom, opts.rules_text, opts.max_depth,
                       angle_deg, opts.step, draw_chars)

######################################################################
# main function

def main(argv=None):

    try:
        opts = parse_options(argv)
        config = config_from_options(opts)

        # time segment generation
        start = datetime.now()

        segments, stats = compute_segments(config, opts.max_length)

    except (LSystemError, OSError) as e:
        print('error: {}'.format(e), file=sys.stderr)
        return 2

    # print elapsed time
    elapsed = (datetime.now() - start).total_seconds()

    print('generated {} segments in {:.6f} s'.format(len(segments), elapsed))
    print('expanded length: {:,}  segments: {:,}'.format(
        stats.expanded_length, stats.segment_count))

    if opts.max_segments >= 0 and len(segments) > opts.max_segments:
        print('...maximum of {} segments exceeded, skipping output!'.format(
            opts.max_segments))
        return 0

    if opts.text_only:
        np.savetxt('segments.txt', segments_to_array(segments).reshape(-1, 4))
        print('wrote segments.txt')
        return 0

    if opts.output is not None:
        from plot_segments import plot_segments
        plot_segments(segments, opts.output)
        return 0

    from visualizer import Visualizer

    Visualizer.show(config, mode=opts.mode, batch=opts.batch,
                    delay=opts.delay_ms / 1000.0,
                    max_length=opts.max_length)

    return 0

if __name__ == '__main__':
    sys.exit(main())
