#!/usr/bin/env python
######################################################################
#
# lsystems.py
#
######################################################################
#
# Based on documentation in https://en.wikipedia.org/wiki/L-system and
# http://paulbourke.net/fractals/lsys/
#
# Command line front end: pick a named L-System, optionally override
# its axiom, angle or rules, run it for some number of steps and plot
# the result in 3D (or dump the segments as text).

import sys
import argparse
import logging
import warnings
from datetime import datetime
import numpy as np

from lsys_rules import parse_rules_text, validate_rules_text
from lsys_engine import LSystem, LSystemState, MAX_STEP_COUNT
from lsys_turtle import lsys_segments_from_string
from plot_segments import plot_segments

def _preset(axiom, rules_text, angle):
    return LSystemState(axiom, parse_rules_text(rules_text), angle, 0)

# dictionary mapping names to a few L-Systems found on the pages above,
# with step_count left at zero - the number of steps comes from the
# command line

KNOWN_LSYSTEMS = {

    'sierpinski_triangle': _preset(
        'F-G-G', 'F => F-G+F+G-F\nG => GG', 120),

    'sierpinski_arrowhead': _preset(
        'A', 'A => B-A-B\nB => A+B+A', 60),

    'dragon_curve': _preset(
        'FX', 'X => X+YF+\nY => -FX-Y', 90),

    'barnsley_fern': _preset(
        'X', 'X => F+[[X]-X]-F[-FX]+X\nF => FF', 25),

    'sticks': _preset(
        'X', 'X => F[+X]F[-X]+X\nF => FF', 20),

    'hilbert': _preset(
        'L', 'L => +RF-LFL-FR+\nR => -LF+RFR+FL-', 90),

    'pentaplexity': _preset(
        'F++F++F++F++F', 'F => F++F++F+++++F-F++F', 36),

    'bush_3d': _preset(
        'F', 'F => F[+F]F[-F]F[/F]F[*F]', 15),

    # grows one segment per step until n passes 4, then stops
    'parametric_stem': _preset(
        'A(n=0)', 'A(n>4) => F\nA => FA(n+1)', 30),

}

######################################################################
# argparse type for the step count

def step_count(text):

    value = int(text)

    if value < 0 or value > MAX_STEP_COUNT:
        raise argparse.ArgumentTypeError(
            'steps must be between 0 and {}'.format(MAX_STEP_COUNT))

    return value

######################################################################
# parse command-line options for this program

def parse_options(argv=None):

    parser = argparse.ArgumentParser(
        description='parametric L-system generator')

    parser.add_argument('lname', metavar='LSYSTEM',
                        help='name of desired L-system',
                        type=str,
                        choices=KNOWN_LSYSTEMS)

    parser.add_argument('steps', metavar='STEPS', type=step_count,
                        help='number of rewriting steps (0-{})'.format(
                            MAX_STEP_COUNT))

    parser.add_argument('-a', dest='angle', metavar='ANGLE', type=float,
                        default=None,
                        help='turn angle in degrees')

    parser.add_argument('-A', dest='axiom', metavar='AXIOM', type=str,
                        default=None,
                        help='axiom to start from')

    parser.add_argument('-R', dest='rules_file', metavar='RULESFILE',
                        type=str, default=None,
                        help='file of rules, one "predecessor => successor" per line')

    parser.add_argument('-x', dest='max_segments', metavar='MAXSEGMENTS',
                        type=int, default=100000,
                        help='maximum number of segments to plot')

    parser.add_argument('-t', dest='text_only', action='store_true',
                        help='use text output instead of PNG')

    parser.add_argument('-p', dest='print_string', action='store_true',
                        help='print the generated string')

    parser.add_argument('-v', dest='verbose', action='store_true',
                        help='show debug logging')

    opts = parser.parse_args(argv)

    preset = KNOWN_LSYSTEMS[opts.lname]

    rules = preset.rules

    if opts.rules_file is not None:

        with open(opts.rules_file, 'r') as istr:
            rules_text = istr.read()

        for problem in validate_rules_text(rules_text):
            print('{}:{}: {}'.format(opts.rules_file, problem.line_no,
                                     problem.message))

        # bad lines were just reported above
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', UserWarning)
            rules = parse_rules_text(rules_text)

    opts.state = LSystemState(
        axiom = opts.axiom if opts.axiom is not None else preset.axiom,
        rules = rules,
        angle = opts.angle if opts.angle is not None else preset.angle,
        step_count = opts.steps
    )

    return opts

######################################################################
# main function

def main(argv=None):

    opts = parse_options(argv)

    logging.basicConfig(
        level=logging.DEBUG if opts.verbose else logging.WARNING,
        format='%(name)s: %(message)s')

    # time string generation and interpretation
    start = datetime.now()

    lsys = LSystem()
    lsys.set_state(opts.state)

    segments = lsys_segments_from_string(lsys.result, lsys.angle)

    # print elapsed time
    elapsed = (datetime.now() - start).total_seconds()

    print('generated {} symbols, {} segments in {:.6f} s'.format(
        len(lsys.result), len(segments), elapsed))

    if opts.print_string:
        print(lsys.result)

    if opts.max_segments >= 0 and len(segments) > opts.max_segments:
        print('...maximum of {} segments exceeded, skipping output!'.format(
            opts.max_segments))
        return 0

    if opts.text_only:
        np.savetxt('segments.txt', segments.reshape(-1, 6))
        print('wrote segments.txt')
    else:
        plot_segments(segments)

    return 0

if __name__ == '__main__':
    sys.exit(main())
