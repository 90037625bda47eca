######################################################################
#
# lsys_turtle.py
#
######################################################################
#
# Turn an L-System string into 3D line segments. The turtle starts at
# the origin heading up the +Y axis and understands
#
#   A-I   move forward one step, drawing a segment
#   a-i   move forward one step without drawing
#   + -   turn about the Z axis by +/- the turn angle
#   * /   turn about the X axis by +/- the turn angle
#   [ ]   push / pop position and heading
#
# Everything else (including attribute text like '(i=0.2)') is
# skipped.

import numpy as np

DRAW_CHARS = 'ABCDEFGHI'
MOVE_CHARS = 'abcdefghi'

######################################################################
# rotation matrices about the Z and X axes

def _rotation_z(theta):
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, -s, 0.],
                     [s, c, 0.],
                     [0., 0., 1.]])

def _rotation_x(theta):
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[1., 0., 0.],
                     [0., c, -s],
                     [0., s, c]])

######################################################################
# segments returned as an n-by-2-by-3 array where each segment is
# [(x0, y0, z0), (x1, y1, z1)]

def lsys_segments_from_string(lstring, turn_angle_deg, distance=1.0):

    theta = turn_angle_deg * np.pi / 180

    turns = {
        '+': _rotation_z(theta),
        '-': _rotation_z(-theta),
        '*': _rotation_x(theta),
        '/': _rotation_x(-theta),
    }

    cur_pos = np.zeros(3)
    cur_dir = np.array([0., distance, 0.])

    # stack of pos, dir pairs
    stack = []

    segments = []

    for symbol in lstring:

        if symbol in DRAW_CHARS:

            new_pos = cur_pos + cur_dir
            segments.append([cur_pos, new_pos])
            cur_pos = new_pos

        elif symbol in MOVE_CHARS:

            cur_pos = cur_pos + cur_dir

        elif symbol in turns:

            cur_dir = turns[symbol].dot(cur_dir)

        elif symbol == '[':

            stack.append((cur_pos, cur_dir))

        elif symbol == ']':

            # unmatched ']' is ignored
            if stack:
                cur_pos, cur_dir = stack.pop()

    if not segments:
        return np.zeros((0, 2, 3))

    return np.array(segments)
