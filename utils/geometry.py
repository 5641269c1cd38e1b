"""
Utility functions for geometric calculations, primarily for arcs.
Arcs are always interpreted in the XY plane with incremental IJK offsets.
"""
import math

TWO_PI = 2 * math.pi


def lerp(a, b, t):
    """Linear interpolation between two scalars."""
    return a + (b - a) * t


def arc_center(x1, y1, z1, i, j, k):
    """Center of an arc given as offsets from its start point."""
    return x1 + i, y1 + j, z1 + k


def arc_sweep(start_angle, end_angle, clockwise):
    """
    Signed angular sweep from start to end.
    Clockwise arcs sweep negative, counter-clockwise arcs positive; a naive
    difference of the wrong sign is wrapped by a full turn.
    """
    sweep = end_angle - start_angle
    if clockwise and sweep > 0:
        sweep -= TWO_PI
    elif not clockwise and sweep < 0:
        sweep += TWO_PI
    return sweep


def arc_point(cx, cy, radius, angle):
    return cx + radius * math.cos(angle), cy + radius * math.sin(angle)


def estimate_arc_length(cx, cy, radius, start_angle, sweep, z1, z2):
    """Arc length approximated by summed chords, including helical Z travel."""
    resolution = max(50, math.ceil(abs(sweep) * radius * 2))
    length = 0.0
    prev_x, prev_y = arc_point(cx, cy, radius, start_angle)
    prev_z = z1
    for step in range(1, resolution + 1):
        t = step / resolution
        x, y = arc_point(cx, cy, radius, start_angle + sweep * t)
        z = lerp(z1, z2, t)
        length += math.sqrt((x - prev_x) ** 2 + (y - prev_y) ** 2 + (z - prev_z) ** 2)
        prev_x, prev_y, prev_z = x, y, z
    return length
