## greedy closest-pair matching of split points
## Copyright (c) 2026 spatialGen contributors

"""Closest-pair matching of the points created by one round of curve
splitting.

Points are visited in the order given.  Each unclaimed point is paired
with the nearest other unclaimed point at non-zero distance (ties go
to the point encountered first), and both are then claimed.  A point
left without a candidate, as happens with an odd number of points,
produces no pair.

This is a greedy O(n^2) approximation, not a minimum-weight perfect
matching: an early pairing may claim a point that a later point would
have been closer to.  Claimed state is kept by position in the input
sequence, so coincident or nearly coincident points never alias each
other.
"""

from spatialgen.geom import dist, line


def closest_pairs(points):
    """Return the list of ``(i, j)`` index pairs chosen by greedy
    nearest-neighbor matching over ``points``."""
    claimed = [False] * len(points)
    pairs = []
    for i, p in enumerate(points):
        if claimed[i]:
            continue
        best = None
        bestd = None
        for j, q in enumerate(points):
            if j == i or claimed[j]:
                continue
            d = dist(p, q)
            if d <= 0.0:
                continue
            if bestd is None or d < bestd:
                best = j
                bestd = d
        if best is not None:
            claimed[i] = True
            claimed[best] = True
            pairs.append((i, best))
    return pairs


def pair(points):
    """Return connecting line segments between greedily matched points."""
    return [line(points[i], points[j]) for i, j in closest_pairs(points)]
