## recursive curve subdivision and reconnection
## Copyright (c) 2026 spatialGen contributors

"""Recursive curve refinement.

``refine(curves, maxlength)`` repeatedly halves every curve longer than
``maxlength`` at the midpoint of its parameter domain, and after each
round joins the new midpoints with connector segments chosen by
:func:`spatialgen.pairing.pair`.  Connectors are ordinary curves: any
that are themselves too long are split in the next round.  The result
is a dense network of curves no longer than ``maxlength``.

Refinement stops when nothing is too long, or after ``maxiter`` rounds.
In the latter case the remaining curves are emitted as they are and
the result is flagged as not converged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from spatialgen.geom import domain, isgoodnum, length, sample, split
from spatialgen.pairing import pair

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100


@dataclass
class RefineResult:
    """Curves produced by :func:`refine_curves` and how they were reached."""

    curves: List[list] = field(default_factory=list)
    iterations: int = 0
    converged: bool = True


def split_at_midpoint(curve):
    """Split ``curve`` at the middle of its domain.

    Returns ``(pieces, splitpoint)``.  When the split does not yield two
    pieces, ``pieces`` holds the original curve alone and ``splitpoint``
    is ``None``.
    """
    t0, t1 = domain(curve)
    t = (t0 + t1) / 2.0
    pieces = split(curve, t)
    if len(pieces) != 2:
        return [curve], None
    return pieces, sample(curve, t)


def refine_curves(curves: Sequence, maxlength: float,
                  maxiter: int = DEFAULT_MAX_ITERATIONS) -> RefineResult:
    """Subdivide ``curves`` until none is longer than ``maxlength``.

    Curves no longer than ``maxlength`` pass through unchanged, in the
    order they are discovered.  A curve that cannot be split is kept
    whole and not revisited.
    """
    if not isgoodnum(maxlength) or maxlength <= 0:
        raise ValueError('maximum length must be a positive number, got {}'.format(maxlength))
    if not isinstance(maxiter, int) or maxiter < 0:
        raise ValueError('bad iteration limit: {}'.format(maxiter))

    result = RefineResult()
    working = list(curves)
    while working:
        toolong = []
        for c in working:
            if length(c) > maxlength:
                toolong.append(c)
            else:
                result.curves.append(c)
        if not toolong:
            break
        if result.iterations >= maxiter:
            result.curves.extend(toolong)
            result.converged = False
            logger.warning("curve refinement stopped after %d iterations; "
                           "%d curve(s) still exceed %g",
                           result.iterations, len(toolong), maxlength)
            break

        nextgen = []
        splitpoints = []
        for c in toolong:
            pieces, splitpoint = split_at_midpoint(c)
            if splitpoint is None:
                # unsplittable, so keep it whole rather than retry forever
                result.curves.append(c)
                continue
            nextgen.extend(pieces)
            splitpoints.append(splitpoint)
        connectors = pair(splitpoints)
        nextgen.extend(connectors)
        result.iterations += 1
        logger.debug("refinement iteration %d: %d split(s), %d connector(s)",
                     result.iterations, len(splitpoints), len(connectors))
        working = nextgen
    return result


def refine(curves: Sequence, maxlength: float,
           maxiter: int = DEFAULT_MAX_ITERATIONS) -> List[list]:
    """Return the refined curve network for ``curves``; see
    :func:`refine_curves`."""
    return refine_curves(curves, maxlength, maxiter).curves
