## voxel grid construction and interior/boundary classification
## Copyright (c) 2026 spatialGen contributors

"""Voxelization of solids.

The pipeline has three stages:

1. :func:`build_grid` tiles a bounding box with cubic cells of edge
   ``size``, enumerated with x outermost and z innermost.  Each axis
   gets ``floor(span/size)+1`` cells, so the last row may overhang the
   box.

2. :func:`candidate_cells` keeps the cells that touch the solid.

3. :func:`classify` tests every cell against the solid twice, and
   independently:

   * the *fully-inside* test samples the cell's vertices and centroid,
     and passes when every sample is inside-or-on the solid;
   * the *split-retention* pass splits the cell by the solid's
     boundary and keeps each fragment whose samples all lie inside or
     within tolerance of the solid.  Cells the boundary does not cut
     are tested whole.

All predicates take an explicit ``tol``, the distance below which two
geometric features are considered coincident.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from functools import cached_property
from math import floor
from typing import Dict, List, Optional, Sequence, Tuple

from spatialgen.boolean import boolean_split
from spatialgen.config import DEFAULT_TOLERANCE
from spatialgen.geom import dist, isgoodnum, isinsidebbox, ispoint, point
from spatialgen.geom3d import (
    boxsolid,
    closestpoint,
    ispointinside,
    issolid,
    issolidclosed,
    solidbbox,
    solidcentroid,
    solidvertices,
)

logger = logging.getLogger(__name__)

GridIndex = Tuple[int, int, int]


class VoxelState(enum.Enum):
    """Classification of a voxel cell relative to a solid."""

    EXTERIOR = "exterior"
    BOUNDARY = "boundary"
    INTERIOR = "interior"


@dataclass(frozen=True)
class VoxelCell:
    """An axis-aligned grid cell identified by its grid indices."""

    index: GridIndex
    lo: Tuple[float, float, float]
    hi: Tuple[float, float, float]

    @property
    def box(self) -> list:
        return [point(*self.lo), point(*self.hi)]

    @property
    def center(self) -> list:
        return point((self.lo[0] + self.hi[0]) / 2.0,
                     (self.lo[1] + self.hi[1]) / 2.0,
                     (self.lo[2] + self.hi[2]) / 2.0)

    @cached_property
    def solid(self) -> list:
        """boundary of the cell as a closed box solid"""
        return boxsolid(self.box, ['voxel', list(self.index)])


@dataclass
class Classification:
    """Result of :func:`classify`.

    ``interior`` holds the cells that passed the fully-inside test,
    ``fragments`` the retained split fragments (or whole cells), and
    ``states`` the per-cell :class:`VoxelState`, keyed by grid index.
    """

    interior: List[VoxelCell] = field(default_factory=list)
    fragments: List[list] = field(default_factory=list)
    states: Dict[GridIndex, VoxelState] = field(default_factory=dict)

    def cells_in(self, state: VoxelState) -> List[GridIndex]:
        return [idx for idx, s in self.states.items() if s is state]


## grid construction
## -----------------

def grid_counts(bbmin, bbmax, size) -> GridIndex:
    """number of cells along each axis, `floor(span/size)+1`"""
    if not isgoodnum(size) or size <= 0:
        raise ValueError('voxel size must be a positive number, got {}'.format(size))
    if not (ispoint(bbmin) and ispoint(bbmax)):
        raise ValueError('bad bounding box corners passed to grid_counts')
    counts = []
    for axis in range(3):
        span = bbmax[axis] - bbmin[axis]
        if span < 0:
            raise ValueError('bounding box max lies below min on axis {}'.format(axis))
        counts.append(int(floor(span / size)) + 1)
    return tuple(counts)


def build_grid(bbmin, bbmax, size) -> List[VoxelCell]:
    """Enumerate the cells tiling the box ``[bbmin, bbmax]``, with x
    outermost, then y, then z."""
    nx, ny, nz = grid_counts(bbmin, bbmax, size)
    cells = []
    for i in range(nx):
        x = bbmin[0] + i * size
        for j in range(ny):
            y = bbmin[1] + j * size
            for k in range(nz):
                z = bbmin[2] + k * size
                cells.append(VoxelCell((i, j, k),
                                       (x, y, z),
                                       (x + size, y + size, z + size)))
    logger.debug("built %dx%dx%d voxel grid", nx, ny, nz)
    return cells


def voxelize(sld, size) -> List[VoxelCell]:
    """Grid covering the bounding box of solid ``sld``."""
    if not issolid(sld):
        raise ValueError('bad solid passed to voxelize')
    box = solidbbox(sld)
    if not box:
        raise ValueError('cannot voxelize an empty solid')
    return build_grid(box[0], box[1], size)


def candidate_cells(cells: Sequence[VoxelCell], sld,
                    tol: float = DEFAULT_TOLERANCE) -> List[VoxelCell]:
    """Keep the cells that touch solid ``sld``: those containing the
    surface point closest to their center, and those whose center is
    inside-or-on the solid.  Each cell appears at most once."""
    kept = []
    for cell in cells:
        c = cell.center
        q = closestpoint(sld, c)
        if q is not None and isinsidebbox(cell.box, q, tol):
            kept.append(cell)
        elif ispointinside(sld, c, tol, True):
            kept.append(cell)
    return kept


## containment predicates
## ----------------------

def sample_points(sld) -> list:
    """vertices of ``sld`` plus its centroid, when the centroid is
    defined"""
    pts = solidvertices(sld)
    c = solidcentroid(sld)
    if c is not None:
        pts.append(c)
    return pts


def _usable_container(container) -> bool:
    return container is not None and issolid(container, fast=False) \
        and bool(container[1])


def is_point_inside_or_on_surface(p, container, tol: float = DEFAULT_TOLERANCE) -> bool:
    """Is ``p`` inside ``container``, or within ``tol`` of its surface?
    The proximity test holds even where the containment test cannot,
    as with containers that are not closed."""
    if ispointinside(container, p, tol, True):
        return True
    q = closestpoint(container, p)
    return q is not None and dist(p, q) <= tol


def _all_inside(pts, container, tol) -> bool:
    for p in pts:
        if not ispointinside(container, p, tol, True):
            return False
    return True


def _all_inside_or_on_surface(pts, container, tol) -> bool:
    for p in pts:
        if not is_point_inside_or_on_surface(p, container, tol):
            return False
    return True


def is_fully_inside(test, container, tol: float = DEFAULT_TOLERANCE) -> bool:
    """Do all sample points of solid ``test`` lie inside-or-on
    ``container``?  Always false for a missing or non-closed container."""
    if test is None or not issolid(test) or not _usable_container(container):
        return False
    if not issolidclosed(container):
        return False
    pts = sample_points(test)
    return bool(pts) and _all_inside(pts, container, tol)


def is_fully_inside_or_on_surface(test, container, tol: float = DEFAULT_TOLERANCE) -> bool:
    """Do all sample points of solid ``test`` lie inside ``container`` or
    within ``tol`` of its surface?"""
    if test is None or not issolid(test) or not _usable_container(container):
        return False
    pts = sample_points(test)
    return bool(pts) and _all_inside_or_on_surface(pts, container, tol)


## classification
## --------------

def _is_interior(cell: VoxelCell, container, tol: float) -> bool:
    return _all_inside(sample_points(cell.solid), container, tol)


def retained_fragments(cell: VoxelCell, container,
                       tol: float = DEFAULT_TOLERANCE,
                       engine: Optional[str] = None) -> List[list]:
    """Split ``cell`` by the boundary of ``container`` and return the
    fragments that lie inside-or-on the container.  When the boundary
    does not cut the cell, or the engine fails to split it, the whole
    cell is tested instead."""
    try:
        fragments = boolean_split(cell.solid, container, tol, engine=engine)
    except RuntimeError as exc:
        logger.warning("split of cell %s failed, testing it whole: %s", cell.index, exc)
        fragments = []
    if fragments:
        return [f for f in fragments
                if is_fully_inside_or_on_surface(f, container, tol)]
    if is_fully_inside_or_on_surface(cell.solid, container, tol):
        return [cell.solid]
    return []


def classify(cells: Sequence[VoxelCell], container,
             tol: float = DEFAULT_TOLERANCE,
             engine: Optional[str] = None) -> Classification:
    """Classify every cell against ``container``.

    The interior set and the retained fragments are computed
    independently.  A cell is INTERIOR when it passes the fully-inside
    test, BOUNDARY when any of its fragments was retained, and EXTERIOR
    otherwise.  A missing or malformed container leaves every cell
    EXTERIOR, and a container that is not closed has no interior.
    """
    result = Classification()
    usable = _usable_container(container)
    closed = usable and issolidclosed(container)
    if not usable:
        logger.warning("no usable container solid; all %d cell(s) are exterior", len(cells))

    for cell in cells:
        state = VoxelState.EXTERIOR
        if usable:
            kept = retained_fragments(cell, container, tol, engine)
            if kept:
                result.fragments.extend(kept)
                state = VoxelState.BOUNDARY
            if closed and _is_interior(cell, container, tol):
                result.interior.append(cell)
                state = VoxelState.INTERIOR
        result.states[cell.index] = state

    logger.debug("classified %d cell(s): %d interior, %d fragment(s) retained",
                 len(cells), len(result.interior), len(result.fragments))
    return result
