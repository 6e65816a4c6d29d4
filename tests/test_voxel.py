import logging

import pytest
from spatialgen.geom import *
from spatialgen.geom3d import *
from spatialgen.boolean import register_engine, unregister_engine
from spatialgen.boolean import trimesh_engine
from spatialgen.voxel import (
    VoxelState,
    build_grid,
    candidate_cells,
    classify,
    grid_counts,
    is_fully_inside,
    is_fully_inside_or_on_surface,
    is_point_inside_or_on_surface,
    sample_points,
    retained_fragments,
    voxelize,
)


class NoSplit:
    """boolean engine for which nothing is ever cut"""

    def split_solid(self, a, b, tol, backend=None):
        return []


class XPlaneSplit:
    """boolean engine that cuts cells along the +x face of the
    container's bounding box and nowhere else"""

    def split_solid(self, a, b, tol, backend=None):
        lo, hi = solidbbox(a)
        cut = solidbbox(b)[1][0]
        if not (lo[0] + tol < cut < hi[0] - tol):
            return []
        return [boxsolid([lo, point(cut, hi[1], hi[2])]),
                boxsolid([point(cut, lo[1], lo[2]), hi])]


class FailingSplit:
    """boolean engine that always fails"""

    def split_solid(self, a, b, tol, backend=None):
        raise RuntimeError("boolean split failed: coplanar faces")


@pytest.fixture
def failing():
    register_engine('failing', FailingSplit())
    yield 'failing'
    unregister_engine('failing')


@pytest.fixture
def nosplit():
    register_engine('nosplit', NoSplit())
    yield 'nosplit'
    unregister_engine('nosplit')


@pytest.fixture
def xsplit():
    register_engine('xsplit', XPlaneSplit())
    yield 'xsplit'
    unregister_engine('xsplit')


def _cube(size=10.0):
    return boxsolid([point(0,0,0), point(size,size,size)])


class TestGrid:
    def test_counts(self):
        assert grid_counts(point(0,0,0), point(10,10,10), 5) == (3,3,3)
        assert grid_counts(point(0,0,0), point(7.5,10,4.9), 5) == (2,3,1)
        assert grid_counts(point(1,1,1), point(1,1,1), 2) == (1,1,1)

    def test_bad_size(self):
        for size in (0, -1, True, None):
            with pytest.raises(ValueError):
                build_grid(point(0,0,0), point(1,1,1), size)

    def test_inverted_box(self):
        with pytest.raises(ValueError):
            build_grid(point(1,0,0), point(0,1,1), 1)

    def test_cells(self):
        cells = build_grid(point(0,0,0), point(10,10,10), 5)
        assert len(cells) == 27
        assert cells[0].index == (0,0,0)
        assert cells[1].index == (0,0,1)
        assert cells[3].index == (0,1,0)
        assert cells[9].index == (1,0,0)
        assert cells[-1].index == (2,2,2)
        for c in cells:
            for axis in range(3):
                assert close(c.hi[axis] - c.lo[axis], 5.0)

    def test_coverage(self):
        lo = point(-1,2,0.5)
        hi = point(6.2,3,4)
        cells = build_grid(lo, hi, 1.5)
        glo = [min(c.lo[a] for c in cells) for a in range(3)]
        ghi = [max(c.hi[a] for c in cells) for a in range(3)]
        for a in range(3):
            assert glo[a] <= lo[a]
            assert ghi[a] >= hi[a]

    def test_cell_solid(self):
        cell = build_grid(point(0,0,0), point(1,1,1), 2)[0]
        assert vclose(cell.center, point(1,1,1))
        assert issolidclosed(cell.solid)
        assert close(volumeof(cell.solid), 8.0)
        assert cell.solid[3] == ['voxel', [0,0,0]]
        assert len(sample_points(cell.solid)) == 9

    def test_voxelize(self):
        cells = voxelize(_cube(), 5)
        assert len(cells) == 27
        with pytest.raises(ValueError):
            voxelize(solid(), 5)
        with pytest.raises(ValueError):
            voxelize(_cube(), 0)


class TestCandidates:
    def test_touching_cells_kept_once(self):
        box = boxsolid([point(0,0,0), point(4,4,4)])
        cells = build_grid(point(-4,-4,-4), point(8,8,8), 4)
        kept = candidate_cells(cells, box)
        indices = [c.index for c in kept]
        assert len(indices) == len(set(indices))
        # the cell holding the box, plus every cell sharing a face,
        # edge or corner with it
        assert len(kept) == 27
        assert all(max(abs(i - 1) for i in c.index) <= 1 for c in kept)

    def test_far_cells_dropped(self):
        box = boxsolid([point(0,0,0), point(1,1,1)])
        cells = build_grid(point(10,10,10), point(12,12,12), 1)
        assert candidate_cells(cells, box) == []


class TestPredicates:
    def test_point(self):
        box = _cube()
        assert is_point_inside_or_on_surface(point(5,5,5), box)
        assert is_point_inside_or_on_surface(point(10.0005,5,5), box, 0.001)
        assert not is_point_inside_or_on_surface(point(10.1,5,5), box, 0.001)

    def test_point_near_open_surface(self):
        opened = solid(_cube()[1][:5])
        assert is_point_inside_or_on_surface(point(5,5,0), opened)

    def test_fully_inside(self):
        box = _cube()
        inner = boxsolid([point(1,1,1), point(9,9,9)])
        flush = boxsolid([point(0,0,0), point(5,5,5)])
        outer = boxsolid([point(8,8,8), point(12,12,12)])
        assert is_fully_inside(inner, box)
        assert is_fully_inside(flush, box)
        assert not is_fully_inside(outer, box)
        assert is_fully_inside_or_on_surface(flush, box)
        assert not is_fully_inside_or_on_surface(outer, box)

    def test_missing_container(self):
        inner = boxsolid([point(1,1,1), point(2,2,2)])
        assert not is_fully_inside(inner, None)
        assert not is_fully_inside_or_on_surface(inner, None)
        assert not is_fully_inside(None, _cube())
        opened = solid(_cube()[1][:5])
        assert not is_fully_inside(inner, opened)


class TestClassify:
    def test_uncut_cube(self, nosplit):
        box = _cube()
        cells = voxelize(box, 5)
        result = classify(cells, box, engine=nosplit)
        assert len(result.states) == 27
        interior = result.cells_in(VoxelState.INTERIOR)
        assert len(interior) == 8
        assert (1,1,1) in interior
        assert len(result.cells_in(VoxelState.BOUNDARY)) == 0
        assert len(result.cells_in(VoxelState.EXTERIOR)) == 19
        assert result.states[(2,2,2)] is VoxelState.EXTERIOR
        assert len(result.fragments) == 8

    def test_cut_cells(self, xsplit):
        box = boxsolid([point(0,0,0), point(7.5,10,10)])
        cells = voxelize(box, 5)
        assert len(cells) == 18
        result = classify(cells, box, engine=xsplit)
        assert len(result.cells_in(VoxelState.INTERIOR)) == 4
        boundary = result.cells_in(VoxelState.BOUNDARY)
        assert len(boundary) == 4
        assert all(idx[0] == 1 for idx in boundary)
        assert len(result.cells_in(VoxelState.EXTERIOR)) == 10
        assert len(result.fragments) == 8
        for frag in result.fragments:
            assert solidbbox(frag)[1][0] <= 7.5 + epsilon

    def test_interior_cells_are_retained(self, xsplit):
        box = boxsolid([point(0,0,0), point(7.5,10,10)])
        cells = voxelize(box, 5)
        result = classify(cells, box, engine=xsplit)
        retained = [cell.index for cell in cells
                    if retained_fragments(cell, box, engine=xsplit)]
        assert len(result.interior) == 4
        for cell in result.interior:
            assert cell.index in retained
            assert is_fully_inside(cell.solid, box)

    def test_missing_container(self, nosplit):
        cells = build_grid(point(0,0,0), point(10,10,10), 5)
        result = classify(cells, None, engine=nosplit)
        assert result.interior == []
        assert result.fragments == []
        assert len(result.cells_in(VoxelState.EXTERIOR)) == 27

    def test_failed_split_tests_whole_cell(self, failing, caplog):
        box = _cube()
        cells = voxelize(box, 5)
        with caplog.at_level(logging.WARNING, logger="spatialgen"):
            result = classify(cells, box, engine=failing)
        assert len(result.cells_in(VoxelState.INTERIOR)) == 8
        assert len(result.fragments) == 8
        assert len(result.cells_in(VoxelState.EXTERIOR)) == 19
        assert "testing it whole" in caplog.text

    def test_open_container(self, nosplit):
        opened = solid(_cube()[1][:5])
        cells = build_grid(point(0,0,0), point(10,10,10), 5)
        result = classify(cells, opened, engine=nosplit)
        assert result.interior == []

    def test_unknown_engine(self):
        box = _cube()
        with pytest.raises(ValueError):
            classify(voxelize(box, 5), box, engine='no-such-engine')


@pytest.mark.skipif(not trimesh_engine.is_available(),
                    reason="no trimesh boolean backend installed")
class TestTrimeshClassify:
    def test_split_fragments(self):
        cell = boxsolid([point(0,0,0), point(2,2,2)])
        cutter = boxsolid([point(1,-1,-1), point(3,3,3)])
        fragments = trimesh_engine.split_solid(cell, cutter, 0.001)
        assert len(fragments) == 2
        volumes = sorted(volumeof(f) for f in fragments)
        assert volumes[0] == pytest.approx(4.0, abs=1e-6)
        assert volumes[1] == pytest.approx(4.0, abs=1e-6)

    def test_body_separation_errors_are_wrapped(self, monkeypatch):
        def no_graph(mesh, min_volume):
            raise ModuleNotFoundError("No module named 'networkx'")
        monkeypatch.setattr(trimesh_engine, '_bodies', no_graph)
        cell = boxsolid([point(0,0,0), point(2,2,2)])
        cutter = boxsolid([point(1,-1,-1), point(3,3,3)])
        with pytest.raises(RuntimeError):
            trimesh_engine.split_solid(cell, cutter, 0.001)
        # classification falls back to testing the whole cell
        assert retained_fragments(build_grid(point(0,0,0), point(1,1,1), 2)[0],
                                  cutter, engine='trimesh') == []

    def test_no_split(self):
        cell = boxsolid([point(0,0,0), point(1,1,1)])
        cutter = boxsolid([point(-1,-1,-1), point(3,3,3)])
        assert trimesh_engine.split_solid(cell, cutter, 0.001) == []
        far = boxsolid([point(5,5,5), point(6,6,6)])
        assert trimesh_engine.split_solid(cell, far, 0.001) == []

    def test_classify(self):
        box = boxsolid([point(0,0,0), point(7.5,10,10)])
        cells = voxelize(box, 5)
        result = classify(cells, box, engine='trimesh')
        assert len(result.cells_in(VoxelState.INTERIOR)) == 4
        assert len(result.cells_in(VoxelState.BOUNDARY)) == 4
