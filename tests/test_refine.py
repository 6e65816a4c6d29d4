import pytest
from math import pi
from spatialgen.geom import *
import spatialgen.refine as refine_module
from spatialgen.refine import refine, refine_curves, split_at_midpoint


def _lengths(curves):
    return sorted(round(length(c),6) for c in curves)


class TestSplitAtMidpoint:
    def test_line(self):
        l = line(point(0,0),point(10,0))
        pieces, p = split_at_midpoint(l)
        assert len(pieces) == 2
        assert vclose(p,point(5,0))

    def test_point_is_unsplittable(self):
        p = point(1,2)
        pieces, sp = split_at_midpoint(p)
        assert pieces == [p]
        assert sp is None


class TestRefine:
    def test_single_line(self):
        l = line(point(0,0),point(10,0))
        result = refine_curves([l],6)
        assert result.converged
        assert result.iterations == 1
        assert len(result.curves) == 2
        assert _lengths(result.curves) == [5.0,5.0]

    def test_two_lines_reconnected(self):
        a = line(point(0,0),point(10,0))
        b = line(point(-1,1),point(11,1))
        curves = refine([a,b],6)
        assert len(curves) == 5
        assert _lengths(curves) == [1.0,5.0,5.0,6.0,6.0]
        connector = curves[-1]
        assert vclose(connector[0],point(5,0))
        assert vclose(connector[1],point(5,1))

    def test_short_curves_pass_through(self):
        a = line(point(0,0),point(3,0))
        b = line(point(0,0),point(0,6))
        curves = refine([a,b],6)
        assert curves == [a,b]

    def test_empty(self):
        result = refine_curves([],6)
        assert result.curves == []
        assert result.iterations == 0
        assert result.converged

    def test_length_bound(self):
        curves = [line(point(0,0),point(37,0)),
                  line(point(0,3),point(20,11)),
                  arc(point(5,5),4)]
        result = refine_curves(curves,2.5)
        assert result.converged
        for c in result.curves:
            assert length(c) <= 2.5

    def test_circle(self):
        result = refine_curves([arc(point(0,0),1)],1.0)
        assert result.converged
        assert all(length(c) <= 1.0 for c in result.curves)
        arcs = [c for c in result.curves if isarc(c)]
        assert close(sum(length(c) for c in arcs),2*pi)

    def test_idempotent(self):
        curves = [line(point(0,0),point(10,0)),line(point(-1,1),point(11,1))]
        once = refine(curves,6)
        assert refine(once,6) == once

    def test_input_not_modified(self):
        l = line(point(0,0),point(10,0))
        curves = [l]
        refine(curves,1)
        assert curves == [l]
        assert l == [point(0,0),point(10,0)]

    def test_iteration_ceiling(self):
        l = line(point(0,0),point(100,0))
        result = refine_curves([l],6,maxiter=1)
        assert not result.converged
        assert result.iterations == 1
        assert _lengths(result.curves) == [50.0,50.0]

        result = refine_curves([l],6,maxiter=0)
        assert not result.converged
        assert result.curves == [l]

    def test_unsplittable_curve(self, monkeypatch):
        monkeypatch.setattr(refine_module,'split',lambda x,u: [])
        l = line(point(0,0),point(10,0))
        result = refine_curves([l],6)
        assert result.curves == [l]
        assert result.converged

    def test_bad_maximum(self):
        l = line(point(0,0),point(10,0))
        with pytest.raises(ValueError):
            refine([l],0)
        with pytest.raises(ValueError):
            refine([l],-2)
        with pytest.raises(ValueError):
            refine([l],True)
        with pytest.raises(ValueError):
            refine([l],6,maxiter=-1)
