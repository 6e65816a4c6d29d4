from spatialgen.geom import *
from spatialgen.pairing import closest_pairs, pair


def _xs(*xs):
    return [point(x,0) for x in xs]


class TestClosestPairs:
    def test_empty_and_single(self):
        assert closest_pairs([]) == []
        assert closest_pairs(_xs(1.0)) == []
        assert pair([]) == []

    def test_two_clusters(self):
        assert closest_pairs(_xs(0,1,5,5.5)) == [(0,1),(2,3)]

    def test_odd_count_leaves_one_unpaired(self):
        pairs = closest_pairs(_xs(0,1,1.9))
        assert pairs == [(0,1)]

    def test_greedy_order(self):
        # the first point takes its nearest neighbor even though a
        # later point would have been closer to it
        assert closest_pairs(_xs(0,2,3,-1.5)) == [(0,3),(1,2)]

    def test_ties_go_to_first(self):
        assert closest_pairs(_xs(0,1,-1)) == [(0,1)]

    def test_coincident_points_not_paired(self):
        pts = [point(0,0),point(0,0)]
        assert closest_pairs(pts) == []
        pts = [point(0,0),point(0,0),point(3,0)]
        assert closest_pairs(pts) == [(0,2)]

    def test_each_point_used_once(self):
        pts = [point(x,y) for x in range(4) for y in range(3)]
        used = []
        for i,j in closest_pairs(pts):
            assert i != j
            used.extend([i,j])
        assert len(used) == len(set(used))
        assert len(used) == len(pts)


class TestPair:
    def test_lines(self):
        pts = _xs(0,1,5,5.5)
        lines = pair(pts)
        assert len(lines) == 2
        assert all(isline(l) for l in lines)
        assert lines[0] == [point(0,0),point(1,0)]
        assert close(length(lines[1]),0.5)

    def test_endpoints_are_copies(self):
        pts = _xs(0,1)
        l = pair(pts)[0]
        assert l[0] == pts[0]
        assert l[0] is not pts[0]
