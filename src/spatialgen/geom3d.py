## geom3d, surface and solid support for spatialGen
## Copyright (c) 2026 spatialGen contributors

"""
==========================================================
geom3d -- triangulated surfaces and solids for spatialGen
==========================================================

The figures of ``spatialgen.geom`` are zero- or one-dimensional.
This module adds the explicit, triangulated two-dimensional surfaces
and bounded three-dimensional volumes that the voxel pipeline tests
points against and splits.

surfaces
--------

``surface = ['surface',vertices,normals,faces,boundary,holes]``, where:

           ``vertices`` is a list of ``spatialgen.geom`` points,

           ``normals`` is a list of direction vectors of the same
           length as ``vertices``,

           ``faces`` is a list of triangles, each a list of three
           indices into ``vertices``, wound counter-clockwise when
           viewed from outside,

           ``boundary`` and ``holes`` are lists of vertex indices for
           the perimeter and any holes of the surface; both may be
           empty.

solids
------

``solid = ['solid', surfaces, material, construction]``, where
``surfaces`` together enclose a volume, and ``material`` and
``construction`` are (possibly empty) lists of metadata.  Empty
solids are legal, since they are the natural product of boolean
operations that remove everything.

predicates
----------

``ispointinside(sld,p,tol,include_on_surface)`` is the containment
test used throughout the voxel classifier.  Points within ``tol`` of
the boundary are answered by ``include_on_surface``; all other points
are classified by casting six axis-aligned rays and counting boundary
crossings, with the majority of rays deciding.

"""

from spatialgen.geom import *

_DEFAULT_RAY_TOL = 1e-7

## surfaces
## --------

def surface(vertices,normals,faces,boundary=None,holes=None):
    """build a surface from vertices, per-vertex normals and
    triangular faces, checking the data for correctness"""
    surf = ['surface',vertices,normals,faces,
            boundary if boundary is not None else [],
            holes if holes is not None else []]
    if not issurface(surf,fast=False):
        raise ValueError('bad arguments to surface')
    return surf

def issurface(s,fast=True):
    """
    Check to see if ``s`` is a valid surface.
    """
    if not isinstance(s,list) or len(s) != 6 or s[0] != 'surface':
        return False
    if fast:
        return True
    verts = s[1]
    norms = s[2]
    faces = s[3]
    if not isinstance(verts,list) or not isinstance(norms,list) or \
       len(verts) != len(norms):
        return False
    if len(list(filter(lambda x: not ispoint(x),verts))) > 0:
        return False
    n = len(verts)
    for f in faces:
        if len(f) != 3:
            return False
        for i in f:
            if not isinstance(i,int) or i < 0 or i >= n:
                return False
    return True

def surfacebbox(s):
    """return bounding box for surface"""
    if not issurface(s):
        raise ValueError('bad surface passed to surfacebbox')
    return polybbox(s[1])

def surfacetriangles(s):
    """iterate over the faces of surface ``s`` as lists of three points"""
    verts = s[1]
    for face in s[3]:
        yield [verts[face[0]], verts[face[1]], verts[face[2]]]

def tri2p0n(face):
    """Given ``face``, a non-degenerate list of three points, return the
    center point and unit normal of the face, otherwise known as the
    Hessian Normal Form.
    """
    p1,p2,p3 = face
    p0 = scale3(add(p1,add(p2,p3)),1.0/3.0)
    c = cross(sub(p2,p1),sub(p3,p2))
    m = mag(c)
    if m < epsilon*epsilon:
        raise ValueError('degenerate face in tri2p0n')
    n = scale3(c,1.0/m)
    n[3] = 0.0 # direction vectors lie in the w=0 hyperplane
    return [p0,n]

def surface_from_triangles(triangles):
    """build a surface with one normal per face vertex from a list of
    point triangles, dropping degenerate triangles.  Returns ``None``
    if nothing survives"""
    verts = []
    normals = []
    faces = []
    for tri in triangles:
        try:
            _, n = tri2p0n(tri)
        except ValueError:
            continue
        inds = []
        for p in tri:
            verts.append(point(p))
            normals.append([n[0],n[1],n[2],0.0])
            inds.append(len(verts)-1)
        faces.append(inds)
    if not faces:
        return None
    return ['surface',verts,normals,faces,[],[]]

## solids
## ------

def solid(surfaces=None,material=None,construction=None):
    """given a list of surfaces and optional material and construction
    metadata, return a conforming solid representation"""
    surfaces = surfaces if surfaces is not None else []
    if not isinstance(surfaces,list):
        raise ValueError('bad arguments to solid')
    for s in surfaces:
        if not issurface(s):
            raise ValueError('bad arguments to solid')
    return ['solid',surfaces,
            material if material is not None else [],
            construction if construction is not None else []]

def issolid(s,fast=True):
    """
    Check to see if ``s`` is a solid.  NOTE: this function only
    determines if the data structure is correct, it does not verify
    that the surfaces completely bound a volume of space; for that,
    see ``issolidclosed()``
    """
    if not isinstance(s,list) or len(s) != 4 or s[0] != 'solid':
        return False
    if not (isinstance(s[1],list) and isinstance(s[2],list)
            and isinstance(s[3],list)):
        return False
    if fast:
        return True
    for surf in s[1]:
        if not issurface(surf,fast=False):
            return False
    return True

def solidtriangles(sld):
    """iterate over every triangle of every surface of solid ``sld``"""
    for surf in sld[1]:
        yield from surfacetriangles(surf)

def solidbbox(sld):
    """return the ``[min, max]`` bounding box of a solid, or ``[]``
    for an empty solid"""
    if not issolid(sld):
        raise ValueError('bad argument to solidbbox')
    box = []
    for surf in sld[1]:
        if not surf[1]:
            continue
        sb = surfacebbox(surf)
        if not box:
            box = sb
        else:
            box = [point(min(box[0][0], sb[0][0]),
                         min(box[0][1], sb[0][1]),
                         min(box[0][2], sb[0][2])),
                   point(max(box[1][0], sb[1][0]),
                         max(box[1][1], sb[1][1]),
                         max(box[1][2], sb[1][2]))]
    return box

## corner numbering for box solids: index = ix + 2*iy + 4*iz, where
## each of ix, iy, iz selects the min (0) or max (1) coordinate.  Each
## face is listed as two outward-facing triangles, with its normal.
_BOX_FACES = [
    ([[0,2,3],[0,3,1]], [0,0,-1]),  # bottom
    ([[4,5,7],[4,7,6]], [0,0,1]),   # top
    ([[0,1,5],[0,5,4]], [0,-1,0]),  # front
    ([[2,6,7],[2,7,3]], [0,1,0]),   # back
    ([[0,4,6],[0,6,2]], [-1,0,0]),  # left
    ([[1,3,7],[1,7,5]], [1,0,0]),   # right
]

def boxsolid(box,construction=None):
    """make the closed solid of the axis-aligned box ``box = [min, max]``,
    composed of six independent two-triangle surfaces"""
    lo = box[0]
    hi = box[1]
    if not (ispoint(lo) and ispoint(hi)):
        raise ValueError('bad bounding box passed to boxsolid')
    corners = []
    for iz in (0,1):
        for iy in (0,1):
            for ix in (0,1):
                corners.append(point(hi[0] if ix else lo[0],
                                     hi[1] if iy else lo[1],
                                     hi[2] if iz else lo[2]))
    surfaces = []
    for tris,n in _BOX_FACES:
        used = sorted(set(tris[0]+tris[1]))
        remap = {c: i for i,c in enumerate(used)}
        verts = [point(corners[c]) for c in used]
        norms = [[n[0],n[1],n[2],0.0] for _ in used]
        faces = [[remap[c] for c in tri] for tri in tris]
        surfaces.append(['surface',verts,norms,faces,[0,1,2,3],[]])
    if construction is None:
        construction = ['procedure','boxsolid']
    return solid(surfaces,[],construction)

## topology and mass properties
## ----------------------------

def _point_to_key(p):
    """hashable key for a vertex position, rounded so that positions
    that agree to within epsilon usually map to the same key"""
    return (round(p[0] / epsilon) * epsilon,
            round(p[1] / epsilon) * epsilon,
            round(p[2] / epsilon) * epsilon)

def _canonical_edge_key(p1, p2):
    k1 = _point_to_key(p1)
    k2 = _point_to_key(p2)
    return (min(k1, k2), max(k1, k2))

def issolidclosed(x):
    """
    Check if solid ``x`` is topologically closed, which is to say that
    every edge is shared by exactly two faces across all surfaces.
    Edges are identified by vertex position, not by index, so
    independent surfaces that meet along an edge count as connected.

    Raises ``ValueError`` if ``x`` is not a valid solid.
    """
    if not issolid(x, fast=False):
        raise ValueError('invalid solid passed to issolidclosed')
    if not x[1]:
        return True
    edge_count = {}
    for tri in solidtriangles(x):
        for a,b in ((tri[0],tri[1]),(tri[1],tri[2]),(tri[2],tri[0])):
            key = _canonical_edge_key(a,b)
            edge_count[key] = edge_count.get(key,0) + 1
    for count in edge_count.values():
        if count != 2:
            return False
    return True

def volumeof(x):
    """
    Calculate the volume enclosed by a closed solid using the
    divergence theorem: each face contributes the signed volume of the
    tetrahedron formed with the origin.
    """
    if not issolidclosed(x):
        raise ValueError('solid must be topologically closed to compute volume')
    total = 0.0
    for p0,p1,p2 in solidtriangles(x):
        total += dot(p0, cross(sub(p1,p0), sub(p2,p0))) / 6.0
    return abs(total)

def solidvertices(sld):
    """return the unique vertex locations of solid ``sld``, in the order
    they are first encountered"""
    if not issolid(sld):
        raise ValueError('bad solid passed to solidvertices')
    seen = set()
    verts = []
    for surf in sld[1]:
        for v in surf[1]:
            key = _point_to_key(v)
            if key in seen:
                continue
            seen.add(key)
            verts.append(point(v))
    return verts

def solidcentroid(sld):
    """Return the area centroid of the boundary of solid ``sld``, the
    area-weighted mean of its triangle centers.  Returns ``None`` when
    the centroid is undefined, as it is for a solid without area."""
    if not issolid(sld):
        return None
    area = 0.0
    acc = [0.0,0.0,0.0]
    for tri in solidtriangles(sld):
        a = mag(cross(sub(tri[1],tri[0]),sub(tri[2],tri[0]))) / 2.0
        if a <= 0.0:
            continue
        for i in range(3):
            acc[i] += a * (tri[0][i]+tri[1][i]+tri[2][i]) / 3.0
        area += a
    if area < epsilon*epsilon:
        return None
    return point(acc[0]/area,acc[1]/area,acc[2]/area)

## proximity and containment
## -------------------------

def _closest_point_on_triangle(p,a,b,c):
    """closest point to ``p`` on triangle ``abc``, by Voronoi region
    of the triangle's features"""
    ab = sub(b,a)
    ac = sub(c,a)
    ap = sub(p,a)
    d1 = dot(ab,ap)
    d2 = dot(ac,ap)
    if d1 <= 0.0 and d2 <= 0.0:
        return point(a)
    bp = sub(p,b)
    d3 = dot(ab,bp)
    d4 = dot(ac,bp)
    if d3 >= 0.0 and d4 <= d3:
        return point(b)
    vc = d1*d4 - d3*d2
    if vc <= 0.0 and d1 >= 0.0 and d3 <= 0.0:
        return add(a,scale3(ab,d1/(d1-d3)))
    cp = sub(p,c)
    d5 = dot(ab,cp)
    d6 = dot(ac,cp)
    if d6 >= 0.0 and d5 <= d6:
        return point(c)
    vb = d5*d2 - d1*d6
    if vb <= 0.0 and d2 >= 0.0 and d6 <= 0.0:
        return add(a,scale3(ac,d2/(d2-d6)))
    va = d3*d6 - d5*d4
    if va <= 0.0 and (d4-d3) >= 0.0 and (d5-d6) >= 0.0:
        w = (d4-d3)/((d4-d3)+(d5-d6))
        return add(b,scale3(sub(c,b),w))
    denom = 1.0/(va+vb+vc)
    v = vb*denom
    w = vc*denom
    return add(a,add(scale3(ab,v),scale3(ac,w)))

def _isdegenerate(tri):
    return mag(cross(sub(tri[1],tri[0]),sub(tri[2],tri[0]))) < epsilon*epsilon

def closestpoint(sld,p):
    """return the point on the boundary of solid ``sld`` closest to
    point ``p``, or ``None`` if the solid has no faces"""
    if not issolid(sld):
        raise ValueError('bad solid passed to closestpoint')
    best = None
    bestd = None
    for tri in solidtriangles(sld):
        if _isdegenerate(tri):
            continue
        q = _closest_point_on_triangle(p,tri[0],tri[1],tri[2])
        d = dist(p,q)
        if bestd is None or d < bestd:
            best = q
            bestd = d
    return best

def _ray_triangle_intersection(origin, direction, triangle, tol=_DEFAULT_RAY_TOL):
    v0, v1, v2 = triangle
    e1 = sub(v1, v0)
    e2 = sub(v2, v0)
    h = cross(direction, e2)
    a = dot(e1, h)
    if abs(a) < tol:
        return None
    f = 1.0 / a
    s = sub(origin, v0)
    u = f * dot(s, h)
    if u < -tol or u > 1.0 + tol:
        return None
    q = cross(s, e1)
    v = f * dot(direction, q)
    if v < -tol or u + v > 1.0 + tol:
        return None
    t = f * dot(e2, q)
    if t < -tol:
        return None
    return t

def _group_hits(hits, tol):
    if not hits:
        return []
    hits.sort(key=lambda x: x[0])
    groups = [[hits[0]]]
    for hit in hits[1:]:
        if abs(hit[0] - groups[-1][-1][0]) <= tol:
            groups[-1].append(hit)
        else:
            groups.append([hit])
    return groups

_RAY_DIRECTIONS = [
    [1,0,0,0], [-1,0,0,0],
    [0,1,0,0], [0,-1,0,0],
    [0,0,1,0], [0,0,-1,0],
]

def solid_contains_point(sld, p, tol=_DEFAULT_RAY_TOL):
    """Classify ``p`` against the closed boundary of ``sld`` by ray
    parity.  Each of six axis-aligned rays counts boundary crossings;
    hits at the same distance are merged, and a merged group whose
    entering and exiting hits cancel is a tangency, not a crossing.
    The point is inside when a majority of rays see odd parity."""
    if not issolid(sld):
        raise ValueError('invalid solid passed to solid_contains_point')
    if not ispoint(p):
        raise ValueError('invalid point passed to solid_contains_point')
    if not sld[1]:
        return False
    box = solidbbox(sld)
    if not box or not isinsidebbox(box, p, tol):
        return False

    triangles = []
    for tri in solidtriangles(sld):
        if _isdegenerate(tri):
            continue
        triangles.append((tri, tri2p0n(tri)[1]))

    votes = 0
    for direction in _RAY_DIRECTIONS:
        hits = []
        for tri, normal in triangles:
            t = _ray_triangle_intersection(p, direction, tri)
            if t is None:
                continue
            sign = -1 if dot(normal, direction) > 0 else 1
            hits.append((t, sign))
        parity = 0
        for group in _group_hits(hits, max(tol, _DEFAULT_RAY_TOL)):
            if sum(hit[1] for hit in group) != 0:
                parity ^= 1
        votes += parity
    return votes * 2 > len(_RAY_DIRECTIONS)

def ispointinside(sld, p, tol=epsilon, include_on_surface=True):
    """Is point ``p`` inside solid ``sld``?  Points within ``tol`` of
    the boundary count as inside only if ``include_on_surface`` is
    true."""
    if not issolid(sld):
        raise ValueError('invalid solid passed to ispointinside')
    if not sld[1]:
        return False
    box = solidbbox(sld)
    if not box or not isinsidebbox(box, p, tol):
        return False
    q = closestpoint(sld, p)
    if q is not None and dist(p, q) <= tol:
        return include_on_surface
    return solid_contains_point(sld, p, tol)
