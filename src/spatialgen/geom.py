## foundational curve geometry for spatialGen
## Copyright (c) 2026 spatialGen contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""foundational curve geometry for **spatialGen**

====================
OVERVIEW
====================

The spatialgen.geom module provides the points, vectors, and
one-dimensional figures consumed by the curve refiner and the voxel
pipeline.  Geometry is represented functionally, as plain Python
lists, so that figures can be copied, compared, and serialized
without any class machinery.

vectors and points
==================

Vectors are lists of four numbers, ``[x,y,z,w]``.  Points are vectors
that lie in the ``w>0`` half-space, and ordinary points have ``w=1``.
``point()`` and ``vect()`` build them from just about any plausible
set of arguments; unspecified ``z`` values are zero and unspecified
``w`` values are one.

figures
=======

``line = [p0, p1]``
    a straight segment between two points.

``arc = [center, [r, start, end, -1]]``
    a circular arc in the XY plane, with start and end angles in
    degrees.  A full circle is flagged by the integer pair
    ``start=0, end=360``.  The second element is a pseudovector,
    marked by ``w=-1`` so that it is never mistaken for a point.

``poly = [p0, p1, p2, ...]``
    a polyline of three or more points.  If the first and last points
    coincide the poly is a closed polygon.

``geomlist = [figure0, figure1, ...]``
    a list of lines, arcs and polys, joined end to end.

parameterization
================

Every figure is parameterized over the domain ``(0.0, 1.0)``.
``sample(x,u)`` returns the point at parameter ``u``; for polys and
geometry lists the parameter is proportional to arc length.
``segment(x,u1,u2)`` slices out the sub-figure spanning ``[u1,u2]``,
and ``split(x,u)`` cuts a figure in two at ``u``.

"""

from math import sqrt, cos, sin, pi, floor
import copy

## constants
epsilon=0.000005
pi2 = 2.0*pi

deepcopy = copy.deepcopy

## operations on scalars
## -----------------------

## booleans are ints as far as python is concerned, but they are not
## numbers as far as we are concerned

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
    from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and \
        isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

def vclose(a,b):
    """ are two vectors the same within epsilon """
    return close(mag(sub(a,b)),0)

## R^3 -> R^3 functions: ignore w component
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ``a`` times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def cross(a,b):
    """Compute the cross product of a x b, assuming that both fall into
    the w=1 hyperplane

    """
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

## R^3 -> R functions -- ignore w component
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):
    """ compute the euclidean distance between two points ``a`` and ``b``"""
    return mag(sub(a,b))

def isinsidebbox(bbox,p,tol=0.0):
    """ does point ``p`` lie inside 3D bounding box ``bbox``, expanded
    by ``tol`` on every side?"""
    return p[0] >= bbox[0][0]-tol and p[0] <= bbox[1][0]+tol and\
        p[1] >= bbox[0][1]-tol and p[1] <= bbox[1][1]+tol and\
        p[2] >= bbox[0][2]-tol and p[2] <= bbox[1][2]+tol


## COMPUTATIONAL GEOMETRY
## ======================
## operations on points
## --------------------

def point(x=False,y=False,z=False,w=False):
    """Point creation from point or scalars"""
    if ispoint(x):
        return deepcopy(x)
    if isinstance(x,(tuple,list)):
        r = vect(x)
    else:
        r = vect(x,y,z,w)
    if r[3] > 0:
        return r
    raise ValueError('bad w argument to point()')

def ispoint(x):
    """ is it a point?"""
    return isvect(x) and x[3] > 0.0

def pointbbox(x):
    """compute 3D bounding box of point, which is 2 epsilon on a side"""
    ee = [epsilon,epsilon,epsilon,1.0]
    return [sub(x,ee),add(x,ee)]

## operations on lines
## --------------------

def line(p1,p2=False):
    """Value-safe line creation.  This is the segment constructor used
    to build connector curves between two points"""
    if isline(p1):
        return deepcopy(p1)
    elif ispoint(p1) and ispoint(p2):
        return [ point(p1), point(p2) ]
    else:
        raise ValueError('bad values passed to line()')

def isline(l):
    """ is it a line? """
    return isinstance(l,list) and len(l) == 2 \
        and ispoint(l[0]) and ispoint(l[1])

def linelength(l):
    return dist(l[0],l[1])

def sampleline(l,u):
    """Sample a parameterized line ``l``.  Values `0 <= u <= 1.0` will
    fall within the line segment, values `u < 0` and `u > 1` will fall
    outside the line segment.

    """
    p = 1.0-u
    return add(scale3(l[0],p),scale3(l[1],u))

def segmentline(l,u1,u2):
    """slice out a parameterized segment from a line and return this as
    a new line segment"""
    return [sampleline(l,u1),sampleline(l,u2)]

def linebbox(l):
    p1=l[0]
    p2=l[1]
    return [ point(min(p1[0],p2[0]),min(p1[1],p2[1]),min(p1[2],p2[2])),
             point(max(p1[0],p2[0]),max(p1[1],p2[1]),max(p1[2],p2[2])) ]

## operations on arcs
## --------------------

## The second element of an arc is a pseudovector of radius, start
## and end angles, marked with w=-1 so it cannot be confused with a
## point.  An optional third element is the plane normal, which must
## be +z since only XY-plane arcs are supported.

def arc(c,r=False,start=0,end=360):
    """
    Construct an arc by copying an existing arc, or by specifying a
    center ``c``, radius ``r``, and optional ``start`` and ``end``
    angles in degrees.  If ``start`` and ``end`` are not specified a
    full circle is created.

    """
    if isarc(c):
        return deepcopy(c)
    if ispoint(c) and isgoodnum(r) and isgoodnum(start) and isgoodnum(end):
        if r < 0:
            raise ValueError('negative radius not allowed for arc')
        return [ point(c), [r,start,end,-1] ]
    raise ValueError('bad arguments passed to arc()')

def isarc(a):
    """ is it an arc? """
    if not isinstance(a,list) or len(a) not in (2,3):
        return False
    if not (ispoint(a[0]) and isvect(a[1])):
        return False
    if a[1][3] != -1 or a[1][0] < 0:
        return False
    if len(a) == 3 and (not ispoint(a[2]) or not vclose(a[2],[0,0,1,1])):
        return False
    return True

def iscircle(a):
    """ is it a full circle? """
    return isarc(a) and a[1][1] == 0 and a[1][2] == 360

def _arcangles(c):
    """return start and end angles such that `start <= end < start+360`,
    except for full circles, which span 0 to 360"""
    if iscircle(c):
        return 0.0, 360.0
    start = c[1][1] % 360.0
    end = c[1][2] % 360.0
    if end < start:
        end += 360.0
    return start, end

def arclength(c):
    """return scalar length of an arc"""
    start,end = _arcangles(c)
    return pi2*c[1][0]*(end-start)/360.0

def samplearc(c,u,polar=False):
    """sample the arc ``c`` at parameter ``u`` and return the resulting
    point.  If ``polar`` is true, return the angle in degrees instead."""
    start,end = _arcangles(c)
    angle = (end-start)*u+start
    if polar:
        return angle
    radians = angle*pi2/360.0
    r = c[1][0]
    return add(c[0],[cos(radians)*r,sin(radians)*r,0.0,1.0])

def segmentarc(c,u1,u2):
    """
    Given an arc paramaterized on a 0,1 interval, return a new arc with
    the same center and radius spanning the interval u1,u2
    """
    a1 = samplearc(c,u1,polar=True)
    a2 = samplearc(c,u2,polar=True)
    return arc(c[0],c[1][0],a1,a2)

def arcbbox(c):
    """bounding box of an arc, including any cardinal extrema swept
    between the start and end angles"""
    start,end = _arcangles(c)
    pts = [samplearc(c,0.0),samplearc(c,1.0)]
    ang = 90.0*floor(start/90.0)
    while ang <= end:
        if ang >= start:
            radians = ang*pi2/360.0
            pts.append(add(c[0],[cos(radians)*c[1][0],
                                 sin(radians)*c[1][0],0.0,1.0]))
        ang += 90.0
    return _pointsbbox(pts)

## operations on polylines and polygons
## ------------------------------------

def poly(*args):
    """ Make a polyline or polygon by copying an existing poly or from
    a list of points or individual points
    """
    if len(args) == 1:
        if ispoly(args[0]):
            return deepcopy(args[0])
        raise ValueError('non-poly list passed to poly()')
    a = list(args)
    if len(a) < 3:
        raise ValueError('bad number of arguments {} passed to poly()'.format(len(a)))
    bad = list(filter(lambda x: not ispoint(x),a))
    if bad:
        raise ValueError('non-point arguments to poly(): {} '.format(bad))
    return deepcopy(a)

def ispoly(a):
    """is ``a`` a poly?"""
    return isinstance(a,list) and len(a) > 2 and \
        len(list(filter(lambda x: not ispoint(x),a))) == 0

def ispolygon(a):
    """is ``a`` a closed polygon?"""
    return ispoly(a) and dist(a[0],a[-1]) < epsilon

## cumulative parameter value at each poly vertex, along with total
## length.  Zero-length polys get evenly spaced parameters.
def _polyparams(a):
    lengths = [dist(a[i-1],a[i]) for i in range(1,len(a))]
    total = sum(lengths)
    params = [0.0]
    acc = 0.0
    for i,l in enumerate(lengths):
        acc += l
        if total > 0.0:
            params.append(acc/total)
        else:
            params.append((i+1)/len(lengths))
    params[-1] = 1.0
    return params,total

def polylength(a):
    return _polyparams(a)[1]

def samplepoly(a,u):
    """
    Sample the poly ``a`` at parameter ``u``, where ``u`` is mapped
    proportionally across the length of all line segments.  Samples
    outside `[0,1]` are drawn from the parameter space of the first or
    last line segment.

    """
    params,_ = _polyparams(a)
    i = 1
    while i < len(params)-1 and u > params[i]:
        i += 1
    u0 = params[i-1]
    u1 = params[i]
    if u1-u0 <= 0.0:
        return point(a[i])
    return sampleline([a[i-1],a[i]],(u-u0)/(u1-u0))

def segmentpoly(a,u1,u2):
    """slice out a parameterized segment from polyline or polygon ``a``.
    The result is a poly, or a line when no interior vertex falls
    inside the interval"""
    params,_ = _polyparams(a)
    pts = [samplepoly(a,u1)]
    for i in range(len(a)):
        if params[i] > u1 + epsilon and params[i] < u2 - epsilon:
            pts.append(point(a[i]))
    pts.append(samplepoly(a,u2))
    return pts

def polybbox(a):
    """Compute the 3D bounding box of polyline/polygon ``a``"""
    return _pointsbbox(a)

## operations on geometry lists
## ----------------------------

def isgeomlist(a):
    """is ``a`` a list of lines, arcs, and polys?"""
    if not isinstance(a,list) or len(a) == 0:
        return False
    for g in a:
        if not (isline(g) or isarc(g) or ispoly(g)):
            return False
    return True

def _geomlistparams(gl):
    lengths = [length(g) for g in gl]
    total = sum(lengths)
    params = [0.0]
    acc = 0.0
    for i,l in enumerate(lengths):
        acc += l
        if total > 0.0:
            params.append(acc/total)
        else:
            params.append((i+1)/len(lengths))
    params[-1] = 1.0
    return params,total

def samplegeomlist(gl,u):
    params,_ = _geomlistparams(gl)
    i = 1
    while i < len(params)-1 and u > params[i]:
        i += 1
    u0 = params[i-1]
    u1 = params[i]
    if u1-u0 <= 0.0:
        return sample(gl[i-1],1.0)
    return sample(gl[i-1],(u-u0)/(u1-u0))

def segmentgeomlist(gl,u1,u2):
    """slice out the figures of ``gl`` spanning `[u1,u2]`.  A single
    resulting figure is returned bare, not wrapped in a list"""
    params,_ = _geomlistparams(gl)
    result = []
    for i,g in enumerate(gl):
        g0 = params[i]
        g1 = params[i+1]
        if g1 <= u1 + epsilon or g0 >= u2 - epsilon or g1-g0 <= 0.0:
            continue
        lo = max(0.0,(u1-g0)/(g1-g0))
        hi = min(1.0,(u2-g0)/(g1-g0))
        if close(lo,0.0) and close(hi,1.0):
            result.append(deepcopy(g))
        else:
            result.append(segment(g,lo,hi))
    if len(result) == 1:
        return result[0]
    return result

def geomlistbbox(gl):
    pts = []
    for g in gl:
        pts.extend(bbox(g))
    return _pointsbbox(pts)

def _pointsbbox(pts):
    return [ point(min(p[0] for p in pts),
                   min(p[1] for p in pts),
                   min(p[2] for p in pts)),
             point(max(p[0] for p in pts),
                   max(p[1] for p in pts),
                   max(p[2] for p in pts)) ]

## GENERALIZED CURVE OPERATIONS
## ----------------------------------------

## Functions that operate on points, lines, arcs, polys and geometry
## lists, determining the nature of their arguments and generalizing
## length, domain, sampling, slicing, and splitting.

def iscurve(x):
    """ is ``x`` a figure with a parameter domain and non-trivial extent?"""
    return isline(x) or isarc(x) or ispoly(x) or isgeomlist(x)

def length(x):
    """
    Return the scalar length of figure x.
    """
    if ispoint(x):
        return 0.0
    elif isline(x):
        return linelength(x)
    elif isarc(x):
        return arclength(x)
    elif ispoly(x):
        return polylength(x)
    elif isgeomlist(x):
        return _geomlistparams(x)[1]
    else:
        raise ValueError("inappropriate type for length(): {}".format(x))

def domain(x):
    """
    Return the parameter domain `(t0, t1)` of figure x.  All figures
    share the unit domain.
    """
    if not (ispoint(x) or iscurve(x)):
        raise ValueError("inappropriate type for domain(): {}".format(x))
    return (0.0,1.0)

def sample(x,u):
    """
    Given a figure x and a parameter u, return the point on the figure
    corresponding to the specified sampling parameter.

    """
    if ispoint(x):
        return point(x)
    elif isline(x):
        return sampleline(x,u)
    elif isarc(x):
        return samplearc(x,u)
    elif ispoly(x):
        return samplepoly(x,u)
    elif isgeomlist(x):
        return samplegeomlist(x,u)
    else:
        raise ValueError("inappropriate type for sample(): {}".format(x))

def segment(x,u1,u2):
    """ given a figure x, create a new figure spanning the specified
    interval `[u1,u2]` of the original figure
    """
    if not (isgoodnum(u1) and isgoodnum(u2)) or close(u1,u2) \
       or u1 < 0 or u2 > 1 or u2 < u1:
        raise ValueError('bad parameter arguments passed to segment: {}, {}'.format(u1,u2))
    if isline(x):
        return segmentline(x,u1,u2)
    elif isarc(x):
        return segmentarc(x,u1,u2)
    elif ispoly(x):
        return segmentpoly(x,u1,u2)
    elif isgeomlist(x):
        return segmentgeomlist(x,u1,u2)
    else:
        raise ValueError("inappropriate figure type for segment(): {}".format(x))

def split(x,u):
    """Split figure ``x`` at parameter ``u``.

    Returns a list of two figures when ``u`` lies strictly inside the
    domain of a figure with non-zero length, a list holding ``x`` alone
    when the split would be a no-op (``u`` on a domain end, or a
    degenerate figure), and an empty list when ``x`` cannot be split at
    all, as is the case for points.
    """
    if not isgoodnum(u):
        raise ValueError('bad parameter passed to split(): {}'.format(u))
    if ispoint(x):
        return []
    t0,t1 = domain(x)
    if u <= t0 + epsilon or u >= t1 - epsilon or length(x) < epsilon:
        return [x]
    return [segment(x,t0,u),segment(x,u,t1)]

def bbox(x):
    """
    Given a figure x, return the three-dimensional bounding box of the figure.
    """
    if ispoint(x):
        return pointbbox(x)
    elif isline(x):
        return linebbox(x)
    elif isarc(x):
        return arcbbox(x)
    elif ispoly(x):
        return polybbox(x)
    elif isgeomlist(x):
        return geomlistbbox(x)
    else:
        raise ValueError("inappropriate type for bbox(): {}".format(x))
