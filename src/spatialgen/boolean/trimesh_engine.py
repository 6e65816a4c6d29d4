"""Trimesh-backed boolean split engine for spatialGen solids.

Solids are converted to ``trimesh.Trimesh`` instances, intersected
with and subtracted from the splitting solid via :mod:`trimesh.boolean`
(the ``manifold3d`` backend by default), and every connected body of
the two results is converted back into a spatialGen solid.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np
import trimesh

from spatialgen import geom3d as _g3
from spatialgen.geom import point

logger = logging.getLogger(__name__)

ENGINE_NAME = "trimesh"


def engines_available() -> set[str]:
    """Return the set of trimesh boolean backends that are operational."""

    return set(trimesh.boolean.engines_available)


def is_available(backend: Optional[str] = None) -> bool:
    """Check whether the engine can run (at least one backend present)."""

    available = engines_available()
    if not available:
        return False
    if backend is None:
        return True
    return backend in available


def solid_to_mesh(sld) -> "trimesh.Trimesh":
    triangles = list(_g3.solidtriangles(sld))
    if not triangles:
        return trimesh.Trimesh(vertices=np.zeros((0, 3)), faces=np.zeros((0, 3), dtype=np.int64), process=False)

    vertex_map: dict[tuple[float, float, float], int] = {}
    verts = []
    faces = []
    for tri in triangles:
        face_inds = []
        for pt in tri:
            key = (round(pt[0], 9), round(pt[1], 9), round(pt[2], 9))
            idx = vertex_map.get(key)
            if idx is None:
                idx = len(verts)
                vertex_map[key] = idx
                verts.append([pt[0], pt[1], pt[2]])
            face_inds.append(idx)
        faces.append(face_inds)

    mesh = trimesh.Trimesh(vertices=np.asarray(verts, dtype=float),
                           faces=np.asarray(faces, dtype=np.int64),
                           process=False)
    mesh.update_faces(mesh.nondegenerate_faces())
    mesh.remove_unreferenced_vertices()
    if not mesh.is_watertight:
        mesh.merge_vertices()
    mesh.fix_normals()
    return mesh


def mesh_to_solid(mesh: "trimesh.Trimesh", operation: str) -> list:
    construction = ['boolean', f'{ENGINE_NAME}:{operation}']
    triangles = np.asarray(mesh.triangles)
    if triangles.size == 0:
        return _g3.solid([], [], construction)

    tri_points = [[point(float(v[0]), float(v[1]), float(v[2])) for v in tri]
                  for tri in triangles]
    surf = _g3.surface_from_triangles(tri_points)
    if surf is None:
        return _g3.solid([], [], construction)
    return _g3.solid([surf], [], construction)


def _bodies(mesh: "trimesh.Trimesh", min_volume: float) -> List["trimesh.Trimesh"]:
    if mesh is None or mesh.faces.size == 0:
        return []
    return [body for body in mesh.split(only_watertight=False)
            if abs(body.volume) > min_volume]


def split_solid(a, b, tol: float, backend: Optional[str] = None) -> List[list]:
    """Split solid ``a`` by the boundary of solid ``b``.

    Returns one solid per connected body of ``a & b`` followed by one
    per body of ``a - b``.  When either part is empty the boundary of
    ``b`` does not cut ``a`` and no fragments are returned.
    """

    available = engines_available()
    if backend is not None and backend not in available:
        raise RuntimeError(
            f"trimesh backend '{backend}' is not available (available: {available})"
        )
    if backend is None and not available:
        raise RuntimeError(
            "no trimesh boolean backends are available; install manifold3d"
        )

    mesh_a = solid_to_mesh(a)
    mesh_b = solid_to_mesh(b)
    if mesh_a.faces.size == 0 or mesh_b.faces.size == 0:
        return []

    min_volume = tol ** 3
    try:
        inside = trimesh.boolean.intersection([mesh_a, mesh_b], engine=backend, check_volume=False)
        outside = trimesh.boolean.difference([mesh_a, mesh_b], engine=backend, check_volume=False)
        inside_bodies = _bodies(inside, min_volume)
        outside_bodies = _bodies(outside, min_volume)
    except Exception as exc:
        raise RuntimeError(f"trimesh boolean split failed: {exc}") from exc

    if not inside_bodies or not outside_bodies:
        return []

    logger.debug("split into %d inside and %d outside bodies",
                 len(inside_bodies), len(outside_bodies))
    return ([mesh_to_solid(m, 'split:inside') for m in inside_bodies] +
            [mesh_to_solid(m, 'split:outside') for m in outside_bodies])


__all__ = ['ENGINE_NAME', 'engines_available', 'is_available', 'mesh_to_solid',
           'solid_to_mesh', 'split_solid']
