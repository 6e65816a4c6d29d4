"""Boolean split engines for spatialGen solids.

An engine is any object exposing ``split_solid(a, b, tol, backend=None)``
that returns the fragments of solid ``a`` on both sides of the boundary
of solid ``b``, or an empty list when ``b`` does not cut ``a``.  Engines
may also expose ``is_available()``.

The engine is chosen per call, or through the
``SPATIALGEN_BOOLEAN_ENGINE`` environment variable, which accepts
either ``engine`` or ``engine:backend`` (e.g. ``trimesh:manifold``).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from . import trimesh_engine as trimesh

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = 'trimesh'

ENGINE_REGISTRY: Dict[str, Any] = {'trimesh': trimesh}


def register_engine(name: str, engine: Any) -> None:
    """Register ``engine`` under ``name``, replacing any previous entry."""

    if not callable(getattr(engine, 'split_solid', None)):
        raise TypeError('boolean engines must provide split_solid()')
    ENGINE_REGISTRY[name.lower()] = engine


def unregister_engine(name: str) -> None:
    ENGINE_REGISTRY.pop(name.lower(), None)


def get_engine(name: str):
    return ENGINE_REGISTRY.get(name.lower())


def available_engines() -> Sequence[str]:
    return tuple(sorted(ENGINE_REGISTRY.keys()))


def _resolve(engine: Optional[str]):
    selected_raw = engine or os.environ.get('SPATIALGEN_BOOLEAN_ENGINE', DEFAULT_ENGINE)
    backend = None
    if ':' in selected_raw:
        selected, backend = selected_raw.split(':', 1)
    else:
        selected = selected_raw
    impl = get_engine(selected)
    if impl is None:
        raise ValueError(f'unknown boolean engine {selected_raw!r}')
    return impl, backend or None


def boolean_split(a, b, tol: float, *, engine: Optional[str] = None) -> List[list]:
    """Split solid ``a`` against the boundary of solid ``b``.

    Returns the list of fragment solids, or ``[]`` when no split
    occurred.  Engine failures surface as ``RuntimeError``.
    """

    impl, backend = _resolve(engine)
    fragments = impl.split_solid(a, b, tol, backend=backend)
    logger.debug("boolean split produced %d fragment(s)", len(fragments))
    return fragments


__all__ = [
    'DEFAULT_ENGINE',
    'ENGINE_REGISTRY',
    'available_engines',
    'boolean_split',
    'get_engine',
    'register_engine',
    'unregister_engine',
]
