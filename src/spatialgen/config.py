"""Runtime settings for spatialGen.

Settings come from three places, in increasing priority: the defaults
below, a YAML mapping (passed explicitly or named by the
``SPATIALGEN_CONFIG`` environment variable), and the
``SPATIALGEN_BOOLEAN_ENGINE`` and ``SPATIALGEN_TOLERANCE`` environment
variables.

Example YAML::

    tolerance: 0.001
    max_iterations: 100
    boolean_engine: trimesh
    trimesh_backend: manifold
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

SPATIALGEN_CONFIG = "SPATIALGEN_CONFIG"
SPATIALGEN_BOOLEAN_ENGINE = "SPATIALGEN_BOOLEAN_ENGINE"
SPATIALGEN_TOLERANCE = "SPATIALGEN_TOLERANCE"

#: distance below which two geometric features are considered coincident
DEFAULT_TOLERANCE = 0.001


@dataclass
class Settings:
    """Tolerances and defaults threaded through the geometric pipelines."""

    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = 100
    max_edge_length: float = 6.0
    voxel_size: float = 2.0
    boolean_engine: str = "trimesh"
    trimesh_backend: Optional[str] = None
    default_color: Tuple[int, int, int] = field(default=(255, 255, 255))

    @property
    def engine_spec(self) -> str:
        """Engine name in the ``engine[:backend]`` form understood by
        :func:`spatialgen.boolean.boolean_split`."""
        if self.trimesh_backend and self.boolean_engine == "trimesh":
            return f"{self.boolean_engine}:{self.trimesh_backend}"
        return self.boolean_engine

    def validate(self) -> "Settings":
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance!r}")
        if not isinstance(self.max_iterations, int) or self.max_iterations < 0:
            raise ValueError(f"max_iterations must be a non-negative integer, got {self.max_iterations!r}")
        if not self.max_edge_length > 0:
            raise ValueError(f"max_edge_length must be positive, got {self.max_edge_length!r}")
        if not self.voxel_size > 0:
            raise ValueError(f"voxel_size must be positive, got {self.voxel_size!r}")
        if len(self.default_color) != 3:
            raise ValueError(f"default_color must be an RGB triple, got {self.default_color!r}")
        return self


def _from_mapping(data: Dict[str, Any], base: Settings) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(unknown)}")
    if "default_color" in data:
        data = dict(data, default_color=tuple(data["default_color"]))
    return replace(base, **data)


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from ``path`` (or ``$SPATIALGEN_CONFIG``) and the
    environment, returning validated :class:`Settings`."""

    settings = Settings()
    if path is None:
        path = os.environ.get(SPATIALGEN_CONFIG) or None

    if path is not None:
        cfg_path = Path(path).expanduser()
        if not cfg_path.exists():
            raise FileNotFoundError(f"settings file not found: {cfg_path}")
        with cfg_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"settings file must hold a mapping, got {type(data)!r}")
        settings = _from_mapping(data, settings)
        logger.debug(f"Loaded settings from {cfg_path}")

    engine = os.environ.get(SPATIALGEN_BOOLEAN_ENGINE)
    if engine:
        name, _, backend = engine.partition(":")
        settings = replace(settings, boolean_engine=name,
                           trimesh_backend=backend or settings.trimesh_backend)

    tol = os.environ.get(SPATIALGEN_TOLERANCE)
    if tol:
        try:
            settings = replace(settings, tolerance=float(tol))
        except ValueError as exc:
            raise ValueError(f"{SPATIALGEN_TOLERANCE} must be a number, got {tol!r}") from exc

    return settings.validate()
