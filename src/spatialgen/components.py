"""Host-facing components.

A component declares named, typed inputs and outputs and turns one set
of input values into one set of output values.  The visual-programming
host marshals data in and out by parameter name (or nickname); the
geometric work is done by the host-independent functions of
:mod:`spatialgen.refine` and :mod:`spatialgen.voxel`.

Invalid input never raises out of :meth:`Component.execute`.  It is
reported as a WARNING :class:`RuntimeMessage` and the component returns
empty outputs, which the host shows as "no result".
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from spatialgen.config import Settings, load_settings
from spatialgen.geom import ispoint
from spatialgen.geom3d import issolid
from spatialgen.refine import refine_curves
from spatialgen.voxel import candidate_cells, classify, voxelize

logger = logging.getLogger(__name__)


class Access(Enum):
    ITEM = "item"
    LIST = "list"


class MessageLevel(Enum):
    """Severity of a runtime message shown on the component."""
    REMARK = "remark"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Param:
    """Declaration of one input or output parameter."""
    name: str
    nickname: str
    description: str
    kind: str
    access: Access = Access.ITEM
    default: Any = None
    optional: bool = False


@dataclass(frozen=True)
class RuntimeMessage:
    level: MessageLevel
    text: str


class Component(ABC):
    """Base class for host components."""

    name: ClassVar[str]
    nickname: ClassVar[str]
    description: ClassVar[str]
    category: ClassVar[str] = "FGAM"
    subcategory: ClassVar[str]
    inputs: ClassVar[Tuple[Param, ...]] = ()
    outputs: ClassVar[Tuple[Param, ...]] = ()

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings if settings is not None else load_settings()
        self.messages: List[RuntimeMessage] = []

    def add_message(self, level: MessageLevel, text: str) -> None:
        self.messages.append(RuntimeMessage(level, text))
        if level is MessageLevel.REMARK:
            logger.info(f"{self.nickname}: {text}")
        else:
            logger.warning(f"{self.nickname}: {text}")

    def empty_outputs(self) -> Dict[str, list]:
        return {p.name: [] for p in self.outputs}

    def _default(self, param: Param) -> Any:
        return param.default

    def _collect(self, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        collected: Dict[str, Any] = {}
        for param in self.inputs:
            if param.name in values:
                value = values[param.name]
            else:
                value = values.get(param.nickname)
            if value is None:
                value = self._default(param)
            if value is None and param.access is Access.LIST and param.optional:
                value = []
            if value is None or (param.access is Access.LIST and (
                    not isinstance(value, (list, tuple))
                    or (not param.optional and len(value) == 0))):
                self.add_message(MessageLevel.WARNING,
                                 f"Input parameter {param.name} failed to collect data")
                return None
            if param.access is Access.LIST:
                value = list(value)
            collected[param.name] = value
        return collected

    def execute(self, values: Mapping[str, Any]) -> Dict[str, list]:
        """Collect inputs from ``values``, solve, and return outputs keyed
        by output parameter name."""
        self.messages = []
        collected = self._collect(values)
        if collected is None:
            return self.empty_outputs()
        try:
            return self.solve(collected)
        except (ValueError, RuntimeError) as exc:
            self.add_message(MessageLevel.WARNING, str(exc))
            return self.empty_outputs()

    @abstractmethod
    def solve(self, inputs: Dict[str, Any]) -> Dict[str, list]:
        """Do the work for one set of collected inputs."""


class RecursiveLineComponent(Component):
    """Subdivide curves and reconnect their split points into a network."""

    name = "Divide-and-Conquer"
    nickname = "DAC"
    description = "Take some lines and build an army"
    subcategory = "Divide-and-Conquer"
    inputs = (
        Param("Curve", "C", "Input Curves", "curve", Access.LIST),
        Param("Maximum Edge Length", "MEL", "Max Length of Edge", "number"),
    )
    outputs = (
        Param("All Curves", "C", "Generated Split Curves", "curve", Access.LIST),
    )

    def _default(self, param: Param) -> Any:
        if param.name == "Maximum Edge Length":
            return self.settings.max_edge_length
        return param.default

    def solve(self, inputs: Dict[str, Any]) -> Dict[str, list]:
        result = refine_curves(inputs["Curve"], inputs["Maximum Edge Length"],
                               self.settings.max_iterations)
        if not result.converged:
            self.add_message(MessageLevel.WARNING,
                             f"Stopped after {result.iterations} iterations; "
                             "some curves are still longer than the maximum")
        return {"All Curves": result.curves}


class VoxelizeGeometryComponent(Component):
    """Voxelize a solid and sort the voxels into interior and boundary sets."""

    name = "Cube-a-saurus"
    nickname = "CAS"
    description = "A prehistoric beast that only eats geometry and spits out voxels"
    subcategory = "Cube-a-saurus"
    inputs = (
        Param("Brep", "B", "Input Brep", "brep"),
        Param("Voxel Size", "V", "Size of each voxel", "number"),
        Param("Points", "P", "Points to influence voxel colors", "point",
              Access.LIST, optional=True),
    )
    outputs = (
        Param("All Voxels", "V", "Generated voxels", "box", Access.LIST),
        Param("Colors", "C", "Colors for each voxel", "colour", Access.LIST),
        Param("Split Breps", "SB", "Resulting split Breps", "brep", Access.LIST),
        Param("Interior Voxels", "IV", "Voxels Inside Brep Geometry", "brep", Access.LIST),
    )

    def _default(self, param: Param) -> Any:
        if param.name == "Voxel Size":
            return self.settings.voxel_size
        return param.default

    def solve(self, inputs: Dict[str, Any]) -> Dict[str, list]:
        brep = inputs["Brep"]
        if not issolid(brep, fast=False) or not brep[1]:
            raise ValueError("Input Brep is not a valid solid")
        for p in inputs["Points"]:
            if not ispoint(p):
                raise ValueError(f"Points input holds a non-point value: {p!r}")

        tol = self.settings.tolerance
        cells = candidate_cells(voxelize(brep, inputs["Voxel Size"]), brep, tol)
        result = classify(cells, brep, tol, engine=self.settings.engine_spec)
        return {
            "All Voxels": [cell.box for cell in cells],
            "Colors": [self.settings.default_color] * len(cells),
            "Split Breps": result.fragments,
            "Interior Voxels": [cell.solid for cell in result.interior],
        }
