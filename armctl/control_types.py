"""Command types returned from control and motion generation callbacks."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from armctl.control_tools import is_valid_elbow

__all__ = [
    "ControllerMode",
    "RealtimeConfig",
    "Finishable",
    "Torques",
    "JointPositions",
    "JointVelocities",
    "CartesianPose",
    "CartesianVelocities",
    "VirtualWallCuboid",
    "motion_finished",
]


class ControllerMode(enum.Enum):
    """Available controller modes for a robot."""

    JOINT_IMPEDANCE = enum.auto()
    CARTESIAN_IMPEDANCE = enum.auto()


class RealtimeConfig(enum.Enum):
    """Whether to enforce realtime mode for a control loop thread."""

    ENFORCE = enum.auto()
    IGNORE = enum.auto()


def _vector(values: Iterable[float], size: int, name: str) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != size:
        raise ValueError(f"{name} requires exactly {size} values, got {len(result)}.")
    return result


@dataclass
class Finishable:
    """Base for commands that can mark the end of a motion."""

    motion_finished: bool = field(default=False, kw_only=True)


@dataclass
class Torques(Finishable):
    """Joint-level torque commands without gravity and friction, in Nm."""

    tau_J: tuple[float, ...]  # noqa: N815

    def __post_init__(self) -> None:
        self.tau_J = _vector(self.tau_J, 7, "Torques")


@dataclass
class JointPositions(Finishable):
    """Desired joint angles in rad."""

    q: tuple[float, ...]

    def __post_init__(self) -> None:
        self.q = _vector(self.q, 7, "JointPositions")


@dataclass
class JointVelocities(Finishable):
    """Desired joint velocities in rad/s."""

    dq: tuple[float, ...]

    def __post_init__(self) -> None:
        self.dq = _vector(self.dq, 7, "JointVelocities")


@dataclass
class CartesianPose(Finishable):
    """Desired end effector pose in base frame as a column-major 4x4 matrix."""

    O_T_EE: tuple[float, ...]  # noqa: N815
    elbow: tuple[float, ...] = (0.0, 0.0)

    def __post_init__(self) -> None:
        self.O_T_EE = _vector(self.O_T_EE, 16, "CartesianPose")
        self.elbow = _vector(self.elbow, 2, "Elbow configuration")

    def has_elbow(self) -> bool:
        """Return True if a valid elbow configuration is stored."""
        return is_valid_elbow(self.elbow)


@dataclass
class CartesianVelocities(Finishable):
    """Desired Cartesian twist in base frame: m/s for translation, rad/s for rotation."""

    O_dP_EE: tuple[float, ...]  # noqa: N815
    elbow: tuple[float, ...] = (0.0, 0.0)

    def __post_init__(self) -> None:
        self.O_dP_EE = _vector(self.O_dP_EE, 6, "CartesianVelocities")
        self.elbow = _vector(self.elbow, 2, "Elbow configuration")

    def has_elbow(self) -> bool:
        """Return True if a valid elbow configuration is stored."""
        return is_valid_elbow(self.elbow)


@dataclass
class VirtualWallCuboid:
    """Parameters of a cuboid used as a virtual wall."""

    id: int = 0
    object_world_size: tuple[float, ...] = (0.0, 0.0, 0.0)
    p_frame: tuple[float, ...] = (0.0,) * 16
    active: bool = False

    def __post_init__(self) -> None:
        self.id = int(self.id)
        self.object_world_size = _vector(self.object_world_size, 3, "object_world_size")
        self.p_frame = _vector(self.p_frame, 16, "p_frame")
        self.active = bool(self.active)


_Command = TypeVar("_Command", bound=Finishable)


def motion_finished(command: _Command) -> _Command:
    """Return a copy of the command marked as the last one of the motion."""
    return dataclasses.replace(command, motion_finished=True)