"""Robot state as reported by the robot in each control cycle."""

from __future__ import annotations

import dataclasses
import enum
import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

__all__ = ["RobotMode", "RobotState"]


class RobotMode(enum.Enum):
    """The robot's current mode."""

    OTHER = enum.auto()
    IDLE = enum.auto()
    MOVE = enum.auto()
    GUIDING = enum.auto()
    REFLEX = enum.auto()
    USER_STOPPED = enum.auto()
    AUTOMATIC_ERROR_RECOVERY = enum.auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").capitalize()


def _array(size: int) -> Any:
    return field(default_factory=lambda: (0.0,) * size, metadata={"size": size})


def _scalar() -> Any:
    return field(default=0.0, metadata={"scalar": True})


@dataclass
class RobotState:
    """Measured, desired and commanded quantities of the robot.

    Poses are column-major 4x4 matrices, inertia matrices are 3x3.
    """

    O_T_EE: tuple[float, ...] = _array(16)  # noqa: N815
    O_T_EE_d: tuple[float, ...] = _array(16)  # noqa: N815
    F_T_EE: tuple[float, ...] = _array(16)  # noqa: N815
    F_T_NE: tuple[float, ...] = _array(16)  # noqa: N815
    NE_T_EE: tuple[float, ...] = _array(16)  # noqa: N815
    EE_T_K: tuple[float, ...] = _array(16)  # noqa: N815
    m_ee: float = _scalar()
    I_ee: tuple[float, ...] = _array(9)  # noqa: N815
    F_x_Cee: tuple[float, ...] = _array(3)  # noqa: N815
    m_load: float = _scalar()
    I_load: tuple[float, ...] = _array(9)  # noqa: N815
    F_x_Cload: tuple[float, ...] = _array(3)  # noqa: N815
    m_total: float = _scalar()
    I_total: tuple[float, ...] = _array(9)  # noqa: N815
    F_x_Ctotal: tuple[float, ...] = _array(3)  # noqa: N815
    elbow: tuple[float, ...] = _array(2)
    elbow_d: tuple[float, ...] = _array(2)
    elbow_c: tuple[float, ...] = _array(2)
    delbow_c: tuple[float, ...] = _array(2)
    ddelbow_c: tuple[float, ...] = _array(2)
    tau_J: tuple[float, ...] = _array(7)  # noqa: N815
    tau_J_d: tuple[float, ...] = _array(7)  # noqa: N815
    dtau_J: tuple[float, ...] = _array(7)  # noqa: N815
    q: tuple[float, ...] = _array(7)
    q_d: tuple[float, ...] = _array(7)
    dq: tuple[float, ...] = _array(7)
    dq_d: tuple[float, ...] = _array(7)
    ddq_d: tuple[float, ...] = _array(7)
    joint_contact: tuple[float, ...] = _array(7)
    cartesian_contact: tuple[float, ...] = _array(6)
    joint_collision: tuple[float, ...] = _array(7)
    cartesian_collision: tuple[float, ...] = _array(6)
    tau_ext_hat_filtered: tuple[float, ...] = _array(7)
    O_F_ext_hat_K: tuple[float, ...] = _array(6)  # noqa: N815
    K_F_ext_hat_K: tuple[float, ...] = _array(6)  # noqa: N815
    O_dP_EE_d: tuple[float, ...] = _array(6)  # noqa: N815
    O_ddP_O: tuple[float, ...] = _array(3)  # noqa: N815
    O_T_EE_c: tuple[float, ...] = _array(16)  # noqa: N815
    O_dP_EE_c: tuple[float, ...] = _array(6)  # noqa: N815
    O_ddP_EE_c: tuple[float, ...] = _array(6)  # noqa: N815
    theta: tuple[float, ...] = _array(7)
    dtheta: tuple[float, ...] = _array(7)
    current_errors: tuple[str, ...] = ()
    last_motion_errors: tuple[str, ...] = ()
    control_command_success_rate: float = _scalar()
    robot_mode: RobotMode = RobotMode.USER_STOPPED
    time: timedelta = field(default_factory=timedelta)

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if "size" in f.metadata:
                setattr(self, f.name, self._checked(value, f.metadata["size"], f.name))
            elif f.metadata.get("scalar"):
                setattr(self, f.name, float(value))
        self.current_errors = tuple(str(e) for e in self.current_errors)
        self.last_motion_errors = tuple(str(e) for e in self.last_motion_errors)
        self.robot_mode = RobotMode(self.robot_mode)
        if not isinstance(self.time, timedelta):
            raise TypeError("time must be a datetime.timedelta.")

    @staticmethod
    def _checked(values: Iterable[float], size: int, name: str) -> tuple[float, ...]:
        result = tuple(float(v) for v in values)
        if len(result) != size:
            raise ValueError(f"{name} requires exactly {size} values, got {len(result)}.")
        return result

    def _json_value(self, name: str, value: Any) -> str:
        if isinstance(value, tuple):
            return json.dumps(list(value), separators=(",", ":"))
        if isinstance(value, RobotMode):
            return json.dumps(str(value))
        if isinstance(value, timedelta):
            return str(value // timedelta(milliseconds=1))
        return json.dumps(value)

    def __str__(self) -> str:
        """Render the state as a JSON object with one entry per field."""
        entries = (
            f"{json.dumps(f.name)}: {self._json_value(f.name, getattr(self, f.name))}"
            for f in dataclasses.fields(self)
        )
        return "{" + ", ".join(entries) + "}"