"""Rate limiting of joint and Cartesian commands.

Commands are limited so that their derivatives stay within the given maxima,
assuming one command per control cycle of ``DELTA_T`` seconds.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable, Sequence

import numpy as np

from armctl.control_tools import is_homogeneous_transformation

__all__ = [
    "DELTA_T",
    "LIMIT_EPS",
    "NORM_EPS",
    "FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE",
    "limit_rate_derivatives",
    "limit_rate_velocity",
    "limit_rate_position",
    "limit_rate_joint_velocities",
    "limit_rate_joint_positions",
    "limit_rate_cartesian_velocity",
    "limit_rate_cartesian_pose",
]

DELTA_T = 1e-3
"""Sample time of the control loop in seconds."""

LIMIT_EPS = 1e-3
"""Safety margin for limits."""

NORM_EPS = sys.float_info.epsilon
"""Norm below which a vector is treated as zero."""

FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE = 0.99
"""Scaling of rotational limits when limiting Cartesian poses."""


def _cmin(a: float, b: float) -> float:
    # Same NaN handling as a "b < a ? b : a" minimum.
    return b if b < a else a


def _cmax(a: float, b: float) -> float:
    # Same NaN handling as an "a < b ? b : a" maximum.
    return b if a < b else a


def _vector(values: Iterable[float], size: int, name: str) -> np.ndarray:
    result = np.array([float(v) for v in values], dtype=float)
    if result.shape != (size,):
        raise ValueError(f"{name} requires exactly {size} values, got {result.size}.")
    return result


def _require_finite(values: np.ndarray, message: str) -> None:
    if not np.all(np.isfinite(values)):
        raise ValueError(message)


def _norm(vector: np.ndarray) -> float:
    return math.sqrt(float(vector @ vector))


def _as_tuple(values: np.ndarray) -> tuple[float, ...]:
    return tuple(float(v) for v in values)


def _limit_rate_3d(
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
    commanded_velocity: np.ndarray,
    last_commanded_velocity: np.ndarray,
    last_commanded_acceleration: np.ndarray,
) -> np.ndarray:
    commanded_jerk = (
        ((commanded_velocity - last_commanded_velocity) / DELTA_T) - last_commanded_acceleration
    ) / DELTA_T

    commanded_acceleration = last_commanded_acceleration.copy()
    jerk_norm = _norm(commanded_jerk)
    if jerk_norm > NORM_EPS:
        commanded_acceleration = (
            commanded_acceleration
            + (commanded_jerk / jerk_norm) * _cmax(_cmin(jerk_norm, max_jerk), -max_jerk) * DELTA_T
        )

    acceleration_norm = _norm(commanded_acceleration)
    if not acceleration_norm > NORM_EPS:
        return last_commanded_velocity.copy()

    unit_acceleration = commanded_acceleration / acceleration_norm
    dot_product = float(unit_acceleration @ last_commanded_velocity)
    radicand = (
        dot_product * dot_product
        - float(last_commanded_velocity @ last_commanded_velocity)
        + max_velocity * max_velocity
    )
    root = math.sqrt(radicand) if radicand >= 0.0 else math.nan
    distance_to_max_velocity = -dot_product + root

    safe_max_acceleration = _cmin(
        (max_jerk / max_acceleration) * distance_to_max_velocity, max_acceleration
    )
    return (
        last_commanded_velocity
        + unit_acceleration * _cmin(acceleration_norm, safe_max_acceleration) * DELTA_T
    )


def limit_rate_derivatives(
    max_derivatives: Sequence[float],
    commanded_values: Sequence[float],
    last_commanded_values: Sequence[float],
) -> tuple[float, ...]:
    """Limit the first derivative of seven joint values."""
    maxima = _vector(max_derivatives, 7, "max_derivatives")
    commanded = _vector(commanded_values, 7, "commanded_values")
    last = _vector(last_commanded_values, 7, "last_commanded_values")
    _require_finite(commanded, "Commanding value is infinite or NaN.")

    limited = []
    for max_derivative, value, last_value in zip(maxima, commanded, last):
        derivative = (float(value) - float(last_value)) / DELTA_T
        clipped = _cmax(_cmin(derivative, float(max_derivative)), -float(max_derivative))
        limited.append(float(last_value) + clipped * DELTA_T)
    return tuple(limited)


def limit_rate_velocity(
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
    commanded_velocity: float,
    last_commanded_velocity: float,
    last_commanded_acceleration: float,
) -> float:
    """Limit a single velocity command by velocity, acceleration and jerk."""
    if not math.isfinite(commanded_velocity):
        raise ValueError("commanded_velocity is infinite or NaN.")

    commanded_jerk = (
        ((commanded_velocity - last_commanded_velocity) / DELTA_T) - last_commanded_acceleration
    ) / DELTA_T
    commanded_acceleration = (
        last_commanded_acceleration + _cmax(_cmin(commanded_jerk, max_jerk), -max_jerk) * DELTA_T
    )

    safe_max_acceleration = _cmin(
        (max_jerk / max_acceleration) * (max_velocity - last_commanded_velocity), max_acceleration
    )
    safe_min_acceleration = _cmax(
        (max_jerk / max_acceleration) * (-max_velocity - last_commanded_velocity),
        -max_acceleration,
    )

    return (
        last_commanded_velocity
        + _cmax(_cmin(commanded_acceleration, safe_max_acceleration), safe_min_acceleration)
        * DELTA_T
    )


def limit_rate_position(
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
    commanded_position: float,
    last_commanded_position: float,
    last_commanded_velocity: float,
    last_commanded_acceleration: float,
) -> float:
    """Limit a single position command by velocity, acceleration and jerk."""
    if not math.isfinite(commanded_position):
        raise ValueError("commanded_position is infinite or NaN.")
    velocity = limit_rate_velocity(
        max_velocity,
        max_acceleration,
        max_jerk,
        (commanded_position - last_commanded_position) / DELTA_T,
        last_commanded_velocity,
        last_commanded_acceleration,
    )
    return last_commanded_position + velocity * DELTA_T


def limit_rate_joint_velocities(
    max_velocity: Sequence[float],
    max_acceleration: Sequence[float],
    max_jerk: Sequence[float],
    commanded_velocities: Sequence[float],
    last_commanded_velocities: Sequence[float],
    last_commanded_accelerations: Sequence[float],
) -> tuple[float, ...]:
    """Limit seven joint velocity commands joint by joint."""
    columns = [
        _vector(max_velocity, 7, "max_velocity"),
        _vector(max_acceleration, 7, "max_acceleration"),
        _vector(max_jerk, 7, "max_jerk"),
        _vector(commanded_velocities, 7, "commanded_velocities"),
        _vector(last_commanded_velocities, 7, "last_commanded_velocities"),
        _vector(last_commanded_accelerations, 7, "last_commanded_accelerations"),
    ]
    _require_finite(columns[3], "commanded_velocities is infinite or NaN.")
    return tuple(
        limit_rate_velocity(*(float(v) for v in joint)) for joint in zip(*columns)
    )


def limit_rate_joint_positions(
    max_velocity: Sequence[float],
    max_acceleration: Sequence[float],
    max_jerk: Sequence[float],
    commanded_positions: Sequence[float],
    last_commanded_positions: Sequence[float],
    last_commanded_velocities: Sequence[float],
    last_commanded_accelerations: Sequence[float],
) -> tuple[float, ...]:
    """Limit seven joint position commands joint by joint."""
    columns = [
        _vector(max_velocity, 7, "max_velocity"),
        _vector(max_acceleration, 7, "max_acceleration"),
        _vector(max_jerk, 7, "max_jerk"),
        _vector(commanded_positions, 7, "commanded_positions"),
        _vector(last_commanded_positions, 7, "last_commanded_positions"),
        _vector(last_commanded_velocities, 7, "last_commanded_velocities"),
        _vector(last_commanded_accelerations, 7, "last_commanded_accelerations"),
    ]
    _require_finite(columns[3], "commanded_positions is infinite or NaN.")
    return tuple(
        limit_rate_position(*(float(v) for v in joint)) for joint in zip(*columns)
    )


def limit_rate_cartesian_velocity(
    max_translational_velocity: float,
    max_translational_acceleration: float,
    max_translational_jerk: float,
    max_rotational_velocity: float,
    max_rotational_acceleration: float,
    max_rotational_jerk: float,
    O_dP_EE_c: Sequence[float],  # noqa: N803
    last_O_dP_EE_c: Sequence[float],  # noqa: N803
    last_O_ddP_EE_c: Sequence[float],  # noqa: N803
) -> tuple[float, ...]:
    """Limit a Cartesian twist, translation and rotation separately."""
    dx = _vector(O_dP_EE_c, 6, "O_dP_EE_c")
    _require_finite(dx, "O_dP_EE_c is infinite or NaN.")
    last_dx = _vector(last_O_dP_EE_c, 6, "last_O_dP_EE_c")
    last_ddx = _vector(last_O_ddP_EE_c, 6, "last_O_ddP_EE_c")

    translation = _limit_rate_3d(
        max_translational_velocity,
        max_translational_acceleration,
        max_translational_jerk,
        dx[:3],
        last_dx[:3],
        last_ddx[:3],
    )
    rotation = _limit_rate_3d(
        max_rotational_velocity,
        max_rotational_acceleration,
        max_rotational_jerk,
        dx[3:],
        last_dx[3:],
        last_ddx[3:],
    )
    return _as_tuple(np.concatenate((translation, rotation)))


def _rotation_vector(matrix: np.ndarray) -> np.ndarray:
    """Axis times angle of a rotation matrix, angle in [0, pi]."""
    m = [[float(matrix[r, c]) for c in range(3)] for r in range(3)]
    trace = m[0][0] + m[1][1] + m[2][2]
    vec = [0.0, 0.0, 0.0]
    if trace > 0.0:
        t = math.sqrt(trace + 1.0)
        w = 0.5 * t
        t = 0.5 / t
        vec = [(m[2][1] - m[1][2]) * t, (m[0][2] - m[2][0]) * t, (m[1][0] - m[0][1]) * t]
    else:
        i = 0
        if m[1][1] > m[0][0]:
            i = 1
        if m[2][2] > m[i][i]:
            i = 2
        j = (i + 1) % 3
        k = (j + 1) % 3
        t = math.sqrt(m[i][i] - m[j][j] - m[k][k] + 1.0)
        vec[i] = 0.5 * t
        t = 0.5 / t
        w = (m[k][j] - m[j][k]) * t
        vec[j] = (m[j][i] + m[i][j]) * t
        vec[k] = (m[k][i] + m[i][k]) * t

    vector = np.array(vec)
    n = _norm(vector)
    if n == 0.0:
        return np.zeros(3)
    angle = 2.0 * math.atan2(n, abs(w))
    if w < 0.0:
        n = -n
    return (vector / n) * angle


def limit_rate_cartesian_pose(
    max_translational_velocity: float,
    max_translational_acceleration: float,
    max_translational_jerk: float,
    max_rotational_velocity: float,
    max_rotational_acceleration: float,
    max_rotational_jerk: float,
    O_T_EE_c: Sequence[float],  # noqa: N803
    last_O_T_EE_c: Sequence[float],  # noqa: N803
    last_O_dP_EE_c: Sequence[float],  # noqa: N803
    last_O_ddP_EE_c: Sequence[float],  # noqa: N803
) -> tuple[float, ...]:
    """Limit a column-major 4x4 pose command; returns the limited pose."""
    commanded = _vector(O_T_EE_c, 16, "O_T_EE_c")
    _require_finite(commanded, "O_T_EE_c is infinite or NaN.")
    if not is_homogeneous_transformation(_as_tuple(commanded)):
        raise ValueError("O_T_EE_c is invalid transformation matrix. Has to be column major!")
    last = _vector(last_O_T_EE_c, 16, "last_O_T_EE_c")

    commanded_pose = commanded.reshape(4, 4, order="F")
    last_pose = last.reshape(4, 4, order="F")
    last_rotation = last_pose[:3, :3]
    last_translation = last_pose[:3, 3]

    translational = (commanded_pose[:3, 3] - last_translation) / DELTA_T
    rotational = _rotation_vector(commanded_pose[:3, :3] @ last_rotation.T) / DELTA_T

    dx = np.array(
        limit_rate_cartesian_velocity(
            max_translational_velocity,
            max_translational_acceleration,
            max_translational_jerk,
            FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE * max_rotational_velocity,
            FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE * max_rotational_acceleration,
            FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE * max_rotational_jerk,
            _as_tuple(np.concatenate((translational, rotational))),
            last_O_dP_EE_c,
            last_O_ddP_EE_c,
        )
    )

    limited = np.eye(4)
    limited[:3, 3] = last_translation + dx[:3] * DELTA_T
    limited[:3, :3] = last_rotation
    omega = dx[3:]
    omega_norm = _norm(omega)
    if omega_norm > NORM_EPS:
        w = omega / omega_norm
        theta = DELTA_T * omega_norm
        skew = np.array(
            [
                [0.0, -w[2], w[1]],
                [w[2], 0.0, -w[0]],
                [-w[1], w[0], 0.0],
            ]
        )
        rotation = np.eye(3) + math.sin(theta) * skew + (1.0 - math.cos(theta)) * (skew @ skew)
        limited[:3, :3] = rotation @ last_rotation

    return _as_tuple(limited.flatten(order="F"))