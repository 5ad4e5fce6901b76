# armctl

Building blocks for writing control loops for a 7-joint robot arm:

- **Command types** (`armctl.control_types`): `Torques`, `JointPositions`,
  `JointVelocities`, `CartesianPose` and `CartesianVelocities`, each with a
  keyword-only `motion_finished` flag, the `motion_finished()` helper, the
  `ControllerMode` and `RealtimeConfig` enumerations and the
  `VirtualWallCuboid` description.
- **Control helpers** (`armctl.control_tools`): `is_valid_elbow`,
  `is_homogeneous_transformation` and `has_realtime_kernel`.
- **Robot state** (`armctl.robot_state`): the `RobotState` record with all
  measured, desired and commanded quantities, and the `RobotMode` enumeration.
- **Rate limiting** (`armctl.rate_limiting`): functions that clamp commanded
  values so that velocity, acceleration and jerk limits are respected for a
  control cycle of `DELTA_T` (1 ms).

## Installation

```
pip install armctl
```

To run the test suite, install the test extra and run pytest:

```
pip install "armctl[test]"
pytest
```

## Commands

Each command type stores its values as a tuple of floats, checks how many
values it is given and raises `ValueError` otherwise.

```python
from armctl.control_types import JointVelocities, CartesianPose, motion_finished

cmd = JointVelocities([0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.1])
last = motion_finished(cmd)          # copy with motion_finished set to True

pose = CartesianPose(
    [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0.3, 0, 0.5, 1],
    elbow=[0.0, -1.0],
)
pose.has_elbow()                     # True: elbow[1] is -1 or +1
```

Poses are 4x4 homogeneous transformations stored as 16 values in
column-major order. Without an elbow argument the elbow is `(0.0, 0.0)` and
`has_elbow()` returns `False`.

## Robot state

`RobotState` is a dataclass whose array fields default to zeros and are
checked for length; `robot_mode` defaults to `RobotMode.USER_STOPPED` and
`time` is a `datetime.timedelta`. `str(state)` renders the state as a JSON
object with one entry per field, the time given in milliseconds.
`str(RobotMode.USER_STOPPED)` gives `"User stopped"`.

## Rate limiting

```python
from armctl.rate_limiting import limit_rate_joint_velocities

limited = limit_rate_joint_velocities(
    max_velocity=[2.0] * 7,
    max_acceleration=[10.0] * 7,
    max_jerk=[5000.0] * 7,
    commanded_velocities=[0.5] * 7,
    last_commanded_velocities=[0.0] * 7,
    last_commanded_accelerations=[0.0] * 7,
)
```

The other limiters follow the same pattern:

- `limit_rate_derivatives` — clamps the first derivative of seven values.
- `limit_rate_velocity` and `limit_rate_position` — a single value.
- `limit_rate_joint_positions` — seven joint positions.
- `limit_rate_cartesian_velocity` — a 6-value twist, translation and
  rotation limited by the norm of each part.
- `limit_rate_cartesian_pose` — a column-major 4x4 pose; rotational limits
  are scaled by `FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE`.

Commanded values that are infinite or NaN raise `ValueError`, as do inputs
of the wrong length and a pose that is not a valid homogeneous
transformation.

## Checking a transformation

```python
from armctl.control_tools import is_homogeneous_transformation

is_homogeneous_transformation([1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1])  # True
```

## What this package does not do

It does not connect to a robot. There is no network layer, control loop,
robot model, gripper support or logging. The package only provides the
data types and the rate-limiting arithmetic that such a loop would use.