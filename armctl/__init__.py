"""Command types, robot state and rate limiting for robot arm control loops."""

__version__ = "0.9.2"

__all__ = ["control_types", "control_tools", "robot_state", "rate_limiting"]