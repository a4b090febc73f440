"""
Utility functions for the Houdini LiveLink bridge.

This module provides:
    - coord_utils: Houdini to receiver coordinate conversions
    - logger: the package logger
"""

from .coord_utils import (
    TRANSFORM_SCALE,
    IDENTITY_QUAT,
    ZERO_VECTOR,
    ONE_VECTOR,
    convert_position,
    convert_rotation_from_euler,
    convert_rotation_from_quaternion,
    convert_scale,
    euler_to_quat,
    quat_to_euler,
)
from .logger import LOGGER_NAME, set_log_level

__all__ = [
    "TRANSFORM_SCALE",
    "IDENTITY_QUAT",
    "ZERO_VECTOR",
    "ONE_VECTOR",
    "convert_position",
    "convert_rotation_from_euler",
    "convert_rotation_from_quaternion",
    "convert_scale",
    "euler_to_quat",
    "quat_to_euler",
    "LOGGER_NAME",
    "set_log_level",
]
