"""
Coordinate conversion functions from Houdini space to the receiver's space.

Houdini is right-handed and Y-up with units in meters; the receiver is
left-handed and Z-up. The conversions below reproduce exactly what the
LiveLink HDA expects on the receiving side, including two asymmetries:

    - positions flip the sign of Y, while scales swap Y and Z
    - the +90 degree X offset on Euler rotations is applied to the root bone only

All quaternions are in (w, x, y, z) format unless otherwise specified.
"""

import numpy as np
from scipy.spatial.transform import Rotation as R


# Unit conversion factor applied to positions (reserved, currently 1:1)
TRANSFORM_SCALE = 1.0

# Euler offset added to the root bone's X rotation (degrees)
ROOT_ROTATION_OFFSET = 90.0

IDENTITY_QUAT = np.array([1.0, 0.0, 0.0, 0.0])
ZERO_VECTOR = np.array([0.0, 0.0, 0.0])
ONE_VECTOR = np.array([1.0, 1.0, 1.0])


def convert_position(x, y, z, scale=TRANSFORM_SCALE):
    """
    Convert a Houdini position to the receiver's coordinate system.
    Conversion: (x, -y, z) * scale

    Args:
        x, y, z: Position components in Houdini coordinates
        scale: Uniform unit scale factor

    Returns:
        Position vector in receiver coordinates
    """
    return np.array([x, -y, z], dtype=np.float64) * scale


def convert_scale(x, y, z):
    """
    Convert a Houdini scale to the receiver's coordinate system.
    Conversion: (x, z, y) - swaps Y and Z, no sign flip

    Args:
        x, y, z: Scale components in Houdini coordinates

    Returns:
        Scale vector in receiver coordinates
    """
    return np.array([x, z, y], dtype=np.float64)


def euler_to_quat(roll, pitch, yaw):
    """
    Build a quaternion from Euler angles in the receiver's convention.

    Roll is about X, pitch about Y and yaw about Z, all in degrees. Angles
    are unwound with fmod(angle, 360) before halving, so 370 degrees gives
    the same quaternion as 10 degrees rather than its negation.

    Args:
        roll: Rotation about X (degrees)
        pitch: Rotation about Y (degrees)
        yaw: Rotation about Z (degrees)

    Returns:
        Quaternion (w, x, y, z)
    """
    half = np.pi / 180.0 / 2.0
    sp, cp = np.sin(np.fmod(pitch, 360.0) * half), np.cos(np.fmod(pitch, 360.0) * half)
    sy, cy = np.sin(np.fmod(yaw, 360.0) * half), np.cos(np.fmod(yaw, 360.0) * half)
    sr, cr = np.sin(np.fmod(roll, 360.0) * half), np.cos(np.fmod(roll, 360.0) * half)

    return np.array([
        cr * cp * cy + sr * sp * sy,
        cr * sp * sy - sr * cp * cy,
        -cr * sp * cy - sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
    ])


def convert_rotation_from_euler(x, y, z, is_root_bone=False):
    """
    Convert a Houdini Euler rotation (degrees) to a receiver quaternion.

    Args:
        x, y, z: Euler angles in Houdini coordinates (degrees)
        is_root_bone: True only for bone index 0 of the active skeleton

    Returns:
        Quaternion (w, x, y, z) built from Euler (x, -y, -z)
    """
    if is_root_bone:
        x += ROOT_ROTATION_OFFSET
    return euler_to_quat(x, -y, -z)


def convert_rotation_from_quaternion(x, y, z, w):
    """
    Convert a Houdini quaternion (x, y, z, w) to a receiver quaternion.

    The receiver quaternion has components (X=x, Y=z, Z=y, W=-w). The
    mapping is literal; the HDA does not send quaternions today so it has
    never been checked against a real sender. The result is not normalized.

    Args:
        x, y, z, w: Quaternion components in Houdini coordinates

    Returns:
        Quaternion (w, x, y, z) = (-w, x, z, y)
    """
    return np.array([-w, x, z, y], dtype=np.float64)


def quat_to_euler(q):
    """
    Quaternion (w, x, y, z) to XYZ Euler angles in degrees.

    Only meant for printing and debugging received rotations.
    """
    return R.from_quat([q[1], q[2], q[3], q[0]]).as_euler("xyz", degrees=True)
