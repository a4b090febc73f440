"""
Decoder for the Houdini LiveLink JSON protocol.

Houdini sends one JSON object per message. The handshake message (answer
to /get_skeleton) carries the skeleton:

    {"parents": [null, 0, 1], "names": ["root", "hip", "knee"],
     "vertices": [[0, 0, 0], [0, 1, 0], [0, 0.5, 0]]}

and every steady-state message (answer to /get_skeleton_pose) a pose:

    {"positions": [[x, y, z], ...], "rotations": [[rx, ry, rz], ...],
     "scales": [[sx, sy, sz], ...], "blendshape_values": [...]}

The decoder does not assume which kind it was given: every recognized
field feeds either the skeleton or the pose, and a message may carry both.
Pose arrays are checked against the bone/curve counts cached by the
session once the skeleton is established.
"""

import json

from ..errors import DecodeError, ShapeMismatchError
from ..utils.coord_utils import (
    TRANSFORM_SCALE,
    convert_position,
    convert_rotation_from_euler,
    convert_rotation_from_quaternion,
    convert_scale,
)
from .types import ROOT_PARENT, BoneTransform, DecodeResult, Field, PoseFrame, SkeletonTopology


class _Accumulator:
    """Values collected from one message before they are frozen into a result."""

    def __init__(self, expected_bones, expected_curves):
        # None while no skeleton is established
        self.expected_bones = expected_bones
        self.expected_curves = expected_curves

        self.bone_names = []
        self.bone_parents = []
        self.curve_names = []
        self.static_dirty = False

        self.transforms = None
        self.curve_values = []
        self.frame_dirty = False

    def check_bone_count(self, field, count):
        if self.expected_bones is not None and count != self.expected_bones:
            raise ShapeMismatchError(
                f"'{field.value}' has {count} entries, skeleton has {self.expected_bones} bones")

    def transforms_for(self, field, count):
        """Per-bone transforms of this message, allocated as identity on first use."""
        self.check_bone_count(field, count)
        if self.transforms is None:
            self.transforms = [BoneTransform.identity() for _ in range(count)]
        elif len(self.transforms) != count:
            raise ShapeMismatchError(
                f"'{field.value}' has {count} entries, expected {len(self.transforms)}")
        self.frame_dirty = True
        return self.transforms


def _as_array(value, field):
    if not isinstance(value, list):
        raise DecodeError(f"'{field.value}' must be an array, got {type(value).__name__}")
    return value


def _as_number(value, field):
    # bool is an int subclass, but true/false are not valid numbers here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"'{field.value}' expects numbers, got {type(value).__name__}")
    try:
        return float(value)
    except OverflowError:
        raise DecodeError(f"'{field.value}' number out of range") from None


def _as_string(value, field):
    if not isinstance(value, str):
        raise DecodeError(f"'{field.value}' expects strings, got {type(value).__name__}")
    return value


def _as_components(value, field):
    """An [x, y, z] or [x, y, z, w] entry as a list of floats."""
    if not isinstance(value, list):
        raise DecodeError(f"'{field.value}' expects arrays of numbers, got {type(value).__name__}")
    return [_as_number(v, field) for v in value]


def _decode_parents(acc, values):
    parents = []
    for v in values:
        if v is None:
            parents.append(ROOT_PARENT)
            continue
        number = _as_number(v, Field.PARENTS)
        if not number.is_integer():
            raise DecodeError(f"'parents' expects integer indices, got {v!r}")
        parents.append(int(number))
    acc.bone_parents = parents
    acc.static_dirty = True


def _decode_names(acc, values):
    acc.bone_names = [_as_string(v, Field.NAMES) for v in values]
    acc.static_dirty = True


def _decode_blendshape_names(acc, values):
    acc.curve_names = [_as_string(v, Field.BLENDSHAPE_NAMES) for v in values]
    acc.static_dirty = True


def _decode_vertices(acc, values, scale):
    # Handshake only: rest positions at identity rotation and unit scale
    transforms = [BoneTransform.identity() for _ in values]
    for transform, v in zip(transforms, values):
        c = _as_components(v, Field.VERTICES)
        if len(c) == 3:
            transform.position = convert_position(c[0], c[1], c[2], scale)
    acc.transforms = transforms
    acc.frame_dirty = True


def _decode_positions(acc, values, scale):
    transforms = acc.transforms_for(Field.POSITIONS, len(values))
    for transform, v in zip(transforms, values):
        c = _as_components(v, Field.POSITIONS)
        if len(c) == 3:
            transform.position = convert_position(c[0], c[1], c[2], scale)
        else:
            transform.position = BoneTransform().position


def _decode_rotations(acc, values, scale):
    transforms = acc.transforms_for(Field.ROTATIONS, len(values))
    for idx, (transform, v) in enumerate(zip(transforms, values)):
        c = _as_components(v, Field.ROTATIONS)
        if len(c) == 3:
            transform.rotation = convert_rotation_from_euler(c[0], c[1], c[2], is_root_bone=(idx == 0))
        elif len(c) == 4:
            transform.rotation = convert_rotation_from_quaternion(c[0], c[1], c[2], c[3])
        else:
            transform.rotation = BoneTransform().rotation


def _decode_scales(acc, values, scale):
    transforms = acc.transforms_for(Field.SCALES, len(values))
    for transform, v in zip(transforms, values):
        c = _as_components(v, Field.SCALES)
        if len(c) == 3:
            transform.scale = convert_scale(c[0], c[1], c[2])
        else:
            transform.scale = BoneTransform().scale


def _decode_blendshape_values(acc, values):
    if acc.expected_curves is not None and len(values) != acc.expected_curves:
        raise ShapeMismatchError(
            f"'blendshape_values' has {len(values)} entries, skeleton has {acc.expected_curves} curves")
    acc.curve_values = [_as_number(v, Field.BLENDSHAPE_VALUES) for v in values]
    acc.frame_dirty = True


_VALUE_DECODERS = {
    Field.PARENTS: _decode_parents,
    Field.NAMES: _decode_names,
    Field.BLENDSHAPE_NAMES: _decode_blendshape_names,
    Field.BLENDSHAPE_VALUES: _decode_blendshape_values,
}

_TRANSFORM_DECODERS = {
    Field.VERTICES: _decode_vertices,
    Field.POSITIONS: _decode_positions,
    Field.ROTATIONS: _decode_rotations,
    Field.SCALES: _decode_scales,
}


def parse_message(data):
    """
    Parse raw message bytes (or text) into a JSON object.

    Raises:
        DecodeError: If the data is not UTF-8 JSON or not a JSON object
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Message is not UTF-8: {e}") from None
    try:
        obj = json.loads(data)
    except (TypeError, ValueError, RecursionError) as e:
        raise DecodeError(f"Message is not JSON: {e}") from None
    if not isinstance(obj, dict):
        raise DecodeError(f"Message must be a JSON object, got {type(obj).__name__}")
    return obj


def decode_message(data, state, scale=TRANSFORM_SCALE):
    """
    Decode one message against the current session state.

    While the session is active (state.needs_topology is False), every
    per-bone array must have state.bone_count entries and blendshape_values
    must have state.curve_count entries; any mismatch rejects the whole
    message. Skeleton fields are only decoded into a topology while the
    session is still waiting for one.

    Args:
        data: One complete message (bytes or str)
        state: SessionState the message is validated against
        scale: Unit scale applied to positions

    Returns:
        DecodeResult with the skeleton and/or pose the message carried

    Raises:
        DecodeError: If the message is malformed
        ShapeMismatchError: If an array length disagrees with the skeleton
    """
    obj = parse_message(data)

    if state.needs_topology:
        acc = _Accumulator(None, None)
    else:
        acc = _Accumulator(state.bone_count, state.curve_count)

    for key, value in obj.items():
        field = Field.lookup(key)
        if field is None:
            continue
        values = _as_array(value, field)
        if field in _TRANSFORM_DECODERS:
            _TRANSFORM_DECODERS[field](acc, values, scale)
        else:
            _VALUE_DECODERS[field](acc, values)

    # Pose messages may repeat the bone names; once the skeleton is
    # established they are neither validated nor returned
    topology = None
    if acc.static_dirty and state.needs_topology:
        topology = SkeletonTopology(
            bone_names=tuple(acc.bone_names),
            bone_parents=tuple(acc.bone_parents),
            curve_names=tuple(acc.curve_names),
        )
        topology.validate()

    pose = None
    if acc.frame_dirty:
        pose = PoseFrame(bone_transforms=acc.transforms or [], curve_values=acc.curve_values)
        if acc.expected_bones is not None:
            # Covers curve-only messages and handshake vertices sent while active
            if pose.num_bones != acc.expected_bones:
                raise ShapeMismatchError(
                    f"Pose has {pose.num_bones} bones, skeleton has {acc.expected_bones}")

    return DecodeResult(topology=topology, pose=pose)
