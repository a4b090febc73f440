"""
Typed values produced by the protocol decoder.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from ..errors import ShapeMismatchError
from ..utils.coord_utils import IDENTITY_QUAT, ZERO_VECTOR, ONE_VECTOR


# Parent index of a root bone
ROOT_PARENT = -1


class Field(Enum):
    """Message fields understood by the decoder. Keys match case-insensitively."""

    PARENTS = "parents"
    NAMES = "names"
    VERTICES = "vertices"
    POSITIONS = "positions"
    ROTATIONS = "rotations"
    SCALES = "scales"
    BLENDSHAPE_NAMES = "blendshape_names"
    BLENDSHAPE_VALUES = "blendshape_values"

    @classmethod
    def lookup(cls, key) -> Optional["Field"]:
        """Return the field for a message key, or None if it is not recognized."""
        if not isinstance(key, str):
            return None
        return _FIELDS_BY_KEY.get(key.lower())


_FIELDS_BY_KEY = {f.value: f for f in Field}


@dataclass(frozen=True)
class SkeletonTopology:
    """
    Static skeleton description: bone hierarchy and curve names.

    The index of a bone in bone_names is its identifier; bone_parents holds
    the parent's index or ROOT_PARENT.
    """

    bone_names: Tuple[str, ...] = ()
    bone_parents: Tuple[int, ...] = ()
    curve_names: Tuple[str, ...] = ()

    @property
    def num_bones(self) -> int:
        return len(self.bone_names)

    @property
    def num_curves(self) -> int:
        return len(self.curve_names)

    def validate(self):
        """
        Raises:
            ShapeMismatchError: If names and parents disagree in length, or a
                parent index does not refer to a bone of this skeleton
        """
        if len(self.bone_parents) != len(self.bone_names):
            raise ShapeMismatchError(
                f"{len(self.bone_names)} bone names but {len(self.bone_parents)} parents")
        n = len(self.bone_names)
        for idx, parent in enumerate(self.bone_parents):
            if parent != ROOT_PARENT and not 0 <= parent < n:
                raise ShapeMismatchError(f"Bone {idx} has invalid parent index {parent}")


@dataclass
class BoneTransform:
    """One bone's local transform. Rotation is a (w, x, y, z) quaternion."""

    position: np.ndarray = field(default_factory=ZERO_VECTOR.copy)
    rotation: np.ndarray = field(default_factory=IDENTITY_QUAT.copy)
    scale: np.ndarray = field(default_factory=ONE_VECTOR.copy)

    @classmethod
    def identity(cls) -> "BoneTransform":
        return cls()

    def __eq__(self, other):
        if not isinstance(other, BoneTransform):
            return NotImplemented
        return (np.array_equal(self.position, other.position)
                and np.array_equal(self.rotation, other.rotation)
                and np.array_equal(self.scale, other.scale))


@dataclass
class PoseFrame:
    """One time sample: a transform per bone and a value per curve."""

    bone_transforms: List[BoneTransform] = field(default_factory=list)
    curve_values: List[float] = field(default_factory=list)

    @property
    def num_bones(self) -> int:
        return len(self.bone_transforms)


@dataclass(frozen=True)
class DecodeResult:
    """What one message carried. Either part may be None."""

    topology: Optional[SkeletonTopology] = None
    pose: Optional[PoseFrame] = None

    @property
    def is_empty(self) -> bool:
        return self.topology is None and self.pose is None
