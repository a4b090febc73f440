"""
Houdini LiveLink message protocol: typed values and the JSON decoder.
"""

from .types import ROOT_PARENT, Field, SkeletonTopology, BoneTransform, PoseFrame, DecodeResult
from .decoder import decode_message, parse_message

__all__ = [
    "ROOT_PARENT",
    "Field",
    "SkeletonTopology",
    "BoneTransform",
    "PoseFrame",
    "DecodeResult",
    "decode_message",
    "parse_message",
]
