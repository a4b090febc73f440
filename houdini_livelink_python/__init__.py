"""
Houdini LiveLink Python - live skeletal animation from Houdini.

This package receives skeleton and pose data sent by Houdini's LiveLink
HDA, converts it to the receiver's coordinate conventions and publishes it
to a consumer under a stable subject name.

Main classes:
    - LiveLinkSource: Background listener for one Houdini connection
    - SourceConfig: Endpoint, refresh rate, subject name and transport
    - LatestFrameClient: Thread-safe consumer keeping the latest frames
    - UdpTransport / HttpTransport: Push and poll ways of receiving data

Example usage:
    from houdini_livelink_python import LatestFrameClient, create_source

    # Initialize
    client = LatestFrameClient()
    source = create_source("127.0.0.1:8010", refresh_rate=60, transport="http")

    # Start receiving
    source.receive_client(client)

    # Main loop
    while running:
        frame = client.get_latest_frame()
        if frame:
            topology = client.get_topology(frame["subject"])
            for name, bone in zip(topology.bone_names, frame["pose"].bone_transforms):
                print(name, bone.position, bone.rotation)

    # Cleanup
    source.request_source_shutdown()
"""

from .config import SourceConfig, parse_endpoint
from .errors import (
    LiveLinkError,
    DecodeError,
    ShapeMismatchError,
    TransportError,
    EndpointParseError,
)
from .protocol import SkeletonTopology, BoneTransform, PoseFrame, DecodeResult, decode_message
from .publisher import Publisher, LatestFrameClient, SubjectKey
from .session import SessionState, SessionPhase, ProcessOutcome, process_message
from .source import LiveLinkSource, create_source
from .transport import Transport, UdpTransport, HttpTransport, make_transport

__version__ = "0.1.0"
__all__ = [
    "SourceConfig",
    "parse_endpoint",
    "LiveLinkError",
    "DecodeError",
    "ShapeMismatchError",
    "TransportError",
    "EndpointParseError",
    "SkeletonTopology",
    "BoneTransform",
    "PoseFrame",
    "DecodeResult",
    "decode_message",
    "Publisher",
    "LatestFrameClient",
    "SubjectKey",
    "SessionState",
    "SessionPhase",
    "ProcessOutcome",
    "process_message",
    "LiveLinkSource",
    "create_source",
    "Transport",
    "UdpTransport",
    "HttpTransport",
    "make_transport",
]
