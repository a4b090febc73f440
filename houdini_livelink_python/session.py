"""
Session state machine for one connection to Houdini.

A session starts out waiting for the skeleton. The first message that
decodes into a valid skeleton is published as the subject's topology and
moves the session to ACTIVE; from then on every decoded pose is published
as a frame. Any pose that disagrees with the cached skeleton sends the
session back to waiting, which makes the next request (or the sender's
next push) a skeleton request again.

SessionState is immutable: process_message() returns the next state
instead of mutating the current one.
"""

from dataclasses import dataclass, replace
from enum import Enum

from .config import DEFAULT_SUBJECT_NAME
from .errors import DecodeError, ShapeMismatchError
from .protocol.decoder import decode_message
from .utils.coord_utils import TRANSFORM_SCALE
from .utils.logger import logger


class SessionPhase(Enum):
    AWAITING_TOPOLOGY = "awaiting_topology"
    ACTIVE = "active"


class ProcessOutcome(Enum):
    """What process_message() did with a message."""

    TOPOLOGY = "topology"      # skeleton published, session is now active
    FRAME = "frame"            # pose published
    IGNORED = "ignored"        # decoded, but nothing to publish in this phase
    MALFORMED = "malformed"    # not a valid message, state unchanged
    REJECTED = "rejected"      # shape mismatch, session awaits topology again
    DISCARDED = "discarded"    # source is stopping, nothing published


@dataclass(frozen=True)
class SessionState:
    subject_name: str = DEFAULT_SUBJECT_NAME
    needs_topology: bool = True
    # -1 until the first skeleton is accepted
    bone_count: int = -1
    curve_count: int = -1

    @classmethod
    def start(cls, subject_name=DEFAULT_SUBJECT_NAME) -> "SessionState":
        return cls(subject_name=subject_name)

    @property
    def phase(self) -> SessionPhase:
        if self.needs_topology:
            return SessionPhase.AWAITING_TOPOLOGY
        return SessionPhase.ACTIVE

    def accept_topology(self, topology) -> "SessionState":
        return replace(self, needs_topology=False,
                       bone_count=topology.num_bones, curve_count=topology.num_curves)

    def invalidate(self) -> "SessionState":
        return replace(self, needs_topology=True)


def _publish(publish, *args):
    # Fire-and-forget: a failing consumer must not take the listener down
    try:
        publish(*args)
    except Exception as e:
        logger.warning(f"[Session] Publisher raised {type(e).__name__}: {e}")


def process_message(state, data, publisher, source_id, is_stopping=None, scale=TRANSFORM_SCALE):
    """
    Decode one message and publish what it carried.

    Args:
        state: Current SessionState
        data: One complete message (bytes or str)
        publisher: Publisher receiving topologies and frames
        source_id: Identity of the source the message arrived on
        is_stopping: Optional callable; when it returns True after decoding,
            the result is discarded instead of published
        scale: Unit scale applied to positions

    Returns:
        Tuple of (next SessionState, ProcessOutcome)
    """
    try:
        result = decode_message(data, state, scale)
    except ShapeMismatchError as e:
        logger.debug(f"[Session] {state.subject_name}: rejected frame: {e}")
        return state.invalidate(), ProcessOutcome.REJECTED
    except DecodeError as e:
        logger.debug(f"[Session] {state.subject_name}: malformed message: {e}")
        return state, ProcessOutcome.MALFORMED

    if is_stopping is not None and is_stopping():
        return state, ProcessOutcome.DISCARDED

    if state.needs_topology:
        if result.topology is None:
            return state, ProcessOutcome.IGNORED
        _publish(publisher.publish_topology, source_id, state.subject_name, result.topology)
        logger.info(f"[Session] {state.subject_name}: skeleton with "
                    f"{result.topology.num_bones} bones, {result.topology.num_curves} curves")
        return state.accept_topology(result.topology), ProcessOutcome.TOPOLOGY

    if result.pose is None:
        return state, ProcessOutcome.IGNORED
    _publish(publisher.publish_frame, source_id, state.subject_name, result.pose)
    return state, ProcessOutcome.FRAME
