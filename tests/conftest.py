import pathlib
import sys
import time

import pytest

# Ensure project root is on PYTHONPATH for local test invocation
ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from houdini_livelink_python.publisher import Publisher


class RecordingPublisher(Publisher):
    """Publisher that records every call."""

    def __init__(self):
        self.topologies = []
        self.frames = []

    def publish_topology(self, source_id, subject_name, topology):
        self.topologies.append((source_id, subject_name, topology))

    def publish_frame(self, source_id, subject_name, pose):
        self.frames.append((source_id, subject_name, pose))


def wait_for(predicate, timeout=2.0, interval=0.005):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def publisher():
    return RecordingPublisher()
