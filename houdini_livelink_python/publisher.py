"""
Publisher - the boundary between the bridge and whatever consumes its data.

A LiveLink source pushes every decoded skeleton and pose through a
Publisher, keyed by (source id, subject name). Calls arrive on the
source's listener thread, so implementations must be thread-safe.
"""

import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from typing import NamedTuple


class SubjectKey(NamedTuple):
    source_id: str
    subject_name: str


class Publisher(ABC):
    """Consumer of skeleton topologies and pose frames."""

    @abstractmethod
    def publish_topology(self, source_id, subject_name, topology):
        """Called once each time a source (re)establishes its skeleton."""

    @abstractmethod
    def publish_frame(self, source_id, subject_name, pose):
        """Called for every pose decoded while the skeleton is established."""


class LatestFrameClient(Publisher):
    """
    In-process consumer that keeps the latest skeleton and frames per subject.

    Example usage:
        client = LatestFrameClient()
        source = create_source("127.0.0.1:8010")
        source.receive_client(client)

        while running:
            frame = client.get_latest_frame()
            if frame:
                topology = client.get_topology(frame["subject"])
                print(f"{frame['subject']}: {frame['pose'].num_bones} bones")

        source.request_source_shutdown()

    Frame format:
        {
            "subject": SubjectKey,   # (source_id, subject_name)
            "frame_idx": int,        # Per-subject frame counter
            "timestamp": float,      # time.time() when published
            "pose": PoseFrame,
        }
    """

    def __init__(self, max_frames: int = 4):
        self.lock = threading.Lock()
        self.topologies = {}
        self.ready_frames = deque(maxlen=max_frames)
        self.frame_counts = {}
        self.recv_count = 0
        self.last_rate_time = time.time()
        self.recv_rate_hz = 0.0

    def reset(self):
        """Reset all internal state and buffers."""
        with self.lock:
            self.topologies.clear()
            self.ready_frames.clear()
            self.frame_counts.clear()
            self.recv_count = 0
            self.recv_rate_hz = 0.0

    def publish_topology(self, source_id, subject_name, topology):
        key = SubjectKey(source_id, subject_name)
        with self.lock:
            self.topologies[key] = topology
            # Frames decoded against the previous skeleton are stale now
            self.ready_frames = deque(
                (f for f in self.ready_frames if f["subject"] != key),
                maxlen=self.ready_frames.maxlen)

    def publish_frame(self, source_id, subject_name, pose):
        key = SubjectKey(source_id, subject_name)
        now = time.time()
        with self.lock:
            frame_idx = self.frame_counts.get(key, 0)
            self.frame_counts[key] = frame_idx + 1
            self.ready_frames.append({
                "subject": key,
                "frame_idx": frame_idx,
                "timestamp": now,
                "pose": pose,
            })

            self.recv_count += 1
            dt = now - self.last_rate_time
            if dt >= 1.0:
                self.recv_rate_hz = self.recv_count / dt
                self.recv_count = 0
                self.last_rate_time = now

    def get_latest_frame(self, subject=None):
        """
        Get the most recent frame, clearing older frames.

        Args:
            subject: Optional SubjectKey; only that subject's frames are
                considered and cleared

        Returns:
            Frame dict if available, None otherwise.
        """
        with self.lock:
            if subject is None:
                if not self.ready_frames:
                    return None
                frame = self.ready_frames.pop()
                self.ready_frames.clear()
                return frame

            matching = [f for f in self.ready_frames if f["subject"] == subject]
            if not matching:
                return None
            self.ready_frames = deque(
                (f for f in self.ready_frames if f["subject"] != subject),
                maxlen=self.ready_frames.maxlen)
            return matching[-1]

    def get_topology(self, subject):
        """Latest skeleton published for subject, or None."""
        with self.lock:
            return self.topologies.get(subject)

    def subjects(self):
        """Keys of all subjects that published a skeleton."""
        with self.lock:
            return list(self.topologies)

    def get_receive_rate(self):
        """
        Get the current frame rate.

        Returns:
            Publish rate in Hz (frames per second)
        """
        return self.recv_rate_hz
