import json
import socket
import threading

from conftest import RecordingPublisher, wait_for

from houdini_livelink_python.config import SourceConfig
from houdini_livelink_python.errors import TransportError
from houdini_livelink_python.publisher import LatestFrameClient, SubjectKey
from houdini_livelink_python.session import ProcessOutcome, SessionPhase
from houdini_livelink_python.source import (
    STATUS_DEVICE_NOT_FOUND,
    STATUS_FAILED,
    STATUS_RECEIVING,
    STATUS_STOPPED,
    LiveLinkSource,
    create_source,
)
from houdini_livelink_python.transport import Transport, UdpTransport

HANDSHAKE = b'{"names":["root","hip"],"parents":[null,0]}'
POSE = b'{"positions":[[1,2,3],[4,5,6]]}'


class ScriptedTransport(Transport):
    """Hands out queued payloads, one per cycle; entries may be exceptions."""

    period = 0.001

    def __init__(self, payloads=(), fail_start=False):
        self.payloads = list(payloads)
        self.fail_start = fail_start
        self.lock = threading.Lock()
        self.requests = []
        self.started = False
        self.stopped = False

    def start(self):
        if self.fail_start:
            raise TransportError("port in use")
        self.started = True

    def receive_or_poll(self, needs_topology):
        assert not self.stopped, "receive after stop"
        with self.lock:
            self.requests.append(needs_topology)
            if not self.payloads:
                return None
            item = self.payloads.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def stop(self):
        self.stopped = True

    def drained(self):
        with self.lock:
            return not self.payloads


def make_source(payloads=(), **kwargs):
    transport = ScriptedTransport(payloads, **kwargs)
    return LiveLinkSource(SourceConfig(subject_name="Arm"), transport=transport), transport


def test_handshake_then_pose():
    source, transport = make_source([HANDSHAKE, POSE])
    client = LatestFrameClient()
    assert source.receive_client(client, source_id="src")
    try:
        assert source.status == STATUS_RECEIVING
        assert wait_for(lambda: client.get_topology(SubjectKey("src", "Arm")) is not None)
        assert wait_for(lambda: len(client.ready_frames) > 0)
        frame = client.get_latest_frame()
        assert frame["subject"] == SubjectKey("src", "Arm")
        assert frame["pose"].num_bones == 2
        assert source.session.phase is SessionPhase.ACTIVE
    finally:
        source.request_source_shutdown()


def test_requests_skeleton_until_established():
    source, transport = make_source([HANDSHAKE])
    source.receive_client(RecordingPublisher())
    try:
        assert wait_for(lambda: len(transport.requests) >= 3)
    finally:
        source.request_source_shutdown()
    assert transport.requests[0] is True
    assert transport.requests[-1] is False


def test_rejected_pose_requests_skeleton_again():
    publisher = RecordingPublisher()
    source, transport = make_source([HANDSHAKE, b'{"positions":[[1,2,3]]}'])
    source.receive_client(publisher)
    try:
        assert wait_for(lambda: source.last_outcome is ProcessOutcome.REJECTED)
        assert source.session.needs_topology
    finally:
        source.request_source_shutdown()
    assert publisher.frames == []
    assert len(publisher.topologies) == 1


def test_transport_errors_are_missed_cycles():
    publisher = RecordingPublisher()
    source, transport = make_source([TransportError("timeout"), b"garbage", HANDSHAKE, POSE])
    source.receive_client(publisher)
    try:
        assert wait_for(lambda: len(publisher.frames) == 1)
        assert source.transport_errors == 1
        assert source.is_source_still_valid()
    finally:
        source.request_source_shutdown()


def test_shutdown_joins_before_closing_transport():
    source, transport = make_source()
    source.receive_client(RecordingPublisher())
    thread = source.thread
    assert source.is_source_still_valid()

    assert source.request_source_shutdown()
    assert not thread.is_alive()
    assert transport.stopped
    assert source.status == STATUS_STOPPED
    assert not source.is_source_still_valid()
    assert source.session.needs_topology

    # A second shutdown is harmless
    assert source.request_source_shutdown()


def test_bind_failure_is_reported_as_status():
    source, transport = make_source(fail_start=True)
    assert not source.receive_client(RecordingPublisher())
    assert source.status == STATUS_DEVICE_NOT_FOUND
    assert source.thread is None
    assert not source.is_source_still_valid()


def test_context_manager_shuts_down():
    with make_source()[0] as source:
        source.receive_client(RecordingPublisher())
        thread = source.thread
    assert not thread.is_alive()
    assert source.status == STATUS_STOPPED


def test_nothing_published_after_shutdown():
    publisher = RecordingPublisher()
    entered = threading.Event()
    release = threading.Event()

    class SlowTransport(ScriptedTransport):
        def receive_or_poll(self, needs_topology):
            entered.set()
            release.wait(2.0)
            return HANDSHAKE

    transport = SlowTransport()
    source = LiveLinkSource(SourceConfig(), transport=transport)
    source.receive_client(publisher)
    assert entered.wait(2.0)

    stopper = threading.Thread(target=source.request_source_shutdown)
    stopper.start()
    assert wait_for(source.stop_event.is_set)
    release.set()
    stopper.join(2.0)

    assert publisher.topologies == []
    assert source.last_outcome is ProcessOutcome.DISCARDED


def test_create_source():
    source = create_source("127.0.0.1:9123", refresh_rate=30.0, transport="http", subject_name="Arm")
    assert source.config.port == 9123
    assert source.config.subject_name == "Arm"
    assert source.source_machine_name == "127.0.0.1"
    assert source.status == STATUS_DEVICE_NOT_FOUND
    assert source.transport.period == 1 / 30.0


def test_create_source_rejects_bad_endpoint():
    assert create_source("not an endpoint") is None


def test_udp_end_to_end():
    client = LatestFrameClient()
    source = LiveLinkSource(SourceConfig(host="127.0.0.1", port=0, recv_timeout=0.02, subject_name="Arm"))
    assert source.receive_client(client, source_id="src")
    port = source.transport.bound_port
    sender = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    key = SubjectKey("src", "Arm")
    try:
        sender.sendto(HANDSHAKE, ("127.0.0.1", port))
        assert wait_for(lambda: client.get_topology(key) is not None)

        pose = json.dumps({"positions": [[1, 2, 3], [4, 5, 6]],
                           "rotations": [[0, 0, 0], [0, 0, 0]]}).encode("utf-8")
        sender.sendto(pose, ("127.0.0.1", port))
        assert wait_for(lambda: len(client.ready_frames) > 0)
        frame = client.get_latest_frame(key)
        assert list(frame["pose"].bone_transforms[1].position) == [4.0, -5.0, 6.0]
    finally:
        sender.close()
        source.request_source_shutdown()
    assert isinstance(source.transport, UdpTransport)
    assert source.transport.bound_port is None


def test_oversized_number_does_not_stop_listener():
    publisher = RecordingPublisher()
    huge = b'{"positions":[[1' + b'0' * 400 + b',0,0],[0,0,0]]}'
    nested = b'{"rotations":' + b'[' * 50000 + b']' * 50000 + b'}'
    source, transport = make_source([HANDSHAKE, huge, nested, POSE])
    source.receive_client(publisher)
    try:
        assert wait_for(lambda: len(publisher.frames) == 1)
        assert source.is_source_still_valid()
        assert source.status == STATUS_RECEIVING
        assert not source.session.needs_topology
    finally:
        source.request_source_shutdown()


def test_unexpected_error_is_reported_as_status():
    source, transport = make_source([HANDSHAKE, RuntimeError("boom")])
    source.receive_client(RecordingPublisher())
    thread = source.thread
    try:
        assert wait_for(lambda: not thread.is_alive())
        assert source.status == STATUS_FAILED
        assert not source.is_source_still_valid()
    finally:
        source.request_source_shutdown()
    assert source.status == STATUS_STOPPED
    assert transport.stopped


def test_no_restart_while_old_listener_is_stuck():
    entered = threading.Event()
    release = threading.Event()

    class BlockingPublisher(RecordingPublisher):
        def publish_topology(self, *args):
            entered.set()
            release.wait(2.0)
            super().publish_topology(*args)

    publisher = BlockingPublisher()
    transport = ScriptedTransport([HANDSHAKE])
    source = LiveLinkSource(SourceConfig(), transport=transport, join_timeout=0.05)
    source.receive_client(publisher)
    assert entered.wait(2.0)
    stuck = source.thread

    assert source.request_source_shutdown()
    assert stuck.is_alive()
    assert not transport.stopped

    assert not source.receive_client(publisher)
    assert source.thread is stuck

    release.set()
    stuck.join(2.0)
    assert source.request_source_shutdown()
    assert transport.stopped
    assert source.thread is None
