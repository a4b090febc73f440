"""
LiveLinkSource - one live connection from Houdini to a consumer.

The source owns a background thread that pulls messages from its
transport, runs them through the session state machine and publishes the
decoded skeleton and poses to the attached client.
"""

import itertools
import threading
import uuid

from .config import SourceConfig
from .errors import EndpointParseError, TransportError
from .session import ProcessOutcome, SessionState, process_message
from .transport import make_transport
from .utils.logger import logger


SOURCE_TYPE = "Houdini LiveLink"

STATUS_DEVICE_NOT_FOUND = "Device Not Found"
STATUS_RECEIVING = "Receiving"
STATUS_STOPPED = "Stopped"
STATUS_FAILED = "Listener Failed"

_thread_index = itertools.count()


class LiveLinkSource:
    """
    Receives Houdini skeleton data in a background thread and publishes it.

    The data flow:
    1. The transport delivers one message per cycle (UDP datagram or HTTP body)
    2. The message is decoded and validated against the session state
    3. The first valid skeleton is published with publish_topology()
    4. Every following pose is published with publish_frame()
    5. A pose that does not match the skeleton sends the session back to 1-3

    Example usage:
        client = LatestFrameClient()
        source = LiveLinkSource(SourceConfig(port=8010, refresh_rate=60))
        source.receive_client(client)

        while running:
            frame = client.get_latest_frame()
            ...

        source.request_source_shutdown()
    """

    def __init__(self, config=None, transport=None, join_timeout=None):
        """
        Initialize the source. Nothing is opened until a client is attached.

        Args:
            config: SourceConfig (defaults to 127.0.0.1:8010 over UDP at 60 Hz)
            transport: Transport to use instead of the one config asks for
            join_timeout: Longest request_source_shutdown() waits for the
                listener thread (None waits until it exits)
        """
        self.config = config if config is not None else SourceConfig()
        self.transport = transport if transport is not None else make_transport(self.config)
        self.join_timeout = join_timeout

        self.client = None
        self.source_id = None
        self.thread = None
        self.stop_event = threading.Event()
        self.lock = threading.Lock()
        self._session = SessionState.start(self.config.subject_name)

        self.status = STATUS_DEVICE_NOT_FOUND
        self.source_type = SOURCE_TYPE
        self.source_machine_name = self.config.host
        self.last_outcome = None
        self.transport_errors = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.request_source_shutdown()

    @property
    def session(self):
        """Current SessionState."""
        with self.lock:
            return self._session

    def receive_client(self, client, source_id=None):
        """
        Attach the consumer and start receiving.

        Args:
            client: Publisher that receives topologies and frames
            source_id: Identity of this source for the client (default: new uuid4)

        Returns:
            True if the listener is running
        """
        self.client = client
        self.source_id = source_id if source_id is not None else str(uuid.uuid4())
        return self.start()

    def start(self):
        """Open the transport and start the listener thread."""
        if self.thread is not None:
            if not self.thread.is_alive():
                # Listener died on its own; release what it held before reopening
                self.thread = None
                self.transport.stop()
            elif self.stop_event.is_set():
                logger.warning(f"[LiveLinkSource] {self.thread.name} is still shutting down, "
                               f"not restarting")
                return False
            else:
                return True
        if self.client is None:
            raise RuntimeError("No client attached, call receive_client() first")

        self.stop_event.clear()
        with self.lock:
            self._session = SessionState.start(self.config.subject_name)

        try:
            self.transport.start()
        except TransportError as e:
            # Unrecoverable: nothing to listen on
            logger.error(f"[LiveLinkSource] {e}")
            self.status = STATUS_DEVICE_NOT_FOUND
            return False

        self.thread = threading.Thread(
            target=self._run, name=f"Houdini Live Link {next(_thread_index)}", daemon=True)
        self.status = STATUS_RECEIVING
        self.thread.start()
        logger.info(f"[LiveLinkSource] Receiving '{self.config.subject_name}' "
                    f"from {self.config.endpoint} over {self.config.transport}")
        return True

    def is_source_still_valid(self):
        """True while the listener thread runs and no shutdown was requested."""
        thread = self.thread
        return not self.stop_event.is_set() and thread is not None and thread.is_alive()

    def request_source_shutdown(self):
        """
        Stop the listener, wait for it to exit, then release the transport.

        Returns:
            True once the source is stopped
        """
        self.stop_event.set()
        thread = self.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(self.join_timeout)
            if thread.is_alive():
                # Still inside a publish call; closing the transport under it is unsafe
                logger.warning(f"[LiveLinkSource] {thread.name} did not exit "
                               f"within {self.join_timeout}s")
                self.status = STATUS_STOPPED
                return True

        self.thread = None
        self.transport.stop()
        with self.lock:
            self._session = self._session.invalidate()
        if self.status != STATUS_STOPPED:
            logger.info("[LiveLinkSource] Stopped")
        self.status = STATUS_STOPPED
        return True

    def _run(self):
        """Background thread: receive, decode, publish until stopped."""
        try:
            while not self.stop_event.is_set():
                try:
                    payload = self.transport.receive_or_poll(self.session.needs_topology)
                except TransportError as e:
                    self.transport_errors += 1
                    logger.debug(f"[LiveLinkSource] Missed cycle: {e}")
                    payload = None

                if payload is not None:
                    self._handle(payload)

                if self.transport.period > 0:
                    self.stop_event.wait(self.transport.period)
        except Exception:
            logger.exception(f"[LiveLinkSource] Listener for '{self.config.subject_name}' failed")
            self.status = STATUS_FAILED

    def _handle(self, payload):
        state = self.session
        new_state, outcome = process_message(
            state, payload, self.client, self.source_id,
            is_stopping=self.stop_event.is_set,
            scale=self.config.transform_scale,
        )
        with self.lock:
            self._session = new_state
        self.last_outcome = outcome

        if outcome is ProcessOutcome.REJECTED and not state.needs_topology:
            logger.warning(f"[LiveLinkSource] '{state.subject_name}': pose does not match "
                           f"the skeleton, requesting it again")
        elif outcome is ProcessOutcome.MALFORMED:
            logger.debug(f"[LiveLinkSource] Dropped malformed message ({len(payload)} bytes)")


def create_source(connection_string, refresh_rate=60.0, transport="udp", **kwargs):
    """
    Create a source from a "host:port" connection string.

    Args:
        connection_string: Houdini endpoint, e.g. "127.0.0.1:8010"
        refresh_rate: Updates per second
        transport: "udp" or "http"
        **kwargs: Any other SourceConfig field

    Returns:
        LiveLinkSource, or None if the connection string is invalid
    """
    try:
        config = SourceConfig.from_connection_string(
            connection_string, refresh_rate=refresh_rate, transport=transport, **kwargs)
    except EndpointParseError as e:
        logger.error(f"[LiveLinkSource] {e}")
        return None
    return LiveLinkSource(config)
