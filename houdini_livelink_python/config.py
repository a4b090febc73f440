"""
Source configuration.

A SourceConfig is what the LiveLink source needs to open a connection to
Houdini: the endpoint, the refresh rate and the subject name. It is either
built directly or parsed from a "host:port" connection string.
"""

from dataclasses import dataclass

from .errors import EndpointParseError
from .utils.coord_utils import TRANSFORM_SCALE


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8010
DEFAULT_REFRESH_RATE = 60.0
DEFAULT_SUBJECT_NAME = "Houdini Subject"

# Sleep time between updates when no usable refresh rate is given
FALLBACK_UPDATE_PERIOD = 0.1

TRANSPORTS = ("udp", "http")


@dataclass(frozen=True)
class SourceConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    # Frames per second; <= 0 falls back to FALLBACK_UPDATE_PERIOD
    refresh_rate: float = DEFAULT_REFRESH_RATE
    subject_name: str = DEFAULT_SUBJECT_NAME
    # "udp" (Houdini pushes datagrams) or "http" (we poll Houdini)
    transport: str = "udp"
    # UDP: how long a receive may block before checking for shutdown
    recv_timeout: float = 0.1
    recv_buffer_size: int = 64 * 1024
    # Kernel receive buffer, large enough to absorb bursts
    socket_buffer_size: int = 8 * 1024 * 1024
    # HTTP: per-request timeout
    request_timeout: float = 1.0
    # Houdini units to receiver units for positions
    transform_scale: float = TRANSFORM_SCALE

    def __post_init__(self):
        if self.transport not in TRANSPORTS:
            raise ValueError(f"Unknown transport: {self.transport}. "
                             f"Supported: {list(TRANSPORTS)}")
        if not 0 <= int(self.port) <= 65535:
            raise ValueError(f"Port out of range: {self.port}")
        if not self.subject_name:
            object.__setattr__(self, "subject_name", DEFAULT_SUBJECT_NAME)

    @property
    def update_period(self) -> float:
        """Seconds between two updates."""
        if self.refresh_rate and self.refresh_rate > 0.0:
            return 1.0 / self.refresh_rate
        return FALLBACK_UPDATE_PERIOD

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_connection_string(cls, connection_string: str, **kwargs) -> "SourceConfig":
        """
        Build a config from a "host:port" connection string.

        Args:
            connection_string: Endpoint, e.g. "127.0.0.1:8010"
            **kwargs: Any other SourceConfig field

        Raises:
            EndpointParseError: If the endpoint cannot be parsed
        """
        host, port = parse_endpoint(connection_string)
        return cls(host=host, port=port, **kwargs)


def parse_endpoint(connection_string: str):
    """
    Parse "host:port" into (host, port).

    Raises:
        EndpointParseError: On a missing host or port, or a port that is not
            an integer in [0, 65535]
    """
    if not isinstance(connection_string, str):
        raise EndpointParseError(f"Endpoint must be a string, got {type(connection_string).__name__}")
    host, sep, port_str = connection_string.strip().rpartition(":")
    if not sep or not host:
        raise EndpointParseError(f"Expected host:port, got '{connection_string}'")
    try:
        port = int(port_str)
    except ValueError:
        raise EndpointParseError(f"Invalid port in '{connection_string}'") from None
    if not 0 <= port <= 65535:
        raise EndpointParseError(f"Port out of range in '{connection_string}'")
    return host, port
