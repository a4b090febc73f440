"""
Transports a LiveLink source can receive Houdini messages over.

    - UdpTransport: Houdini pushes datagrams to a bound port
    - HttpTransport: the source polls Houdini's HTTP server
"""

from .base import Transport
from .udp import UdpTransport
from .http import HttpTransport, SKELETON_PATH, SKELETON_POSE_PATH


def make_transport(config):
    """
    Build the transport a SourceConfig asks for.

    Raises:
        ValueError: On an unknown transport name
    """
    if config.transport == "udp":
        return UdpTransport(host=config.host, port=config.port,
                            recv_timeout=config.recv_timeout,
                            buffer_size=config.recv_buffer_size,
                            socket_buffer_size=config.socket_buffer_size)
    if config.transport == "http":
        return HttpTransport(config.url, period=config.update_period,
                             timeout=config.request_timeout)
    raise ValueError(f"Unknown transport: {config.transport}")


__all__ = [
    "Transport",
    "UdpTransport",
    "HttpTransport",
    "SKELETON_PATH",
    "SKELETON_POSE_PATH",
    "make_transport",
]
