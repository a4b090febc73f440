"""
UdpTransport - Houdini pushes one JSON message per UDP datagram.
"""

import socket

from ..errors import TransportError
from ..utils.logger import logger
from .base import Transport


class UdpTransport(Transport):
    """
    Receives datagrams on a bound UDP socket.

    Each receive blocks for at most recv_timeout seconds so the listener
    can notice a shutdown request; a timeout is a normal, silent cycle.
    """

    def __init__(self, host: str = "0.0.0.0", port: int = 8010,
                 recv_timeout: float = 0.1, buffer_size: int = 64 * 1024,
                 socket_buffer_size: int = 8 * 1024 * 1024):
        """
        Args:
            host: Address to bind
            port: UDP port to listen on (0 picks a free port)
            recv_timeout: Longest a single receive may block (seconds)
            buffer_size: Largest datagram accepted; longer ones are truncated
            socket_buffer_size: Kernel receive buffer (SO_RCVBUF)
        """
        self.host = host
        self.port = port
        self.recv_timeout = recv_timeout
        self.buffer_size = buffer_size
        self.socket_buffer_size = socket_buffer_size
        self.sock = None

    @property
    def bound_port(self):
        """Port actually bound, or None when not started."""
        if self.sock is None:
            return None
        return self.sock.getsockname()[1]

    def start(self):
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, self.socket_buffer_size)
        except OSError:
            pass
        try:
            sock.bind((self.host, self.port))
        except OSError as e:
            sock.close()
            raise TransportError(f"Cannot bind UDP {self.host}:{self.port}: {e}") from e
        sock.settimeout(self.recv_timeout)
        self.sock = sock
        logger.info(f"[UdpTransport] Listening on UDP {self.host}:{self.bound_port}")

    def receive_or_poll(self, needs_topology):
        sock = self.sock
        if sock is None:
            raise TransportError("UDP transport is not started")
        try:
            data, _addr = sock.recvfrom(self.buffer_size)
        except socket.timeout:
            return None
        except OSError as e:
            raise TransportError(f"UDP receive failed: {e}") from e
        return data

    def stop(self):
        sock, self.sock = self.sock, None
        if sock is not None:
            sock.close()
