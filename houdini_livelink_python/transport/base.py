"""
Transport - how a LiveLink source gets messages from Houdini.
"""

from abc import ABC, abstractmethod


class Transport(ABC):
    """
    One way of receiving Houdini messages.

    The listener thread calls receive_or_poll() once per iteration and then
    waits `period` seconds (checking for shutdown) before the next call.
    Transports that block in receive_or_poll() use a period of 0.
    """

    period = 0.0

    @abstractmethod
    def start(self):
        """
        Acquire transport resources.

        Raises:
            TransportError: If the transport cannot be opened
        """

    @abstractmethod
    def receive_or_poll(self, needs_topology):
        """
        Return one complete message, or None if nothing arrived this cycle.

        Args:
            needs_topology: True while the session is waiting for a skeleton

        Raises:
            TransportError: If this cycle failed
        """

    @abstractmethod
    def stop(self):
        """Release transport resources. Safe to call more than once."""
