"""
HttpTransport - the bridge polls Houdini's LiveLink HTTP server.

While the session waits for a skeleton it requests /get_skeleton, and once
the skeleton is established /get_skeleton_pose, once per update period.
"""

import urllib.error
import urllib.request

from ..errors import TransportError
from ..utils.logger import logger
from .base import Transport


SKELETON_PATH = "/get_skeleton"
SKELETON_POSE_PATH = "/get_skeleton_pose"


class HttpTransport(Transport):
    """
    Issues one GET per cycle and returns the response body.

    A failed request (connection error, timeout, non-2xx status) raises
    TransportError; the listener counts it as a missed cycle and retries on
    the next one.
    """

    def __init__(self, base_url: str, period: float = 0.1, timeout: float = 1.0,
                 opener=urllib.request.urlopen):
        """
        Args:
            base_url: Houdini server, e.g. "http://127.0.0.1:8010"
            period: Seconds between two requests
            timeout: Per-request timeout in seconds
            opener: urlopen-compatible callable
        """
        self.base_url = base_url.rstrip("/")
        self.period = period
        self.timeout = timeout
        self.opener = opener
        self.request_count = 0

    def start(self):
        logger.info(f"[HttpTransport] Polling {self.base_url} every {self.period:.3f}s")

    def url_for(self, needs_topology):
        path = SKELETON_PATH if needs_topology else SKELETON_POSE_PATH
        return self.base_url + path

    def receive_or_poll(self, needs_topology):
        req = urllib.request.Request(self.url_for(needs_topology), method="GET",
                                     headers={"Content-Type": "application/json"})
        self.request_count += 1
        try:
            with self.opener(req, timeout=self.timeout) as resp:
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    raise TransportError(f"{req.full_url} returned HTTP {status}")
                return resp.read()
        except urllib.error.HTTPError as e:
            raise TransportError(f"{req.full_url} returned HTTP {e.code}") from e
        except (urllib.error.URLError, OSError, ValueError) as e:
            raise TransportError(f"{req.full_url} failed: {e}") from e

    def stop(self):
        pass
