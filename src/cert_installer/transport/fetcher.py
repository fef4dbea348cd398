"""HTTPS download of credential material."""

import logging
import math
from typing import Optional

import httpx

from ..config.settings import DEFAULT_TIMEOUT
from ..core.errors import EmptyResponseError, HttpStatusError, NetworkError

logger = logging.getLogger(__name__)


class RemoteFetcher:
    """Downloads a byte blob with bounded timeouts and no retries."""

    def __init__(
        self,
        connect_timeout: float = DEFAULT_TIMEOUT,
        read_timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize fetcher.

        Args:
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            http_client: Optional HTTP client to use (not closed by the fetcher)
        """
        for name, value in (("connect_timeout", connect_timeout), ("read_timeout", read_timeout)):
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be positive and finite, got {value}")

        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self._http_client = http_client

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.read_timeout,
            connect=self.connect_timeout,
            read=self.read_timeout,
        )

    def fetch(self, url: str) -> bytes:
        """Download ``url`` and return the response body.

        Raises:
            HttpStatusError: On a non-2xx response
            EmptyResponseError: On a zero-length body
            NetworkError: On transport failure
        """
        logger.debug("Downloading %s", url)
        try:
            if self._http_client is not None:
                response = self._http_client.get(
                    url, timeout=self.timeout, follow_redirects=True
                )
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"Download from {url} failed: {e}") from e

        if not response.is_success:
            raise HttpStatusError(response.status_code, url)

        content = response.content
        if not content:
            raise EmptyResponseError(url)

        logger.debug("Downloaded %d bytes from %s", len(content), url)
        return content
