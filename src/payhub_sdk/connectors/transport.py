"""HTTP transports used by the PayHub connector."""

import logging
from abc import ABC, abstractmethod
from typing import Dict

import requests

from ..exceptions import NetworkError, ResponseError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class Transport(ABC):
    """
    Performs a single blocking POST.

    Implementations return the raw body for a 2xx answer, raise
    ResponseError (carrying the body) for any other status and raise
    NetworkError when no response was received at all.
    """

    @abstractmethod
    def post(self, url: str, body: str, headers: Dict[str, str]) -> str:
        raise NotImplementedError


class RequestsTransport(Transport):
    """Transport backed by ``requests``. Retry policy is left to the caller."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def post(self, url: str, body: str, headers: Dict[str, str]) -> str:
        try:
            resp = requests.post(url, data=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Network error calling {url}: {e}")
            raise NetworkError(f"Network error: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise ResponseError(resp.status_code, resp.text)

        return resp.text
