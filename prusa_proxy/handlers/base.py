"""
Base Handler
============

Digest-authenticated HTTP plumbing shared by printer handlers.
"""

import logging
from typing import Optional

import requests
from requests.auth import HTTPDigestAuth

from ..config import DEFAULT_TIMEOUT
from ..errors import PrinterConnectionError, PrinterResponseError
from ..models import PrinterRecord

logger = logging.getLogger(__name__)


def is_success(status_code: int) -> bool:
    """2xx is success for every verb."""
    return 200 <= status_code < 300


class BaseHandler:
    """HTTP client bound to one printer's address and credentials."""

    def __init__(self, printer: PrinterRecord, timeout: Optional[float] = DEFAULT_TIMEOUT):
        """Initialize handler with printer configuration."""
        self.printer = printer
        self.timeout = timeout

    @property
    def base_url(self) -> str:
        return f'http://{self.printer.address}'

    def _auth(self) -> HTTPDigestAuth:
        return HTTPDigestAuth(self.printer.username, self.printer.password)

    def _check(self, method: str, url: str, response: requests.Response) -> requests.Response:
        """Log the response and raise on anything outside 2xx."""
        logger.debug('%s %s -> %s %s', method, url, response.status_code, response.reason)
        logger.debug('Response body: %s', response.text)

        if not is_success(response.status_code):
            logger.info('%s request to %s failed: %s %s',
                        method, url, response.status_code, response.reason)
            raise PrinterResponseError(response.status_code, response.reason or '')
        return response

    def get(self, url: str) -> bytes:
        """
        GET with digest auth.

        Returns:
            Raw response body
        """
        try:
            response = requests.get(url, auth=self._auth(), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PrinterConnectionError(f'GET {url} failed: {e}')

        return self._check('GET', url, response).content

    def put(self, url: str) -> requests.Response:
        """PUT an empty JSON object with digest auth."""
        try:
            response = requests.put(
                url,
                data=b'{}',
                headers={'Content-Type': 'application/json'},
                auth=self._auth(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise PrinterConnectionError(f'PUT {url} failed: {e}')

        # PrusaLink answers job commands with 204; a plain 200 is only noted.
        if response.status_code == 200:
            logger.info('PUT %s returned 200, expected 204 No Content', url)

        return self._check('PUT', url, response)

    def delete(self, url: str) -> requests.Response:
        """DELETE with digest auth, no body."""
        try:
            response = requests.delete(url, auth=self._auth(), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PrinterConnectionError(f'DELETE {url} failed: {e}')

        return self._check('DELETE', url, response)
