"""
PrusaLink Handler
=================

Job and status endpoints of the PrusaLink HTTP API (MK4, XL, Core One).
"""

import json
from typing import Any, Dict

import requests

from .base import BaseHandler
from ..config import OPERATIONS
from ..errors import PrinterDecodeError
from ..models import PrinterStatus


class PrusaLinkHandler(BaseHandler):
    """Handler for PrusaLink printers."""

    def _get_json(self, path: str) -> Dict[str, Any]:
        url = f'{self.base_url}{path}'
        body = self.get(url)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise PrinterDecodeError(f'Invalid JSON from {url}: {e}')
        if not isinstance(data, dict):
            raise PrinterDecodeError(f'Unexpected document from {url}')
        return data

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_status(self) -> PrinterStatus:
        """Fetch and decode ``/api/v1/status``."""
        data = self._get_json('/api/v1/status')
        for section in ('job', 'printer'):
            if data.get(section) is not None and not isinstance(data[section], dict):
                raise PrinterDecodeError(
                    f'Unexpected {section} section from {self.base_url}/api/v1/status'
                )
        return PrinterStatus.from_dict(data)

    def get_job_id(self) -> int:
        """Current job ID, 0 if the printer has no job."""
        return self.get_status().job.id

    def get_state(self) -> str:
        """Top-level ``state`` of ``/api/job``."""
        return str(self._get_json('/api/job').get('state') or '')

    # =========================================================================
    # Job Operations
    # =========================================================================

    def job_url(self, job_id: int, operation: str) -> str:
        """
        Build the URL for a job operation.

        Args:
            job_id: Active job ID
            operation: Key of OPERATIONS (pause, resume, stop)
        """
        segment = OPERATIONS[operation]['segment']
        return f'{self.base_url}/api/v1/job/{job_id}/{segment}'

    def run_operation(self, job_id: int, operation: str) -> requests.Response:
        """Send the operation with the verb it is registered with."""
        url = self.job_url(job_id, operation)
        if OPERATIONS[operation]['method'] == 'DELETE':
            return self.delete(url)
        return self.put(url)
