"""
Prusa Proxy Client
==================

Python SDK for scripting a running prusa_proxy.

Usage:
    from prusa_proxy.client import ProxyClient

    client = ProxyClient('http://localhost:31100')

    # One printer
    result = client.pause('192.168.1.20')
    if not result['success']:
        print(result['error'])

    # Every printer
    print(client.stop_all()['report'])
"""

import requests
from typing import Dict, Any, List


class ProxyClient:
    """Client for prusa_proxy."""

    def __init__(self, base_url: str = 'http://localhost:31100', timeout: float = 30):
        """
        Initialize client.

        Args:
            base_url: Base URL of the proxy
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, data: Dict = None) -> requests.Response:
        url = f'{self.base_url}{endpoint}'
        if method == 'GET':
            return requests.get(url, timeout=self.timeout)
        if method == 'POST':
            return requests.post(url, json=data, timeout=self.timeout)
        raise ValueError(f'Unknown method: {method}')

    def _call(self, method: str, endpoint: str, data: Dict = None) -> Dict[str, Any]:
        """Make API request, folding transport errors into the result."""
        try:
            response = self._request(method, endpoint, data)
        except requests.exceptions.Timeout:
            return {'success': False, 'status_code': None, 'error': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'success': False, 'status_code': None,
                    'error': f'Cannot connect to {self.base_url}'}

        result = {'success': response.status_code == 200, 'status_code': response.status_code}
        if not result['success']:
            result['error'] = response.text.strip()
        return result

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check proxy health."""
        try:
            return self._request('GET', '/health').json()
        except (requests.exceptions.RequestException, ValueError) as e:
            return {'status': 'offline', 'error': str(e)}

    def is_online(self) -> bool:
        return self.health().get('status') == 'online'

    # =========================================================================
    # Single Printer
    # =========================================================================

    def pause(self, ip: str) -> Dict[str, Any]:
        """Pause the active job on a printer."""
        return self._call('POST', '/pause', {'ip': ip})

    def resume(self, ip: str) -> Dict[str, Any]:
        """Resume the paused job on a printer."""
        return self._call('POST', '/resume', {'ip': ip})

    def stop(self, ip: str) -> Dict[str, Any]:
        """Stop the active job on a printer."""
        return self._call('POST', '/stop', {'ip': ip})

    # =========================================================================
    # All Printers
    # =========================================================================

    def _all(self, operation: str) -> Dict[str, Any]:
        try:
            response = self._request('POST', f'/all/{operation}')
        except requests.exceptions.RequestException as e:
            return {'success': False, 'report': '', 'lines': [], 'error': str(e)}

        lines: List[str] = [line for line in response.text.splitlines() if line]
        return {
            'success': response.status_code == 200,
            'report': response.text,
            'lines': lines,
        }

    def pause_all(self) -> Dict[str, Any]:
        return self._all('pause')

    def resume_all(self) -> Dict[str, Any]:
        return self._all('resume')

    def stop_all(self) -> Dict[str, Any]:
        """Stop every printer; blocks until the proxy has polled them all."""
        return self._all('stop')

    # =========================================================================
    # Metrics
    # =========================================================================

    def printer_states(self) -> Dict[str, str]:
        """
        Printer states from /metrics.

        Returns:
            Mapping of printer address to state, e.g. {'192.168.1.20': 'PRINTING'}
        """
        from prometheus_client.parser import text_string_to_metric_families

        response = self._request('GET', '/metrics')
        response.raise_for_status()

        states = {}
        for family in text_string_to_metric_families(response.text):
            if family.name != 'prusa_proxy_printer_state':
                continue
            for sample in family.samples:
                states[sample.labels['printer']] = sample.labels['state']
        return states
