"""
Prusa Proxy Configuration
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

from .errors import ConfigurationError
from .models import PrinterRecord

# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('PRUSA_PROXY_PORT', 31100))
HOST = os.environ.get('PRUSA_PROXY_HOST', '0.0.0.0')
DEBUG = os.environ.get('PRUSA_PROXY_DEBUG', 'false').lower() == 'true'

# Printer list (YAML)
CONFIG_PATH = os.environ.get('PRUSA_PROXY_CONFIG', './prusa.yml')

# =============================================================================
# Printer Defaults
# =============================================================================

DEFAULT_TIMEOUT = int(os.environ.get('PRUSA_PROXY_TIMEOUT', 30))  # seconds

# Stop sequencing
STOP_MAX_ATTEMPTS = int(os.environ.get('PRUSA_PROXY_STOP_ATTEMPTS', 5))
STOP_POLL_INTERVAL = float(os.environ.get('PRUSA_PROXY_STOP_INTERVAL', 1.0))  # seconds
STOP_MAX_BACKOFF = float(os.environ.get('PRUSA_PROXY_STOP_MAX_BACKOFF', 8.0))  # seconds

# =============================================================================
# Supported Job Operations
# =============================================================================

OPERATIONS = {
    'pause': {
        'segment': 'pause',
        'method': 'PUT',
        'past': 'paused',
    },
    'resume': {
        'segment': 'resume',
        'method': 'PUT',
        'past': 'resumed',
    },
    'stop': {
        'segment': '',  # DELETE /api/v1/job/{id}/
        'method': 'DELETE',
        'past': 'stopped',
    },
}

# =============================================================================
# Printer List
# =============================================================================


@dataclass(frozen=True)
class ProxyConfig:
    """Printers the proxy is allowed to talk to, in configured order."""

    printers: List[PrinterRecord] = field(default_factory=list)

    def find(self, address: str) -> Optional[PrinterRecord]:
        """Get the record for an address, or None."""
        for printer in self.printers:
            if printer.address == address:
                return printer
        return None

    def get_username(self, address: str) -> str:
        printer = self.find(address)
        return printer.username if printer else ''

    def get_password(self, address: str) -> str:
        printer = self.find(address)
        return printer.password if printer else ''


def load_config(path: str) -> ProxyConfig:
    """
    Load the printer list from a YAML file.

    Expected layout:

        printers:
          - address: 192.168.1.20
            username: maker
            password: secret

    Raises:
        ConfigurationError: file missing, unreadable or malformed
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f'Configuration file does not exist: {path}')
    except OSError as e:
        raise ConfigurationError(f'Cannot read configuration file {path}: {e}')
    except yaml.YAMLError as e:
        raise ConfigurationError(f'Invalid YAML in configuration file {path}: {e}')

    if data is None:
        return ProxyConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f'Configuration file {path} must contain a mapping')

    raw_printers = data.get('printers') or []
    if not isinstance(raw_printers, list):
        raise ConfigurationError("'printers' must be a list")

    printers = []
    seen = set()
    for index, entry in enumerate(raw_printers):
        if not isinstance(entry, dict) or not entry.get('address'):
            raise ConfigurationError(f'Printer #{index + 1} has no address')

        printer = PrinterRecord.from_dict(entry)
        if printer.address in seen:
            raise ConfigurationError(f'Duplicate printer address: {printer.address}')
        seen.add(printer.address)
        printers.append(printer)

    return ProxyConfig(printers=printers)
