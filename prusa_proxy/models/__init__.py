"""
Prusa Proxy Models
"""

from .printer import PrinterRecord
from .status import JobStatus, PrinterState, PrinterStatus
from .outcome import StopOutcome, StopResult

__all__ = [
    'PrinterRecord', 'JobStatus', 'PrinterState', 'PrinterStatus',
    'StopOutcome', 'StopResult',
]
