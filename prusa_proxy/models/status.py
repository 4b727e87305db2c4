"""
Status Models
=============

Snapshots of the PrusaLink ``/api/v1/status`` document.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Any


def _number(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


@dataclass
class JobStatus:
    """Active (or most recent) job on the printer."""

    id: int = 0  # 0 = no job
    progress: float = 0.0
    time_remaining: float = 0.0
    time_printing: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JobStatus':
        return cls(
            id=int(_number(data, 'id')),
            progress=_number(data, 'progress'),
            time_remaining=_number(data, 'time_remaining'),
            time_printing=_number(data, 'time_printing'),
        )


@dataclass
class PrinterState:
    """Printer section: state, temperatures, axes, flow and speed."""

    state: str = ""
    temp_bed: float = 0.0
    target_bed: float = 0.0
    temp_nozzle: float = 0.0
    target_nozzle: float = 0.0
    axis_x: float = 0.0
    axis_y: float = 0.0
    axis_z: float = 0.0
    flow: float = 0.0
    speed: float = 0.0
    fan_hotend: float = 0.0
    fan_print: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrinterState':
        values = {
            f.name: _number(data, f.name)
            for f in fields(cls) if f.name != 'state'
        }
        return cls(state=str(data.get('state') or ''), **values)

    def is_stopping(self) -> bool:
        return self.state.upper() == 'STOPPING'


@dataclass
class PrinterStatus:
    """Decoded ``/api/v1/status`` response."""

    job: JobStatus = field(default_factory=JobStatus)
    printer: PrinterState = field(default_factory=PrinterState)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrinterStatus':
        """Create from the JSON document. Missing sections decode as empty."""
        return cls(
            job=JobStatus.from_dict(data.get('job') or {}),
            printer=PrinterState.from_dict(data.get('printer') or {}),
        )
