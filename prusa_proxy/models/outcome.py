"""
Stop Outcome Model
==================

Result of stopping one printer during ``/all/stop``.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List


class StopOutcome(str, Enum):
    STOPPED = "stopped"
    STILL_STOPPING = "still_stopping"
    FAILED = "failed"


@dataclass
class StopResult:
    """Outcome and report lines for one printer."""

    address: str
    outcome: StopOutcome = StopOutcome.FAILED
    attempts: int = 0
    lines: List[str] = field(default_factory=list)

    def emit(self, line: str):
        """Append a report line."""
        self.lines.append(line)

    def finish(self, outcome: StopOutcome) -> 'StopResult':
        self.outcome = outcome
        return self
