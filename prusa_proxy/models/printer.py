"""
Printer Model
=============

Represents a configured printer.
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class PrinterRecord:
    """Address and digest credentials of a PrusaLink printer."""

    address: str
    username: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrinterRecord':
        """Create from a config file entry."""
        return cls(
            address=str(data.get('address') or ''),
            username=str(data.get('username') or ''),
            password=str(data.get('password') or ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, without the password."""
        return {
            'address': self.address,
            'username': self.username,
            'has_password': bool(self.password),
        }
