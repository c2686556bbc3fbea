"""
Printer Model
=============

One printer as reported by the operating system.
"""

from dataclasses import dataclass
from typing import Dict, Any


def _text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


@dataclass(frozen=True)
class PrinterInfo:
    """Installed printer, rebuilt on every enumeration."""

    name: str
    driver: str = ''
    is_default: bool = False
    status: str = ''

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'PrinterInfo':
        """
        Create from an enumeration record.

        Records use the OS field names (Name, DriverName, Default,
        PrinterStatus). Absent fields become empty strings or False and every
        string is trimmed.
        """
        return cls(
            name=_text(record.get('Name')),
            driver=_text(record.get('DriverName')),
            is_default=bool(record.get('Default') or False),
            status=_text(record.get('PrinterStatus')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'driver': self.driver,
            'isDefault': self.is_default,
            'status': self.status,
        }
