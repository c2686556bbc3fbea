"""
SumatraPDF Handler
==================

Windows backend. Printers are enumerated through PowerShell's Get-Printer
and PDFs are printed with a bundled SumatraPDF.exe.
"""

import json
import logging
import os
from typing import Optional

from .base import BaseHandler, PrinterRecords
from ..errors import (
    EnumerationFailed,
    MalformedEnumerationOutput,
    CollaboratorExecutionFailed,
)

logger = logging.getLogger(__name__)

POWERSHELL_COMMAND = (
    'Get-Printer | Select-Object Name,DriverName,Default,PrinterStatus | ConvertTo-Json'
)


def parse_printer_json(output: str) -> PrinterRecords:
    """
    Parse ConvertTo-Json output.

    PowerShell emits a single object when exactly one printer exists and an
    array otherwise. Empty output means no printers.
    """
    if not output or not output.strip():
        return []
    try:
        return json.loads(output)
    except ValueError as e:
        logger.error("Failed to parse printer JSON: %s | output: %r", e, output)
        raise MalformedEnumerationOutput(detail=str(e))


class SumatraHandler(BaseHandler):
    """Handler for Windows printers via SumatraPDF."""

    name = 'sumatra'

    def __init__(self, sumatra_path: str, powershell: str = 'powershell'):
        self.sumatra_path = sumatra_path
        self.powershell = powershell

    @property
    def executable(self) -> Optional[str]:
        return self.sumatra_path

    def is_available(self) -> bool:
        return os.path.isfile(self.sumatra_path)

    def list_printers(self, timeout: Optional[float] = None) -> PrinterRecords:
        """List Windows printers via PowerShell."""
        logger.info("Enumerating printers via PowerShell")
        output = self._run(
            [self.powershell, '-NoProfile', '-NonInteractive',
             '-ExecutionPolicy', 'Bypass', '-Command', POWERSHELL_COMMAND],
            timeout,
            EnumerationFailed,
            timeout_cls=EnumerationFailed,
        )
        return parse_printer_json(output)

    def print_file(self, printer_name: str, file_path: str, copies: int = 1,
                   timeout: Optional[float] = None) -> str:
        """Print a PDF silently with SumatraPDF and exit."""
        args = [
            self.sumatra_path,
            '-print-to', printer_name,
            '-print-settings', f'copies={copies}',
            '-silent',
            '-exit-on-print',
            file_path,
        ]
        logger.info("Printing %s on '%s' (%d copies) via SumatraPDF", file_path, printer_name, copies)
        return self._run(args, timeout, CollaboratorExecutionFailed)
