"""
CUPS Handler
============

Linux/macOS backend. Printers are enumerated with lpstat and PDFs are
submitted with lp.
"""

import logging
import os
import re
import shutil
from typing import Optional, Dict, Any, List

from .base import BaseHandler
from ..errors import EnumerationFailed, CollaboratorExecutionFailed

logger = logging.getLogger(__name__)

PRINTER_LINE_RE = re.compile(r'^printer\s+(\S+)\s+(?:is\s+|now\s+)?(\w+)')
DEFAULT_LINE_RE = re.compile(r'^system default destination:\s*(\S+)')


def parse_lpstat(output: str) -> List[Dict[str, Any]]:
    """Parse `lpstat -p -d` output into enumeration records."""
    records = []
    default = None
    for line in output.splitlines():
        match = PRINTER_LINE_RE.match(line)
        if match:
            records.append({
                'Name': match.group(1),
                'DriverName': '',
                'Default': False,
                'PrinterStatus': match.group(2),
            })
            continue
        match = DEFAULT_LINE_RE.match(line)
        if match:
            default = match.group(1)

    for record in records:
        record['Default'] = record['Name'] == default
    return records


class CupsHandler(BaseHandler):
    """Handler for CUPS printers."""

    name = 'cups'

    def __init__(self, lp: str = 'lp', lpstat: str = 'lpstat'):
        self.lp = lp
        self.lpstat = lpstat

    @property
    def executable(self) -> Optional[str]:
        return shutil.which(self.lp)

    def is_available(self) -> bool:
        return self.executable is not None

    @property
    def expected_location(self) -> str:
        return f'{self.lp} (on PATH)'

    def list_printers(self, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        """List CUPS destinations via lpstat."""
        logger.info("Enumerating printers via lpstat")
        env = dict(os.environ, LC_ALL='C')
        try:
            output = self._run(
                [self.lpstat, '-p', '-d'],
                timeout,
                EnumerationFailed,
                timeout_cls=EnumerationFailed,
                env=env,
            )
        except EnumerationFailed as e:
            if e.detail and 'No destinations' in e.detail:
                return []
            raise
        return parse_lpstat(output)

    def print_file(self, printer_name: str, file_path: str, copies: int = 1,
                   timeout: Optional[float] = None) -> str:
        """Submit a PDF to a CUPS queue."""
        args = [self.lp, '-d', printer_name, '-n', str(copies), file_path]
        logger.info("Printing %s on '%s' (%d copies) via lp", file_path, printer_name, copies)
        return self._run(args, timeout, CollaboratorExecutionFailed)
