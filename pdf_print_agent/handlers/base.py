"""
Base Handler
============

Abstract base class for print backends. A backend knows how to enumerate
the installed printers and how to hand a PDF file to the OS for printing.
"""

import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Union, Type

from ..errors import PrintAgentError, CollaboratorTimeout

logger = logging.getLogger(__name__)

PrinterRecords = Union[Dict[str, Any], List[Dict[str, Any]], None]


class BaseHandler(ABC):
    """Abstract base class for print backends."""

    name = 'base'

    @property
    @abstractmethod
    def executable(self) -> Optional[str]:
        """Resolved path of the program used for printing, None if unknown."""

    @property
    def expected_location(self) -> str:
        """Where the print program is expected, for error messages."""
        return self.executable or self.name

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the print program is installed where expected."""

    @abstractmethod
    def list_printers(self, timeout: Optional[float] = None) -> PrinterRecords:
        """
        Enumerate installed printers.

        Returns:
            A record or list of records with Name, DriverName, Default and
            PrinterStatus keys. None or an empty list when no printers exist.

        Raises:
            EnumerationFailed: the enumeration command could not run
            MalformedEnumerationOutput: its output could not be parsed
        """

    @abstractmethod
    def print_file(self, printer_name: str, file_path: str, copies: int = 1,
                   timeout: Optional[float] = None) -> str:
        """
        Print a PDF file silently.

        Returns:
            Output of the print program

        Raises:
            CollaboratorExecutionFailed: the print program failed
            CollaboratorTimeout: the print program did not finish in time
        """

    def _run(self, args: List[str], timeout: Optional[float],
             error_cls: Type[PrintAgentError],
             timeout_cls: Type[PrintAgentError] = CollaboratorTimeout,
             env: Optional[Dict[str, str]] = None) -> str:
        """Run a command, returning stdout or raising error_cls with its diagnostics."""
        kwargs: Dict[str, Any] = {}
        if env is not None:
            kwargs['env'] = env
        if sys.platform == 'win32':
            kwargs['creationflags'] = subprocess.CREATE_NO_WINDOW

        logger.debug("Running command: %s", subprocess.list2cmdline(args))
        try:
            proc = subprocess.run(
                args, capture_output=True, text=True, errors='replace', timeout=timeout, **kwargs
            )
        except subprocess.TimeoutExpired:
            raise timeout_cls(detail=f'{args[0]} did not finish within {timeout:g} seconds')
        except OSError as e:
            raise error_cls(detail=str(e))

        stderr = (proc.stderr or '').strip()
        if proc.returncode != 0:
            detail = stderr or (proc.stdout or '').strip() or f'{args[0]} exited with status {proc.returncode}'
            raise error_cls(detail=detail)

        if stderr:
            logger.warning("%s stderr: %s", args[0], stderr)
        return proc.stdout or ''
