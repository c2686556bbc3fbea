"""
Print Agent Service
===================

Single owner of the agent's shared state: the printer directory cache and
the current print job. The HTTP layer talks only to this object.
"""

import platform
import socket
import time
from concurrent.futures import Executor
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import __version__
from . import config
from .cache import PrinterDirectory
from .handlers import BaseHandler, create_handler
from .jobs import PrintJobManager
from .models import PrinterInfo, PrintJob


class PrintAgent:
    """Local print agent."""

    def __init__(self, handler: BaseHandler, scratch_dir: str,
                 cache_ttl: float = 10.0,
                 enum_timeout: Optional[float] = None,
                 print_timeout: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic,
                 executor: Optional[Executor] = None):
        self.handler = handler
        self.printers = PrinterDirectory(
            handler, ttl=cache_ttl, enum_timeout=enum_timeout, clock=clock
        )
        self.jobs = PrintJobManager(
            handler, scratch_dir, print_timeout=print_timeout, executor=executor
        )

    @classmethod
    def from_config(cls) -> 'PrintAgent':
        """Create an agent from environment configuration."""
        return cls(
            create_handler(config.BACKEND or None),
            config.SCRATCH_DIR,
            cache_ttl=config.PRINTER_CACHE_TTL,
            enum_timeout=config.ENUM_TIMEOUT,
            print_timeout=config.PRINT_TIMEOUT,
        )

    def health(self) -> Dict[str, Any]:
        """Liveness check with system info."""
        return {
            'ok': True,
            'message': 'Local printer agent is running',
            'version': __version__,
            'hostname': socket.gethostname(),
            'platform': platform.system(),
            'backend': self.handler.name,
            'timestamp': datetime.now().isoformat(),
        }

    def list_printers(self, force: bool = False) -> Tuple[List[PrinterInfo], bool]:
        """Installed printers and whether they were freshly enumerated."""
        return self.printers.get_printers(force=force)

    def get_current_job(self) -> Dict[str, Any]:
        """Current print job snapshot. Never raises."""
        return self.jobs.get_current_job()

    def submit_job(self, printer_name: Any, payload: Any, copies: Any = 1) -> PrintJob:
        """Submit a print job (see PrintJobManager.submit)."""
        return self.jobs.submit(printer_name, payload, copies)

    def shutdown(self):
        self.jobs.shutdown(wait=False)
