"""
Print Job Model
===============

The current (most recent) print job and its state transitions.

    idle -> queued -> printing -> success | error
              queued -> error

success and error are terminal. A new submission creates a new record.
"""

from datetime import datetime
from dataclasses import dataclass, replace
from typing import Optional, Dict, Any

from ..errors import InvalidJobTransition


class JobStatus:
    """Job states."""

    IDLE = 'idle'
    QUEUED = 'queued'
    PRINTING = 'printing'
    SUCCESS = 'success'
    ERROR = 'error'

    TERMINAL = (SUCCESS, ERROR)


@dataclass
class PrintJob:
    """Print job state."""

    # Identification
    id: Optional[int] = None
    printer_name: Optional[str] = None
    copies: int = 0

    # Status
    status: str = JobStatus.IDLE
    message: str = ''
    error: Optional[str] = None
    error_code: Optional[str] = None

    # Timestamps
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    # Document written to the scratch directory
    file_path: Optional[str] = None

    @classmethod
    def idle(cls) -> 'PrintJob':
        """Synthetic record used before the first submission."""
        return cls(message='No print job has been submitted yet.')

    @classmethod
    def queued(cls, job_id: int, printer_name: str, copies: int) -> 'PrintJob':
        """Create a freshly accepted job."""
        return cls(
            id=job_id,
            printer_name=printer_name,
            copies=copies,
            status=JobStatus.QUEUED,
            message='Print request received.',
            started_at=datetime.now(),
        )

    @property
    def is_finished(self) -> bool:
        return self.status in JobStatus.TERMINAL

    def _require_active(self):
        if self.status not in (JobStatus.QUEUED, JobStatus.PRINTING):
            raise InvalidJobTransition(
                detail=f'Job {self.id} is {self.status}, expected queued or printing'
            )

    def start(self, file_path: str):
        """Mark job as printing."""
        if self.status != JobStatus.QUEUED:
            raise InvalidJobTransition(
                detail=f'Job {self.id} is {self.status}, expected queued'
            )
        self.status = JobStatus.PRINTING
        self.message = 'Printing started.'
        self.file_path = file_path

    def complete(self):
        """Mark job as completed."""
        self._require_active()
        self.status = JobStatus.SUCCESS
        self.message = f'{self.copies} cop{"y" if self.copies == 1 else "ies"} sent to the printer.'
        self.error = None
        self.error_code = None
        self.finished_at = datetime.now()

    def fail(self, message: str, error: str, code: Optional[str] = None):
        """Mark job as failed."""
        self._require_active()
        self.status = JobStatus.ERROR
        self.message = message
        self.error = error
        self.error_code = code
        self.finished_at = datetime.now()

    def snapshot(self) -> 'PrintJob':
        """Independent copy safe to hand to other threads."""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'printerName': self.printer_name,
            'copies': self.copies,
            'status': self.status,
            'message': self.message,
            'error': self.error,
            'errorCode': self.error_code,
            'startedAt': self.started_at.isoformat() if self.started_at else None,
            'finishedAt': self.finished_at.isoformat() if self.finished_at else None,
            'filePath': self.file_path,
        }
