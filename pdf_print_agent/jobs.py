"""
Print Job State Machine
=======================

Validates print requests, writes the decoded document to the scratch
directory and hands it to the print backend on a background worker.

Only one job record is kept: every submission replaces the current job.
The caller gets control back as soon as the job is printing; the final
success/error state is visible through get_current_job().
"""

import logging
import math
import os
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait as wait_futures
from typing import Any, Dict, Optional

from .decoder import decode_document
from .errors import (
    PrintAgentError,
    MissingDocument,
    MissingPrinter,
    CollaboratorMissing,
    CollaboratorExecutionFailed,
    ArtifactWriteFailed,
)
from .handlers import BaseHandler
from .models import PrintJob

logger = logging.getLogger(__name__)


def normalize_copies(value: Any) -> int:
    """
    Normalize a requested copy count.

    Non-numeric, non-finite and non-positive values become 1; everything else
    is floored to an integer (never below 1). Never raises.
    """
    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 1
    else:
        return 1

    if not math.isfinite(number) or number <= 0:
        return 1
    return max(1, math.floor(number))


class PrintJobManager:
    """Owns the current print job and drives it through its states."""

    def __init__(self, handler: BaseHandler, scratch_dir: str,
                 print_timeout: Optional[float] = None,
                 executor: Optional[Executor] = None):
        self.handler = handler
        self.scratch_dir = scratch_dir
        self.print_timeout = print_timeout

        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='print-worker'
        )
        self._lock = threading.Lock()
        self._current = PrintJob.idle()
        self._counter = 0
        self._pending: Optional[Future] = None

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_job(self) -> Dict[str, Any]:
        """Snapshot of the current job for JSON serialization."""
        with self._lock:
            return self._current.to_dict()

    # =========================================================================
    # Submission
    # =========================================================================

    def submit(self, printer_name: Any, payload: Any, copies: Any = 1) -> PrintJob:
        """
        Submit a print job.

        Args:
            printer_name: Target printer
            payload: Document payload in one of the decoder's shapes
            copies: Requested copies (normalized, never rejected)

        Returns:
            Snapshot of the job, already in the printing state

        Raises:
            MissingDocument, MissingPrinter: request rejected, no job created
            CollaboratorMissing, UnsupportedFormat, EmptyDocument,
            ArtifactWriteFailed: job created and finished in the error state
        """
        if payload is None:
            raise MissingDocument()
        if not isinstance(printer_name, str) or not printer_name.strip():
            raise MissingPrinter()

        printer_name = printer_name.strip()
        copies = normalize_copies(copies)

        with self._lock:
            self._counter += 1
            job = PrintJob.queued(self._counter, printer_name, copies)
            self._current = job
        logger.info("Job %d queued: printer='%s' copies=%d", job.id, printer_name, copies)

        if not self.handler.is_available():
            location = self.handler.expected_location
            error = CollaboratorMissing(
                f'Print executable not found. Check the path: {location}',
                detail=f'Expected location: {location}',
            )
            self._fail(job, error)
            raise error

        try:
            buffer = decode_document(payload)
        except PrintAgentError as e:
            self._fail(job, e)
            raise

        try:
            file_path = self._write_document(job.id, buffer)
        except OSError as e:
            error = ArtifactWriteFailed('Failed to save the PDF before printing', detail=str(e))
            self._fail(job, error)
            raise error from e
        logger.info("Job %d: saved %d bytes to %s", job.id, len(buffer), file_path)

        with self._lock:
            job.start(file_path)
            snapshot = job.snapshot()
        logger.info("Job %d printing", job.id)

        self._pending = self._executor.submit(self._print, job)
        return snapshot

    def _write_document(self, job_id: int, buffer: bytes) -> str:
        os.makedirs(self.scratch_dir, exist_ok=True)
        file_path = os.path.join(self.scratch_dir, f'label-{job_id}-{time.time_ns()}.pdf')
        with open(file_path, 'wb') as f:
            f.write(buffer)
        return file_path

    # =========================================================================
    # Background printing
    # =========================================================================

    def _print(self, job: PrintJob):
        """Run the print backend for a job and record the outcome."""
        try:
            output = self.handler.print_file(
                job.printer_name, job.file_path, job.copies, timeout=self.print_timeout
            )
        except PrintAgentError as e:
            logger.error("Job %d failed: %s", job.id, e.detail or e.message)
            self._fail(job, e, message='An error occurred while printing.')
            return
        except Exception as e:
            logger.exception("Job %d: unexpected print failure", job.id)
            self._fail(job, CollaboratorExecutionFailed(detail=str(e)),
                       message='An error occurred while printing.')
            return

        if output.strip():
            logger.info("Job %d print output: %s", job.id, output.strip())

        with self._lock:
            job.complete()
            superseded = self._current is not job
        logger.info("Job %d finished: %s", job.id, job.message)
        if superseded:
            logger.info("Job %d was superseded by a newer submission", job.id)

    def _fail(self, job: PrintJob, error: PrintAgentError, message: Optional[str] = None):
        with self._lock:
            job.fail(
                message or error.message,
                error.detail if error.detail is not None else error.message,
                code=error.code,
            )
        logger.warning("Job %d error [%s]: %s", job.id, error.code, job.error)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the most recently dispatched job finished printing."""
        pending = self._pending
        if pending is None:
            return True
        done, _ = wait_futures([pending], timeout=timeout)
        return bool(done)

    def shutdown(self, wait: bool = True):
        """Stop the print worker."""
        self._executor.shutdown(wait=wait)
