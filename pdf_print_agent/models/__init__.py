"""
PDF Print Agent Models
"""

from .printer import PrinterInfo
from .job import PrintJob, JobStatus

__all__ = ['PrinterInfo', 'PrintJob', 'JobStatus']
