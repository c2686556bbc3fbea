"""
Print Agent Errors
==================

Every failure the agent reports carries a machine-readable code, the HTTP
status the API answers with, a human-readable message and optional detail.
"""

from typing import Dict, Any, Optional


class PrintAgentError(Exception):
    """Base class for all agent failures."""

    code = 'PrintAgentError'
    status_code = 500
    default_message = 'Print agent error'

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'ok': False,
            'code': self.code,
            'message': self.message,
            'error': self.detail if self.detail is not None else self.message,
        }


# =============================================================================
# Document Decoder
# =============================================================================

class UnsupportedFormat(PrintAgentError):
    code = 'UnsupportedFormat'
    status_code = 400
    default_message = 'Unsupported document payload format'


class EmptyDocument(PrintAgentError):
    code = 'EmptyDocument'
    status_code = 500
    default_message = 'Document buffer is empty'


# =============================================================================
# Printer Directory
# =============================================================================

class EnumerationFailed(PrintAgentError):
    code = 'EnumerationFailed'
    default_message = 'Failed to enumerate installed printers'


class MalformedEnumerationOutput(PrintAgentError):
    code = 'MalformedEnumerationOutput'
    default_message = 'Printer enumeration returned unreadable output'


# =============================================================================
# Print Jobs
# =============================================================================

class MissingDocument(PrintAgentError):
    code = 'MissingDocument'
    status_code = 400
    default_message = 'pdfBase64 is required'


class MissingPrinter(PrintAgentError):
    code = 'MissingPrinter'
    status_code = 400
    default_message = 'printerName is required'


class CollaboratorMissing(PrintAgentError):
    code = 'CollaboratorMissing'
    default_message = 'Print executable not found'


class CollaboratorExecutionFailed(PrintAgentError):
    code = 'CollaboratorExecutionFailed'
    default_message = 'Print command failed'


class CollaboratorTimeout(PrintAgentError):
    code = 'CollaboratorTimeout'
    status_code = 504
    default_message = 'Print command timed out'


class ArtifactWriteFailed(PrintAgentError):
    code = 'ArtifactWriteFailed'
    default_message = 'Failed to write the document to disk'


class InvalidJobTransition(PrintAgentError):
    code = 'InvalidJobTransition'
    default_message = 'Job is already finished'
