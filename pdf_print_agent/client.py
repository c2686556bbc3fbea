"""
PDF Print Agent Client
======================

Python SDK for talking to a running print agent.

Usage:
    from pdf_print_agent.client import PrintAgentClient

    client = PrintAgentClient('http://localhost:4310')

    # List printers
    printers = client.list_printers()

    # Print a PDF and wait for the result
    with open('label.pdf', 'rb') as f:
        result = client.print_pdf('HP LaserJet', f.read(), copies=2)
    job = client.wait_for_job(result['jobId'])
"""

import base64
import time
from typing import Dict, Any, Optional, List

import requests

TERMINAL_STATUSES = ('success', 'error')


class PrintAgentClient:
    """Client for the PDF print agent."""

    def __init__(self, base_url: str = 'http://localhost:4310', timeout: float = 30):
        """
        Initialize client.

        Args:
            base_url: Base URL of the print agent
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, data: Dict = None,
                 params: Dict = None) -> Dict[str, Any]:
        """Make API request."""
        url = f'{self.base_url}{endpoint}'

        try:
            if method == 'GET':
                response = requests.get(url, params=params, timeout=self.timeout)
            elif method == 'POST':
                response = requests.post(url, json=data, timeout=self.timeout)
            else:
                raise ValueError(f'Unknown method: {method}')

            return response.json()

        except requests.exceptions.Timeout:
            return {'ok': False, 'message': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'ok': False, 'message': f'Cannot connect to {self.base_url}'}
        except ValueError as e:
            return {'ok': False, 'message': f'Invalid response: {e}'}

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check agent health."""
        return self._request('GET', '/health')

    def is_online(self) -> bool:
        """Check if the agent is running."""
        return bool(self.health().get('ok'))

    # =========================================================================
    # Printers
    # =========================================================================

    def list_printers(self, refresh: bool = False) -> List[Dict[str, Any]]:
        """List installed printers."""
        params = {'refresh': 'true'} if refresh else None
        result = self._request('GET', '/printers', params=params)
        return result.get('data', [])

    def default_printer(self) -> Optional[Dict[str, Any]]:
        """The printer marked as default, if any."""
        for printer in self.list_printers():
            if printer.get('isDefault'):
                return printer
        return None

    # =========================================================================
    # Printing
    # =========================================================================

    def print_pdf(self, printer_name: str, pdf_data: bytes, copies: int = 1) -> Dict[str, Any]:
        """
        Print a PDF document.

        Args:
            printer_name: Target printer name
            pdf_data: Raw PDF bytes
            copies: Number of copies
        """
        data = {
            'pdfBase64': base64.b64encode(pdf_data).decode('ascii'),
            'printerName': printer_name,
            'printCount': copies,
        }
        return self._request('POST', '/print', data)

    def print_file(self, printer_name: str, file_path: str, copies: int = 1) -> Dict[str, Any]:
        """Print a PDF file."""
        with open(file_path, 'rb') as f:
            return self.print_pdf(printer_name, f.read(), copies=copies)

    # =========================================================================
    # Status
    # =========================================================================

    def print_status(self) -> Dict[str, Any]:
        """Current print job."""
        result = self._request('GET', '/print-status')
        return result.get('data', {})

    def wait_for_job(self, job_id: int, timeout: float = 60,
                     interval: float = 1.0) -> Dict[str, Any]:
        """
        Poll until a job finishes.

        Returns:
            The finished job, or the last seen job when the timeout expires
            or a newer job replaced it
        """
        deadline = time.monotonic() + timeout
        while True:
            job = self.print_status()
            if job.get('id') != job_id or job.get('status') in TERMINAL_STATUSES:
                return job
            if time.monotonic() >= deadline:
                return job
            time.sleep(interval)
