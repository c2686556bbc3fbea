"""
PDF Print Agent - Main Application
==================================

HTTP surface of the local print agent. Browser pages on the allowed origins
call it to list printers and print PDFs on this workstation.

Run: python -m pdf_print_agent
"""

import logging
import webbrowser
from pathlib import Path
from typing import List, Optional

from flask import Flask, request, jsonify, send_from_directory
from flask_cors import CORS

from . import __version__
from .config import (
    PORT, HOST, DEBUG, CORS_ORIGINS, MAX_CONTENT_LENGTH, OPEN_BROWSER, LOG_LEVEL,
    SCRATCH_DIR,
)
from .errors import PrintAgentError
from .service import PrintAgent

logger = logging.getLogger(__name__)

# Get web directory path
WEB_DIR = Path(__file__).parent / 'web'

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'


# =============================================================================
# Application Setup
# =============================================================================

def create_app(agent: Optional[PrintAgent] = None,
               cors_origins: Optional[List[str]] = None) -> Flask:
    """Build the Flask application around a print agent."""
    agent = agent or PrintAgent.from_config()

    app = Flask(__name__, static_folder=None)
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
    app.extensions['print_agent'] = agent
    CORS(app, origins=cors_origins or CORS_ORIGINS, methods=['GET', 'POST', 'OPTIONS'])

    @app.errorhandler(PrintAgentError)
    def handle_agent_error(error: PrintAgentError):
        return jsonify(error.to_dict()), error.status_code

    # =========================================================================
    # Web Dashboard
    # =========================================================================

    @app.route('/', methods=['GET'])
    def dashboard():
        """Serve web dashboard."""
        return send_from_directory(str(WEB_DIR), 'index.html')

    @app.route('/ui', methods=['GET'])
    def dashboard_alt():
        """Dashboard route opened on startup."""
        return send_from_directory(str(WEB_DIR), 'index.html')

    @app.route('/api', methods=['GET'])
    def api_info():
        """API info (JSON)."""
        return jsonify({
            'service': 'PDF Print Agent',
            'version': __version__,
            'status': 'running',
            'backend': agent.handler.name,
            'endpoints': {
                'health': '/health',
                'printers': '/printers',
                'print': '/print',
                'print_status': '/print-status',
                'dashboard': '/ui',
            }
        })

    # =========================================================================
    # Health
    # =========================================================================

    @app.route('/health', methods=['GET'])
    def health():
        """Health check with system info."""
        return jsonify(agent.health())

    # =========================================================================
    # Printers
    # =========================================================================

    @app.route('/printers', methods=['GET'])
    def list_printers():
        """List installed printers.

        Query params:
            refresh=true - Skip the cache and enumerate now
        """
        force = request.args.get('refresh', 'false').lower() == 'true'
        try:
            printers, fresh = agent.list_printers(force=force)
        except PrintAgentError as e:
            logger.error("Printer enumeration failed: %s", e.detail or e.message)
            body = e.to_dict()
            body['data'] = []
            return jsonify(body), e.status_code

        if printers:
            message = f'Found {len(printers)} printer(s)'
        else:
            message = 'No printers found'

        return jsonify({
            'ok': True,
            'message': message,
            'data': [p.to_dict() for p in printers],
            'cached': not fresh,
        })

    # =========================================================================
    # Print Jobs
    # =========================================================================

    @app.route('/print-status', methods=['GET'])
    def print_status():
        """Status of the current print job."""
        return jsonify({
            'ok': True,
            'data': agent.get_current_job(),
        })

    @app.route('/print', methods=['POST'])
    def submit_print():
        """Submit a PDF print job.

        Body:
            pdfBase64   - Document payload (base64, byte CSV, byte array or Buffer JSON)
            printerName - Target printer
            printCount  - Copies (default 1)
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            data = {}
        logger.info("Print request: printer=%r copies=%r", data.get('printerName'), data.get('printCount'))

        try:
            job = agent.submit_job(
                data.get('printerName'),
                data.get('pdfBase64'),
                data.get('printCount', 1),
            )
        except PrintAgentError as e:
            body = e.to_dict()
            current = agent.get_current_job()
            if current['errorCode'] == e.code and current['status'] == 'error':
                body['job'] = current
            return jsonify(body), e.status_code

        return jsonify({
            'ok': True,
            'message': 'Print job started.',
            'jobId': job.id,
            'printerName': job.printer_name,
            'copies': job.copies,
            'filePath': job.file_path,
            'job': job.to_dict(),
        })

    return app


# =============================================================================
# Main
# =============================================================================

def configure_logging(level: str = 'INFO'):
    """Configure root logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def open_dashboard(url: str):
    """Open the dashboard in the default browser."""
    try:
        webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning("Could not open browser: %s", e)


def main():
    """Run the service."""
    configure_logging(LOG_LEVEL)
    agent = PrintAgent.from_config()
    app = create_app(agent)

    print("=" * 60)
    print("  PDF Print Agent")
    print("=" * 60)
    print(f"  Version: {__version__}")
    print(f"  Port: {PORT}")
    print(f"  Backend: {agent.handler.name} ({agent.handler.expected_location})")
    print(f"  Scratch: {SCRATCH_DIR}")
    print("=" * 60)
    print("  API Endpoints:")
    print("    GET  /health                          - Health check")
    print("    GET  /printers                        - List printers")
    print("    POST /print                           - Submit print job")
    print("    GET  /print-status                    - Current job status")
    print("    GET  /ui                              - Dashboard")
    print("=" * 60)

    if not agent.handler.is_available():
        logger.warning("Print executable not found: %s", agent.handler.expected_location)

    dashboard_url = f'http://localhost:{PORT}/ui'
    if OPEN_BROWSER:
        open_dashboard(dashboard_url)

    try:
        app.run(host=HOST, port=PORT, debug=DEBUG, threaded=True)
    finally:
        agent.shutdown()


if __name__ == '__main__':
    main()
