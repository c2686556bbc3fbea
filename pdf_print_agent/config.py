"""
PDF Print Agent Configuration
"""

import os
import sys
import tempfile

# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('PRINT_AGENT_PORT', 4310))
HOST = os.environ.get('PRINT_AGENT_HOST', '127.0.0.1')
DEBUG = os.environ.get('PRINT_AGENT_DEBUG', 'false').lower() == 'true'

# Origins allowed to call the agent from a browser (comma-separated)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        'PRINT_AGENT_CORS_ORIGINS',
        'http://localhost:5173,http://localhost:3000',
    ).split(',')
    if origin.strip()
]

# Documents arrive base64-encoded inside JSON bodies
MAX_CONTENT_LENGTH = 50 * 1024 * 1024

# Open the dashboard in the default browser on startup
OPEN_BROWSER = os.environ.get('PRINT_AGENT_OPEN_BROWSER', 'true').lower() == 'true'

LOG_LEVEL = os.environ.get('PRINT_AGENT_LOG_LEVEL', 'INFO')

# =============================================================================
# Printing Backend
# =============================================================================

# 'sumatra', 'cups' or empty for platform default
BACKEND = os.environ.get('PRINT_AGENT_BACKEND', '')

# Directory holding the running program (the frozen executable when bundled)
if getattr(sys, 'frozen', False):
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

SUMATRA_PATH = os.environ.get(
    'PRINT_AGENT_SUMATRA_PATH', os.path.join(BASE_DIR, 'SumatraPDF.exe')
)

# Where decoded documents are written before printing
SCRATCH_DIR = os.environ.get(
    'PRINT_AGENT_SCRATCH_DIR', os.path.join(tempfile.gettempdir(), 'pdf-print-agent')
)

# =============================================================================
# Timing
# =============================================================================

PRINTER_CACHE_TTL = float(os.environ.get('PRINT_AGENT_CACHE_TTL', 10))  # seconds
ENUM_TIMEOUT = float(os.environ.get('PRINT_AGENT_ENUM_TIMEOUT', 30))  # seconds
PRINT_TIMEOUT = float(os.environ.get('PRINT_AGENT_PRINT_TIMEOUT', 120))  # seconds
