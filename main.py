#!/usr/bin/env python
"""
PDF Print Agent - Standalone Entry Point

Run directly:
    python main.py

Or with environment variables:
    PRINT_AGENT_PORT=4320 PRINT_AGENT_SUMATRA_PATH=C:\\Tools\\SumatraPDF.exe python main.py
"""

import os
import sys

# Ensure package is importable when running directly
if __name__ == '__main__':
    parent_dir = os.path.dirname(os.path.abspath(__file__))
    if parent_dir not in sys.path:
        sys.path.insert(0, parent_dir)

from pdf_print_agent.app import main


if __name__ == '__main__':
    main()
