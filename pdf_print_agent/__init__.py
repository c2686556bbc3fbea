"""
PDF Print Agent
===============

Local background agent that lets a web page print PDF documents on the
printers installed on this workstation.

Supports:
- Windows printers (via PowerShell + SumatraPDF)
- CUPS printers on Linux/macOS (via lpstat + lp)

Usage:
    python -m pdf_print_agent

API Endpoints:
    GET  /health        - Liveness check
    GET  /printers      - List installed printers (cached for 10 seconds)
    POST /print         - Submit a PDF print job
    GET  /print-status  - Status of the current print job
    GET  /ui            - Dashboard
"""

__version__ = '1.0.0'
__author__ = 'PDF Print Agent Contributors'
