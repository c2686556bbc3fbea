"""
PDF Print Agent Handlers
========================

Print backends for different operating systems.
"""

import sys
from typing import Optional

from .base import BaseHandler
from .sumatra import SumatraHandler
from .cups import CupsHandler

__all__ = ['BaseHandler', 'SumatraHandler', 'CupsHandler', 'get_handler', 'create_handler']

# Handler registry
HANDLERS = {
    'sumatra': SumatraHandler,
    'cups': CupsHandler,
}


def get_handler(handler_type: str) -> type:
    """Get handler class by type."""
    return HANDLERS.get(handler_type)


def default_handler_type() -> str:
    """Backend used when none is configured."""
    return 'sumatra' if sys.platform == 'win32' else 'cups'


def create_handler(handler_type: Optional[str] = None,
                   sumatra_path: Optional[str] = None) -> BaseHandler:
    """Instantiate a configured backend."""
    handler_type = handler_type or default_handler_type()
    handler_class = get_handler(handler_type)
    if not handler_class:
        raise ValueError(f'Unknown print backend: {handler_type}. Valid: {list(HANDLERS.keys())}')

    if handler_class is SumatraHandler:
        from ..config import SUMATRA_PATH
        return SumatraHandler(sumatra_path or SUMATRA_PATH)
    return handler_class()
