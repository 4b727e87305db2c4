"""
Prusa Proxy Handlers
====================

HTTP handlers for the printers behind the proxy.
"""

from .base import BaseHandler, is_success
from .prusalink import PrusaLinkHandler

__all__ = ['BaseHandler', 'PrusaLinkHandler', 'is_success']
