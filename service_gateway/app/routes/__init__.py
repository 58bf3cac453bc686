"""
Versioned API routers mounted by the Gateway.
"""

from . import identity

__all__ = ["identity"]
