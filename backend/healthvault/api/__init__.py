"""
API package: versioned routers mounted under ``/api``.
"""

from healthvault.api.v1 import router

__all__ = ["router"]
