"""
API v1 package.

Contains versioned API routes for the AirGo accounts API.
"""

from airgo_accounts.api.v1.routes import router

__all__ = ["router"]
