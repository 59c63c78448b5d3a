"""Catalogue domain API package."""

from catalogue.api.routes import browse_router, seller_router

__all__ = ["browse_router", "seller_router"]
