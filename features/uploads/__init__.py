"""Upload form, publish pipeline and TTL-driven object expiry."""

from .routes import router

__all__ = ["router"]
