"""API route modules."""

from timelog.api.summary import router as summary_router

__all__ = ["summary_router"]
