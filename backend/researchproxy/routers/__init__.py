"""API routers - search (per provider), chat, catalog."""

from . import catalog, chat
from .search import build_search_router

__all__ = ["build_search_router", "catalog", "chat"]
