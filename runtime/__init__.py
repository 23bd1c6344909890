"""
Runtime package for the Nogger logging server.

This package contains:
- API layer (FastAPI server, JSON routes, HTML dashboard)
- Stores (append-only aggregate + per-type event streams)
- Models (Pydantic models for events and HTTP requests/responses)
"""

__version__ = "1.0.0"
