"""
Todo service package.

A FastAPI application serving per-user Todo lists. The ASGI app lives in
todo_service.main:app.
"""

__version__ = "0.1.0"
