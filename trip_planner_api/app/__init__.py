"""
Application package initializer.

The API is organised into layers: ``core`` (configuration, database,
security, errors, request budgets), ``schemas`` (pydantic payloads),
``services`` (business logic) and ``api`` (versioned FastAPI
routers).  Each domain (users, trips, rates) has a module in each
layer.
"""

from .main import app  # noqa: F401
