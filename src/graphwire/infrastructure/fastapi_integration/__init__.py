"""
FastAPI integration module.

Provides helpers for exposing values of a resolution context to FastAPI endpoints.
"""

from .integration import (
    CONTEXT_STATE_ATTRIBUTE,
    create_fastapi_dependency,
    create_request_dependency,
    install_context,
)

__all__ = [
    "CONTEXT_STATE_ATTRIBUTE",
    "create_fastapi_dependency",
    "create_request_dependency",
    "install_context",
]
