"""
Infrastructure layer - External integrations.

This layer contains integrations with external frameworks and tools.
It depends on both Application and Domain layers. Subpackages are imported
explicitly, so FastAPI is only required when ``fastapi_integration`` is used.
"""

__all__ = [
    "fastapi_integration",
    "testing",
]
