"""
Testing utilities module.

Provides helpers for building resolution contexts with test doubles.
"""

from .utilities import TestContextBuilder, create_test_context

__all__ = [
    "TestContextBuilder",
    "create_test_context",
]
