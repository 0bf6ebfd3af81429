"""
Application layer - Registration, resolution and retrieval.

This layer builds dependency graphs from the domain models.
It depends only on the Domain layer.
"""

from .builder import ContextBuilder, classify_source
from .context import ResolutionContext
from .helpers import resolve_dependencies, resolve_dependencies_and_get
from .inspector import SignatureInspector
from .registry import BindingRegistry
from .resolver import GraphResolver

__all__ = [
    "ContextBuilder",
    "ResolutionContext",
    "BindingRegistry",
    "GraphResolver",
    "SignatureInspector",
    "classify_source",
    "resolve_dependencies",
    "resolve_dependencies_and_get",
]
