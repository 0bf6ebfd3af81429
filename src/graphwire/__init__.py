"""
graphwire: Constructor-based dependency resolution with predictable wiring.

Public API exports for the graphwire package.
"""

# Application exports
from graphwire.application import (
    ContextBuilder,
    ResolutionContext,
    resolve_dependencies,
    resolve_dependencies_and_get,
)

# Domain exports
from graphwire.domain.exceptions import (
    AmbiguousBindingError,
    BindingTypeMismatchError,
    CircularDependencyError,
    DependencyResolutionError,
    DuplicateNamedBindingError,
    InvalidProducerError,
    MissingPrimaryConstructorError,
    NoBindingFoundError,
    ProducerInvocationError,
    UnsupportedOptionalParameterError,
)
from graphwire.domain.markers import DoNotResolve, ResolveAll, ResolveByName
from graphwire.domain.models import ResolutionSettings

__version__ = "0.1.0"

__all__ = [
    # Builder and context
    "ContextBuilder",
    "ResolutionContext",
    "resolve_dependencies",
    "resolve_dependencies_and_get",
    # Markers
    "ResolveByName",
    "DoNotResolve",
    "ResolveAll",
    # Settings
    "ResolutionSettings",
    # Exceptions
    "DependencyResolutionError",
    "InvalidProducerError",
    "MissingPrimaryConstructorError",
    "NoBindingFoundError",
    "AmbiguousBindingError",
    "UnsupportedOptionalParameterError",
    "DuplicateNamedBindingError",
    "CircularDependencyError",
    "BindingTypeMismatchError",
    "ProducerInvocationError",
]
