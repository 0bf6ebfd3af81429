"""
Domain layer - Core models and rules of dependency resolution.

This layer contains the value objects, markers and errors of dependency resolution.
It has no dependencies on other layers.
"""

from .enums import SourceKind
from .exceptions import (
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
from .interfaces import IBindingRegistry, IParameterInspector, IResolutionContext
from .markers import USE_PARAMETER_NAME, DoNotResolve, ResolveAll, ResolveByName
from .models import (
    AmbiguousBinding,
    DependencyChain,
    NamedPlaceholder,
    ParameterDescriptor,
    Producer,
    ResolutionSettings,
    SingleBinding,
)

__all__ = [
    # Enums
    "SourceKind",
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
    # Interfaces
    "IParameterInspector",
    "IBindingRegistry",
    "IResolutionContext",
    # Markers
    "USE_PARAMETER_NAME",
    "ResolveByName",
    "DoNotResolve",
    "ResolveAll",
    # Models
    "ResolutionSettings",
    "ParameterDescriptor",
    "Producer",
    "SingleBinding",
    "AmbiguousBinding",
    "NamedPlaceholder",
    "DependencyChain",
]
