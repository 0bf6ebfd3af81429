from typing import Any, Type, TypeVar

from graphwire.application.builder import ContextBuilder
from graphwire.application.context import ResolutionContext

T = TypeVar("T")


def resolve_dependencies(*sources: Any) -> ResolutionContext:
    """Build a context in the simple case.

    Alias for ``ContextBuilder().add(*sources).build()``.

    Example:
        >>> context = resolve_dependencies(CheeseRepository, CheeseService, App)
        >>> app = context.get(App)
    """
    return ContextBuilder().add(*sources).build()


def resolve_dependencies_and_get(dependency_type: Type[T], *sources: Any) -> T:
    """Build a context and return the "main" constructed object.

    Alias for ``resolve_dependencies(*sources).get(dependency_type)``.

    Example:
        >>> app = resolve_dependencies_and_get(App, CheeseRepository, CheeseService, App)
    """
    return resolve_dependencies(*sources).get(dependency_type)
