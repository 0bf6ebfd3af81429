import logging
import threading
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from graphwire.application.registry import BindingRegistry, describe_type, type_key
from graphwire.application.resolver import GraphResolver
from graphwire.domain import (
    BindingTypeMismatchError,
    IResolutionContext,
    NoBindingFoundError,
    Producer,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResolutionContext(IResolutionContext):
    """The finished, read-only result of dependency resolution.

    Values are looked up by type, or by binding name. Lookups by type never
    return named bindings. Producers registered by name are constructed on
    first request; that construction is serialized so the context can be
    shared between threads.

    Attributes:
        _registry: The frozen type-keyed registry.
        _named: Binding names mapped to values or named producers.
        _resolver: Resolver used for deferred construction of named producers.
        _lock: Serializes deferred construction.

    Example:
        >>> context = ContextBuilder().add(CheeseRepository, CheeseService, App).build()
        >>> app = context.get(App)
    """

    def __init__(self, registry: BindingRegistry, named: Mapping[str, Any], resolver: GraphResolver) -> None:
        self._registry = registry
        self._named = MappingProxyType(dict(named))
        self._resolver = resolver
        self._lock = threading.RLock()

    def get(self, dependency_type: Type[T], name: Optional[str] = None) -> T:
        """Return the value for a type, or for a binding name.

        Args:
            dependency_type: The type to return.
            name: Binding name. Named bindings are only returned when a name is given.

        Returns:
            The registered or constructed value.

        Raises:
            NoBindingFoundError: If nothing is registered for the type or name.
            AmbiguousBindingError: If several values are registered for the type.
            BindingTypeMismatchError: If the named value is not of the requested type.

        Example:
            >>> context.get(CheeseService)
            >>> context.get(str, name="frobnicator_url")
        """
        if name is not None:
            return self._get_named(name, dependency_type)

        if dependency_type not in self._registry:
            names = self._registry.placeholder_names(dependency_type)
            hint = f"It is only registered by name ({', '.join(names)})" if names else None
            raise NoBindingFoundError(f"type {describe_type(dependency_type)}", hint=hint)

        return self._materialize(self._registry.lookup(dependency_type))

    def has_name(self, name: str) -> bool:
        """Whether a binding with this name exists."""
        return name in self._named

    @property
    def names(self) -> Tuple[str, ...]:
        """Every binding name, in registration order."""
        return tuple(self._named)

    @property
    def unused_values(self) -> Tuple[Any, ...]:
        """Values nobody depended on while the context was built."""
        return self._resolver.unused_values

    def _get_named(self, name: str, dependency_type: Any) -> Any:
        if name not in self._named:
            raise NoBindingFoundError(f"name {name}")
        value = self._materialize(self._named[name])

        expected = type_key(dependency_type)
        if isinstance(expected, type) and not isinstance(value, expected):
            raise BindingTypeMismatchError(name, dependency_type, type(value))
        return value

    def _materialize(self, value: Any) -> Any:
        if not isinstance(value, Producer):
            return value
        with self._lock:
            if not value.is_constructed:
                logger.debug("Constructing deferred named binding %s", value.resolution_name)
                self._resolver.construct(value)
        return value.constructed_value

    def __contains__(self, name: object) -> bool:
        return name in self._named
