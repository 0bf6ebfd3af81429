"""Application layer - Type-keyed binding registry."""

from abc import ABC
from types import MappingProxyType
from typing import Annotated, Any, Dict, Generic, List, Mapping, Protocol, Tuple, Union, get_args, get_origin

from graphwire.domain import (
    AmbiguousBinding,
    AmbiguousBindingError,
    IBindingRegistry,
    NamedPlaceholder,
    SingleBinding,
)

# Roots every class derives from; registering under them would make everything ambiguous.
UNIVERSAL_ROOTS: Tuple[type, ...] = (object, ABC, Generic, Protocol)  # type: ignore[assignment]

RegistryEntry = Union[SingleBinding, AmbiguousBinding, NamedPlaceholder]


def type_key(declared_type: Any) -> Any:
    """Erase a declared type to the key used for lookup.

    ``Annotated`` metadata is stripped and generic aliases are reduced to their
    origin class, so ``Annotated[List[int], ...]`` is looked up as ``list``.
    """
    if get_origin(declared_type) is Annotated:
        declared_type = get_args(declared_type)[0]
    origin = get_origin(declared_type)
    if isinstance(origin, type):
        return origin
    return declared_type


def describe_type(declared_type: Any) -> str:
    """Human-readable name of a type for error messages."""
    if isinstance(declared_type, type):
        return declared_type.__name__
    return repr(declared_type)


def relevant_keys(output_type: Any) -> List[Any]:
    """Every key a value of ``output_type`` is registered under.

    That is the type itself, its implemented interfaces and all of its ancestors,
    in method resolution order, without the universal roots.
    """
    key = type_key(output_type)
    if not isinstance(key, type):
        return [key]
    return [cls for cls in key.__mro__ if cls not in UNIVERSAL_ROOTS]


class BindingRegistry(IBindingRegistry):
    """Stores candidates for dependency types.

    Each type key has at most one entry, which is a single candidate, an
    ambiguous group of candidates or a placeholder for named-only bindings.
    The registry is frozen when the owning context is built.

    Attributes:
        _entries: Dictionary mapping type keys to their entries.
        _frozen: Whether registration is still allowed.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._entries: Dict[Any, RegistryEntry] = {}
        self._frozen = False

    def register_value(self, key: Any, value: Any) -> None:
        """Register a candidate under a single type key.

        A first candidate is stored as single, a second one turns the entry
        ambiguous and later ones are appended, preserving registration order.
        Named placeholders never displace real candidates.

        Args:
            key: The type key.
            value: The candidate.

        Raises:
            RuntimeError: If the registry is frozen.
        """
        self._check_not_frozen()
        existing = self._entries.get(key)

        if isinstance(value, NamedPlaceholder):
            if existing is None:
                self._entries[key] = value
            elif isinstance(existing, NamedPlaceholder):
                self._entries[key] = NamedPlaceholder(names=existing.names + value.names)
            return

        if existing is None or isinstance(existing, NamedPlaceholder):
            self._entries[key] = SingleBinding(value=value)
        elif isinstance(existing, SingleBinding):
            self._entries[key] = AmbiguousBinding(candidates=[existing.value, value])
        else:
            existing.candidates.append(value)

    def register_under_all_keys(self, value: Any, output_type: Any) -> None:
        """Register a candidate under its type and every ancestor type.

        Example:
            >>> registry.register_under_all_keys(PostgresRepository(), PostgresRepository)
            >>> registry.lookup(Repository)  # the abstract base resolves too
        """
        for key in relevant_keys(output_type):
            self.register_value(key, value)

    def lookup(self, key: Any, collect_all: bool = False) -> Any:
        """Look up candidates for a type.

        Placeholder entries are treated as absent.

        Raises:
            AmbiguousBindingError: If several candidates exist and ``collect_all`` is false.
        """
        key = type_key(key)
        entry = self._entries.get(key)
        if entry is None or isinstance(entry, NamedPlaceholder):
            return [] if collect_all else None
        if isinstance(entry, AmbiguousBinding):
            if collect_all:
                return list(entry.candidates)
            raise AmbiguousBindingError(describe_type(key), entry.candidates)
        return [entry.value] if collect_all else entry.value

    def placeholder_names(self, key: Any) -> Tuple[str, ...]:
        """Binding names available for a type that is only registered by name."""
        entry = self._entries.get(type_key(key))
        if isinstance(entry, NamedPlaceholder):
            return entry.names
        return ()

    def freeze(self) -> None:
        """Disallow further registration."""
        self._frozen = True

    @property
    def entries(self) -> Mapping[Any, RegistryEntry]:
        """Read-only view of the registry entries."""
        return MappingProxyType(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(type_key(key))
        return entry is not None and not isinstance(entry, NamedPlaceholder)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise RuntimeError("The binding registry is frozen and cannot be modified")
