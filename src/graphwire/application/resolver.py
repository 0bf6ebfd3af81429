"""Application layer - Dependency graph resolution."""

import inspect
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from graphwire.application.registry import BindingRegistry, describe_type
from graphwire.domain import (
    DependencyChain,
    DependencyResolutionError,
    InvalidProducerError,
    IParameterInspector,
    NoBindingFoundError,
    ParameterDescriptor,
    Producer,
    ProducerInvocationError,
    ResolutionSettings,
    UnsupportedOptionalParameterError,
)

logger = logging.getLogger(__name__)

_PACKAGE = __name__.split(".")[0]


class GraphResolver:
    """Constructs producers in dependency order.

    Resolution is a memoized, depth-first walk: every parameter of a producer is
    looked up by name or by type, dependency producers are constructed first, and
    each producer is invoked exactly once. The active dependency chain is tracked
    to detect cycles.

    Attributes:
        _registry: Type-keyed candidates.
        _named: Binding names mapped to values or named producers.
        _inspector: Describes producer parameters.
        _settings: Resolution settings.
        _unused: Values nobody depended on yet, keyed by identity.
    """

    def __init__(
        self,
        registry: BindingRegistry,
        named: Mapping[str, Any],
        inspector: IParameterInspector,
        settings: ResolutionSettings,
    ) -> None:
        self._registry = registry
        self._named = named
        self._inspector = inspector
        self._settings = settings
        self._unused: Dict[int, Any] = {}

    def track_unused(self, values: Iterable[Any]) -> None:
        """Start tracking registered values for unused-value diagnostics."""
        for value in values:
            self._unused[id(value)] = value

    def resolve_all(self, producers: Iterable[Producer]) -> None:
        """Construct every producer not bound to a name.

        Named producers are constructed when first needed, either as a
        dependency or when requested by name from the context.
        """
        for producer in producers:
            if producer.resolution_name is None and not producer.is_constructed:
                self.construct(producer)

    def construct(self, producer: Producer, chain: Optional[DependencyChain] = None) -> None:
        """Construct a producer and, recursively, its dependencies.

        Args:
            producer: The producer to construct.
            chain: Producers currently under construction.

        Raises:
            CircularDependencyError: If the producer is already under construction.
            NoBindingFoundError: If a parameter has no binding.
            AmbiguousBindingError: If a parameter type has several candidates.
            UnsupportedOptionalParameterError: If an optional parameter is not marked ``DoNotResolve``.
            ProducerInvocationError: If the producer itself fails.
        """
        if chain is None:
            chain = DependencyChain()
        chain.push(producer)

        try:
            if producer.is_constructed:
                return

            args: List[Any] = []
            kwargs: Dict[str, Any] = {}
            for parameter in self._inspector.parameters(producer):
                if parameter.is_optional:
                    if parameter.ignore:
                        continue
                    raise UnsupportedOptionalParameterError(producer.debug_label, parameter.name)

                value = self._resolve_parameter(producer, parameter, chain)
                if parameter.positional_only:
                    args.append(value)
                else:
                    kwargs[parameter.name] = value

            instance = self._invoke(producer, args, kwargs)
            producer.set_constructed(instance)
            self._unused[id(instance)] = instance
            logger.debug("Constructed %s", producer.debug_label)
        finally:
            chain.pop()

    def _resolve_parameter(self, producer: Producer, parameter: ParameterDescriptor, chain: DependencyChain) -> Any:
        if parameter.explicit_name is not None:
            name = parameter.explicit_name
            if name not in self._named:
                raise NoBindingFoundError(
                    f"name {name}",
                    parameter.name,
                    producer.debug_label,
                    self._call_site_hint(),
                )
            value = self._named[name]
        else:
            value = self._lookup_by_type(producer, parameter)

        if parameter.collect_all and isinstance(value, list):
            resolved = [self._materialize(candidate, chain) for candidate in value]
            for candidate in resolved:
                self._unused.pop(id(candidate), None)
            return resolved

        resolved = self._materialize(value, chain)
        self._unused.pop(id(resolved), None)
        return resolved

    def _lookup_by_type(self, producer: Producer, parameter: ParameterDescriptor) -> Any:
        if parameter.collect_all and parameter.element_type is None:
            raise InvalidProducerError(
                producer.debug_label,
                f"Parameter {parameter.name} is marked ResolveAll but is not declared as a list of the resolved type",
            )
        lookup_type = parameter.lookup_type
        if lookup_type is None:
            raise InvalidProducerError(
                producer.debug_label,
                f"Parameter {parameter.name} has no type annotation. Annotate it or resolve it by name",
            )

        if not parameter.collect_all and lookup_type not in self._registry:
            raise NoBindingFoundError(
                f"type {describe_type(lookup_type)}",
                parameter.name,
                producer.debug_label,
                self._missing_type_hint(lookup_type),
            )
        return self._registry.lookup(lookup_type, parameter.collect_all)

    def _materialize(self, value: Any, chain: DependencyChain) -> Any:
        if not isinstance(value, Producer):
            return value
        if not value.is_constructed:
            self.construct(value, chain)
        return value.constructed_value

    def _invoke(self, producer: Producer, args: List[Any], kwargs: Dict[str, Any]) -> Any:
        producer.invocation_count += 1
        try:
            return producer.callable(*args, **kwargs)
        except DependencyResolutionError:
            raise
        except Exception as e:
            raise ProducerInvocationError(producer.debug_label, e) from e

    def _missing_type_hint(self, lookup_type: Any) -> Optional[str]:
        hints = []
        names = self._registry.placeholder_names(lookup_type)
        if names:
            hints.append(
                f"Values of this type are only registered by name ({', '.join(names)}), "
                "mark the parameter with ResolveByName to use one of them"
            )
        call_site = self._call_site_hint()
        if call_site:
            hints.append(call_site)
        return ". ".join(hints) or None

    def _call_site_hint(self) -> Optional[str]:
        if not self._settings.call_site_hints:
            return None
        frame = inspect.currentframe()
        try:
            while frame is not None and frame.f_globals.get("__name__", "").split(".")[0] == _PACKAGE:
                frame = frame.f_back
            if frame is None:
                return None
            return (
                "This is something you probably need to fix in the code where the ResolutionContext is built, "
                f"i.e. in this case in {frame.f_globals.get('__name__')}::{frame.f_code.co_name}."
            )
        finally:
            del frame

    @property
    def unused_values(self) -> Tuple[Any, ...]:
        """Registered or constructed values nobody depended on."""
        return tuple(self._unused.values())

    def report_unused(self) -> None:
        """Log a warning when more values than expected were never used."""
        unused = self.unused_values
        if self._settings.warn_unused_values and len(unused) > self._settings.unused_value_threshold:
            logger.warning(
                "ResolutionContext contains more unused values than expected:\n  %s",
                "\n  ".join(repr(value) for value in unused),
            )
