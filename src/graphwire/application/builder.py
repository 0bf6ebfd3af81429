import inspect
import logging
from typing import Any, Iterable, List, Optional, Set, Tuple

from graphwire.application.context import ResolutionContext
from graphwire.application.inspector import SignatureInspector
from graphwire.application.registry import BindingRegistry
from graphwire.application.resolver import GraphResolver
from graphwire.domain import (
    DuplicateNamedBindingError,
    IParameterInspector,
    NamedPlaceholder,
    Producer,
    ResolutionSettings,
    SourceKind,
)

logger = logging.getLogger(__name__)


def classify_source(source: Any) -> SourceKind:
    """Decide how a source passed to the builder is registered.

    Classes are constructed, functions and methods are called, ``(name, source)``
    pairs are bound to a name and everything else is registered as a value.
    """
    if isinstance(source, tuple) and len(source) == 2 and isinstance(source[0], str):
        return SourceKind.NAMED
    if inspect.isclass(source):
        return SourceKind.TYPE
    if inspect.isroutine(source):
        return SourceKind.FACTORY
    return SourceKind.VALUE


class ContextBuilder:
    """Builder for a ResolutionContext.

    Intentionally restricted to keep wiring predictable:
    - Classes are constructed through their constructor. Anything else is added
      as a value, or as a factory function declaring its return type.
    - Parameters with default values are not resolved; they must be marked
      ``DoNotResolve``.
    - A parameter is resolved either by type or by name, never both.
    - Ambiguous resolution is an error rather than a guess.

    Attributes:
        _inspector: Describes producers and their parameters.
        _settings: Resolution settings.
        _sources: Classified sources, in registration order.
        _names: Binding names registered so far.
        _built: Whether ``build`` has been called.

    Example:
        >>> class CheeseRepository: ...
        >>> class CheeseService:
        ...     def __init__(self, cheese_repository: CheeseRepository): ...
        >>> class App:
        ...     def __init__(self, cheese_service: CheeseService): ...
        >>>
        >>> context = ContextBuilder().add(CheeseRepository, CheeseService, App).build()
        >>> app = context.get(App)
    """

    def __init__(
        self,
        inspector: Optional[IParameterInspector] = None,
        settings: Optional[ResolutionSettings] = None,
    ) -> None:
        self._inspector: IParameterInspector = inspector or SignatureInspector()
        self._settings = settings or ResolutionSettings()
        self._sources: List[Tuple[SourceKind, Any]] = []
        self._names: Set[str] = set()
        self._built = False

    def add(self, *sources: Any) -> "ContextBuilder":
        """Add classes to be constructed and the dependencies needed to construct them.

        Args:
            *sources: Classes, factory functions, values or ``(name, source)`` pairs.

        Returns:
            The builder, for chaining.

        Raises:
            DuplicateNamedBindingError: If a binding name is registered twice.
            RuntimeError: If the context was already built.
        """
        for source in sources:
            self._add_source(source)
        return self

    def add_all(self, sources: Iterable[Any]) -> "ContextBuilder":
        """Add every source of an iterable, e.g. one layer of an application."""
        for source in sources:
            self._add_source(source)
        return self

    @property
    def sources(self) -> Tuple[Any, ...]:
        """Every source added so far, in registration order."""
        return tuple(source for _, source in self._sources)

    @property
    def inspector(self) -> IParameterInspector:
        return self._inspector

    @property
    def settings(self) -> ResolutionSettings:
        return self._settings

    def build(self) -> ResolutionContext:
        """Resolve dependencies and construct objects.

        A builder can only be built once; the state it collected is handed over
        to the returned context.

        Returns:
            The finished resolution context.

        Raises:
            DependencyResolutionError: If the dependencies cannot be resolved.
            RuntimeError: If the context was already built.
        """
        self._check_not_built()
        self._built = True
        sources = self._collect_sources()
        logger.debug("Building resolution context from %d sources", len(sources))

        named = {}
        unnamed: List[Any] = []
        for kind, source in sources:
            if kind == SourceKind.NAMED:
                name, target = source
                named[name] = self._producer_or_value(target, name)
            else:
                unnamed.append(self._producer_or_value(source))

        values = [target for target in unnamed if not isinstance(target, Producer)]
        producers = [target for target in unnamed if isinstance(target, Producer)]

        # Candidates of one type are ordered values first, then producers, each in add order.
        registry = BindingRegistry()
        for name, target in named.items():
            registry.register_under_all_keys(NamedPlaceholder(names=(name,)), self._output_type(target))
        for target in values + producers:
            registry.register_under_all_keys(target, self._output_type(target))

        producers += [target for target in named.values() if isinstance(target, Producer)]

        resolver = GraphResolver(registry, named, self._inspector, self._settings)
        resolver.track_unused(values)
        resolver.track_unused(target for target in named.values() if not isinstance(target, Producer))
        resolver.resolve_all(producers)
        resolver.report_unused()

        registry.freeze()
        return ResolutionContext(registry, named, resolver)

    def output_type_of(self, source: Any) -> Any:
        """The type a source is registered under, without registering it."""
        kind = classify_source(source)
        if kind == SourceKind.NAMED:
            source = source[1]
        return self._output_type(self._producer_or_value(source))

    def _collect_sources(self) -> List[Tuple[SourceKind, Any]]:
        """Sources to build from. Subclasses may filter or extend them."""
        return list(self._sources)

    def _add_source(self, source: Any) -> None:
        self._check_not_built()
        kind = classify_source(source)
        if kind == SourceKind.NAMED:
            name = source[0]
            if name in self._names:
                raise DuplicateNamedBindingError(name)
            self._names.add(name)
        self._sources.append((kind, source))

    def _producer_or_value(self, source: Any, name: Optional[str] = None) -> Any:
        kind = classify_source(source)
        if kind == SourceKind.TYPE:
            producer = self._inspector.producer_for_type(source)
        elif kind == SourceKind.FACTORY:
            producer = self._inspector.producer_for_factory(source)
        else:
            return source
        return producer.named(name) if name is not None else producer

    @staticmethod
    def _output_type(target: Any) -> Any:
        if isinstance(target, Producer):
            return target.output_type
        # Spec'd mocks report the class they stand in for.
        return target.__class__

    def _check_not_built(self) -> None:
        if self._built:
            raise RuntimeError("The resolution context has already been built from this builder")
