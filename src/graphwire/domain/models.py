from typing import Any, Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from graphwire.domain.enums import SourceKind
from graphwire.domain.exceptions import CircularDependencyError


class ResolutionSettings(BaseModel):
    """Configuration for building a resolution context.

    Attributes:
        warn_unused_values: Log a warning listing values nobody depends on.
        unused_value_threshold: Number of unused values tolerated before warning.
            The default tolerates the single root object an application is usually built for.
        call_site_hints: Point at the code building the context in "no binding" errors.
    """

    model_config = ConfigDict(frozen=True)

    warn_unused_values: bool = Field(default=True, description="Warn about values nobody depends on.")
    unused_value_threshold: int = Field(
        default=1,
        ge=0,
        description="Number of unused values tolerated before warning.",
    )
    call_site_hints: bool = Field(default=True, description="Add the building call site to binding errors.")


class ParameterDescriptor(BaseModel):
    """Value object describing one parameter of a producer.

    Attributes:
        name: The parameter name.
        declared_type: The annotated type with ``Annotated`` metadata stripped.
        is_optional: Whether the parameter has a default value.
        positional_only: Whether the parameter must be passed positionally.
        explicit_name: Binding name to resolve by, if resolved by name.
        uses_parameter_name: Whether ``explicit_name`` was taken from the parameter name.
        ignore: Whether the parameter is marked ``DoNotResolve``.
        collect_all: Whether the parameter is marked ``ResolveAll``.
        element_type: Element type of a ``ResolveAll`` container.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="The parameter name.")
    declared_type: Any = Field(default=None, description="The declared parameter type.")
    is_optional: bool = Field(default=False, description="Whether the parameter has a default.")
    positional_only: bool = Field(default=False, description="Whether the parameter must be passed positionally.")
    explicit_name: Optional[str] = Field(default=None, description="Binding name to resolve by.")
    uses_parameter_name: bool = Field(default=False, description="Whether the parameter name is the binding name.")
    ignore: bool = Field(default=False, description="Whether resolution skips the parameter.")
    collect_all: bool = Field(default=False, description="Whether every matching value is injected.")
    element_type: Any = Field(default=None, description="Element type for collect-all parameters.")

    @property
    def lookup_type(self) -> Any:
        """The type used for type-based lookup."""
        return self.element_type if self.collect_all else self.declared_type


class Producer(BaseModel):
    """One constructible thing: a class or a factory function.

    The constructed value is set exactly once. ``is_constructed`` tells
    "not constructed yet" apart from a producer that legitimately returned ``None``.

    Attributes:
        callable: The class or function to invoke.
        output_type: The type of the constructed value, used as lookup key.
        debug_label: Human-readable name for errors and cycle traces.
        kind: Whether this is a class or a factory producer.
        resolution_name: Binding name, only set for producers registered by name.
        constructed_value: The memoized value once constructed.
        is_constructed: Whether ``constructed_value`` is set.
        invocation_count: Number of times the callable was invoked.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    callable: Callable[..., Any] = Field(..., description="The class or function to invoke.")
    output_type: Any = Field(..., description="The type of the constructed value.")
    debug_label: str = Field(..., description="Human-readable name of the producer.")
    kind: SourceKind = Field(..., description="Whether this is a class or a factory producer.")
    resolution_name: Optional[str] = Field(default=None, description="Binding name for named producers.")
    constructed_value: Optional[Any] = Field(default=None, description="The memoized constructed value.")
    is_constructed: bool = Field(default=False, description="Whether the value has been constructed.")
    invocation_count: int = Field(default=0, description="Number of times the callable was invoked.")

    def set_constructed(self, value: Any) -> None:
        """Memoize the constructed value.

        Raises:
            RuntimeError: If the producer was already constructed.
        """
        if self.is_constructed:
            raise RuntimeError(f"{self.debug_label} has already been constructed")
        self.constructed_value = value
        self.is_constructed = True

    def named(self, name: str) -> "Producer":
        """Return a copy of this producer registered under ``name``."""
        return self.model_copy(update={"resolution_name": name})

    def __str__(self) -> str:
        return self.debug_label

    def __repr__(self) -> str:
        return self.debug_label


class SingleBinding(BaseModel):
    """Registry entry for a type satisfied by exactly one candidate."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: Any = Field(..., description="The single candidate.")


class AmbiguousBinding(BaseModel):
    """Registry entry for a type satisfied by several candidates.

    Attributes:
        candidates: Every candidate, in registration order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    candidates: List[Any] = Field(..., min_length=2, description="Every candidate, in registration order.")


class NamedPlaceholder(BaseModel):
    """Registry entry marking a type as only available by name.

    Blocks type-based lookup so that named bindings never satisfy parameters
    resolved by type.

    Attributes:
        names: Binding names whose values are of this type.
    """

    names: Tuple[str, ...] = Field(..., description="Binding names whose values are of this type.")

    def __str__(self) -> str:
        return f"NamedPlaceholder({', '.join(self.names)})"


class DependencyChain(BaseModel):
    """Tracks the producers currently under construction.

    Used for cycle detection. Membership is checked by identity, as two
    distinct producers may compare equal.

    Attributes:
        stack: Producers currently under construction, outermost first.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stack: List[Any] = Field(default_factory=list, description="Producers currently under construction.")

    def push(self, producer: Producer) -> None:
        """Add a producer to the chain.

        Raises:
            CircularDependencyError: If the producer is already in the chain.
        """
        if producer in self:
            raise CircularDependencyError(self.stack + [producer])
        self.stack.append(producer)

    def pop(self) -> None:
        """Remove the innermost producer from the chain."""
        if self.stack:
            self.stack.pop()

    def render(self) -> str:
        return " -> ".join(str(node) for node in self.stack)

    def __contains__(self, producer: object) -> bool:
        return any(node is producer for node in self.stack)

    def __len__(self) -> int:
        return len(self.stack)
