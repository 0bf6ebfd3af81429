from typing import Any, List, Optional, Sequence


class DependencyResolutionError(Exception):
    """Base exception for dependency resolution errors."""


class InvalidProducerError(DependencyResolutionError):
    """Raised when a source cannot be used as a producer.

    This occurs when:
    - A factory function has no return annotation.
    - A parameter has neither a type annotation nor a binding name.
    - A ``ResolveAll`` parameter is not declared as a container type.

    Attributes:
        label: Debug label of the offending producer.
        reason: Why the producer is unusable.
    """

    def __init__(self, label: str, reason: str) -> None:
        self.label = label
        self.reason = reason
        super().__init__(f"{label}: {reason}")


class MissingPrimaryConstructorError(InvalidProducerError):
    """Raised when a registered class has no usable constructor.

    Abstract classes, protocols and classes whose signature cannot be
    introspected cannot be constructed from a class reference. Register an
    instance or a factory function instead.
    """

    def __init__(self, cls: type, reason: Optional[str] = None) -> None:
        self.cls = cls
        message = "Class must have a usable constructor to be constructed by ContextBuilder"
        if reason:
            message += f" ({reason})"
        super().__init__(cls.__name__, message + ".")


class NoBindingFoundError(DependencyResolutionError):
    """Raised when a parameter has no matching value or producer.

    Attributes:
        key: Description of the lookup key (a type or a binding name).
        parameter_name: The parameter that needed the binding, if any.
        producer_label: Debug label of the producer owning the parameter, if any.
    """

    def __init__(
        self,
        key: str,
        parameter_name: Optional[str] = None,
        producer_label: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.key = key
        self.parameter_name = parameter_name
        self.producer_label = producer_label
        message = f"No binding found for {key}"
        if parameter_name is not None and producer_label is not None:
            message += f" (needed for parameter {parameter_name} in {producer_label})"
        if hint:
            message += f". {hint}"
        super().__init__(message)


class AmbiguousBindingError(DependencyResolutionError):
    """Raised when several candidates satisfy a single-value type lookup.

    Attributes:
        key: Description of the ambiguous type.
        candidates: Every candidate registered for the type, in registration order.
    """

    def __init__(self, key: str, candidates: Sequence[Any]) -> None:
        self.key = key
        self.candidates = list(candidates)
        rendered = ", ".join(repr(candidate) for candidate in self.candidates)
        super().__init__(f"Binding for {key} is ambiguously defined: [{rendered}]")


class UnsupportedOptionalParameterError(DependencyResolutionError):
    """Raised when a parameter with a default value is not marked ``DoNotResolve``.

    Attributes:
        producer_label: Debug label of the producer owning the parameter.
        parameter_name: The optional parameter.
    """

    def __init__(self, producer_label: str, parameter_name: str) -> None:
        self.producer_label = producer_label
        self.parameter_name = parameter_name
        super().__init__(
            f"{producer_label}.{parameter_name}: Optional parameters are not allowed in producers "
            "resolved by ContextBuilder. Annotate the parameter with DoNotResolve "
            "if you want the resolution to always use the default value."
        )


class DuplicateNamedBindingError(DependencyResolutionError):
    """Raised when the same binding name is registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A binding with the name {name} already exists")


class CircularDependencyError(DependencyResolutionError):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: The active chain followed by the repeated producer.
    """

    def __init__(self, dependency_chain: List[Any]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Detected dependency loop: {' -> '.join(str(node) for node in dependency_chain)}"
        super().__init__(message)


class BindingTypeMismatchError(DependencyResolutionError):
    """Raised when a named binding is requested with an incompatible type.

    Attributes:
        name: The binding name.
        expected: The requested type.
        actual: The type of the stored value.
    """

    def __init__(self, name: str, expected: Any, actual: Any) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        expected_name = getattr(expected, "__name__", repr(expected))
        super().__init__(
            f"Binding {name} is of type {getattr(actual, '__name__', repr(actual))}, "
            f"which is not compatible with {expected_name}"
        )


class ProducerInvocationError(DependencyResolutionError):
    """Raised when a producer fails while being invoked.

    The original exception is chained as ``__cause__``.

    Attributes:
        producer_label: Debug label of the failing producer.
    """

    def __init__(self, producer_label: str, error: BaseException) -> None:
        self.producer_label = producer_label
        super().__init__(f"Unable to construct {producer_label}: {error}")
