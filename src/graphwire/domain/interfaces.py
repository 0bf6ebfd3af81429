from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Type, TypeVar

from graphwire.domain.models import ParameterDescriptor, Producer

T = TypeVar("T")


class IParameterInspector(ABC):
    """Abstract interface for describing producers.

    The resolver never inspects runtime metadata itself; everything it knows
    about a producer's parameters comes through this interface.
    """

    @abstractmethod
    def producer_for_type(self, cls: type) -> Producer:
        """Create a producer constructing ``cls`` through its constructor.

        Raises:
            MissingPrimaryConstructorError: If the class cannot be constructed.
        """

    @abstractmethod
    def producer_for_factory(self, factory: Callable[..., Any]) -> Producer:
        """Create a producer calling ``factory``, keyed by its declared return type.

        Raises:
            InvalidProducerError: If the factory declares no return type.
        """

    @abstractmethod
    def parameters(self, producer: Producer) -> List[ParameterDescriptor]:
        """Describe the parameters of a producer, in declaration order.

        Raises:
            InvalidProducerError: If a parameter cannot be described.
        """


class IBindingRegistry(ABC):
    """Abstract interface for the type-keyed binding store."""

    @abstractmethod
    def register_value(self, key: Any, value: Any) -> None:
        """Register a candidate under a single type key.

        Args:
            key: The type key.
            value: A plain value, an unconstructed producer or a named placeholder.
        """

    @abstractmethod
    def register_under_all_keys(self, value: Any, output_type: Any) -> None:
        """Register a candidate under its type and every ancestor type.

        Args:
            value: The candidate.
            output_type: The type the candidate produces.
        """

    @abstractmethod
    def lookup(self, key: Any, collect_all: bool = False) -> Any:
        """Look up candidates for a type key.

        Args:
            key: The type to look up.
            collect_all: Return every candidate as a list.

        Returns:
            The single candidate or ``None`` if there is none; with ``collect_all``
            a list of every candidate.

        Raises:
            AmbiguousBindingError: If several candidates exist and ``collect_all`` is false.
        """


class IResolutionContext(ABC):
    """Abstract interface for the finished, read-only resolution result."""

    @abstractmethod
    def get(self, dependency_type: Type[T], name: Optional[str] = None) -> T:
        """Return the value for a type, or for a binding name.

        Args:
            dependency_type: The type to return.
            name: Binding name. Named bindings are only returned when a name is given.
        """

    @abstractmethod
    def has_name(self, name: str) -> bool:
        """Whether a binding with this name exists."""
