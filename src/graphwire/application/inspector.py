import collections.abc
import inspect
from typing import Annotated, Any, Callable, Dict, List, Optional, get_args, get_origin, get_type_hints

from graphwire.domain import (
    USE_PARAMETER_NAME,
    DoNotResolve,
    InvalidProducerError,
    IParameterInspector,
    MissingPrimaryConstructorError,
    ParameterDescriptor,
    Producer,
    ResolveAll,
    ResolveByName,
    SourceKind,
)
from graphwire.domain.markers import find_marker

# Declared types accepted for ResolveAll parameters; a list is always injected.
COLLECTION_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Collection,
    collections.abc.Iterable,
)


class SignatureInspector(IParameterInspector):
    """Describes producers using constructor signatures and type hints.

    Uses Python's inspect module to analyze signatures, and ``typing.Annotated``
    metadata to find resolution markers.
    """

    def producer_for_type(self, cls: type) -> Producer:
        """Create a producer for a class.

        Example:
            >>> inspector = SignatureInspector()
            >>> producer = inspector.producer_for_type(UserService)
            >>> producer.debug_label
            'UserService'
        """
        if getattr(cls, "_is_protocol", False):
            raise MissingPrimaryConstructorError(cls, "protocols cannot be instantiated")
        if inspect.isabstract(cls):
            raise MissingPrimaryConstructorError(cls, "abstract classes cannot be instantiated")
        try:
            inspect.signature(cls)
        except (TypeError, ValueError) as e:
            raise MissingPrimaryConstructorError(cls, str(e)) from e

        return Producer(
            callable=cls,
            output_type=cls,
            debug_label=cls.__name__,
            kind=SourceKind.TYPE,
        )

    def producer_for_factory(self, factory: Callable[..., Any]) -> Producer:
        """Create a producer for a factory function, keyed by its return type.

        Example:
            >>> def create_clock() -> Clock:
            ...     return SystemClock()
            >>> inspector.producer_for_factory(create_clock).output_type
            <class 'Clock'>
        """
        label = f"{getattr(factory, '__name__', repr(factory))}()"
        try:
            return_annotation = inspect.signature(factory).return_annotation
        except (TypeError, ValueError):
            return_annotation = inspect.Signature.empty
        if isinstance(return_annotation, str):
            return_annotation = self._type_hints(factory, label).get("return", inspect.Signature.empty)
        if return_annotation is inspect.Signature.empty:
            raise InvalidProducerError(label, "Factory functions must declare a return type")

        return Producer(
            callable=factory,
            output_type=return_annotation,
            debug_label=label,
            kind=SourceKind.FACTORY,
        )

    def parameters(self, producer: Producer) -> List[ParameterDescriptor]:
        """Describe the parameters of a producer.

        ``*args`` and ``**kwargs`` are not described, since they cannot be resolved.
        """
        target = producer.callable
        if producer.kind == SourceKind.TYPE:
            hints_source = target.__init__ if target.__init__ is not object.__init__ else target.__new__
        else:
            hints_source = target

        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError) as e:
            raise InvalidProducerError(producer.debug_label, f"Cannot inspect signature: {e}") from e
        hints: Optional[Dict[str, Any]] = None

        descriptors = []
        for parameter in signature.parameters.values():
            if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            annotation = parameter.annotation
            if annotation is inspect.Parameter.empty:
                annotation = None
            elif isinstance(annotation, str):
                # Postponed annotations are only evaluated when needed.
                if hints is None:
                    hints = self._type_hints(hints_source, producer.debug_label)
                annotation = hints.get(parameter.name)
            descriptors.append(self._describe(parameter, annotation))
        return descriptors

    def _describe(self, parameter: inspect.Parameter, annotation: Any) -> ParameterDescriptor:
        metadata: tuple = ()
        declared_type = annotation
        if get_origin(annotation) is Annotated:
            declared_type, *extras = get_args(annotation)
            metadata = tuple(extras)

        by_name = find_marker(metadata, ResolveByName)
        collect_all = find_marker(metadata, ResolveAll) is not None

        element_type = None
        if collect_all and get_origin(declared_type) in COLLECTION_ORIGINS and get_args(declared_type):
            element_type = get_args(declared_type)[0]

        return ParameterDescriptor(
            name=parameter.name,
            declared_type=declared_type,
            is_optional=parameter.default is not inspect.Parameter.empty,
            positional_only=parameter.kind == inspect.Parameter.POSITIONAL_ONLY,
            explicit_name=by_name.binding_name(parameter.name) if by_name is not None else None,
            uses_parameter_name=by_name is not None and by_name.name == USE_PARAMETER_NAME,
            ignore=find_marker(metadata, DoNotResolve) is not None,
            collect_all=collect_all,
            element_type=element_type,
        )

    @staticmethod
    def _type_hints(target: Any, label: str) -> Dict[str, Any]:
        try:
            return get_type_hints(target, include_extras=True)
        except NameError as e:
            raise InvalidProducerError(label, f"Cannot resolve type hint: {e}") from e
        except TypeError:
            # Builtins and other callables without annotations.
            return {}
