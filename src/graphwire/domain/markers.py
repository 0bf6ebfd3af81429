"""Resolution markers, attached to parameters with ``typing.Annotated``.

Example:
    >>> class FrobnicatorClient:
    ...     def __init__(
    ...         self,
    ...         frobnicator_url: Annotated[str, ResolveByName()],
    ...         plugins: Annotated[List[Plugin], ResolveAll()],
    ...         timeout: Annotated[float, DoNotResolve()] = 5.0,
    ...     ):
    ...         ...

Marker classes may be used without instantiating them, i.e. ``Annotated[str, ResolveByName]``
means the same as ``Annotated[str, ResolveByName()]``.
"""

from typing import Any, Optional

USE_PARAMETER_NAME = "USE_PARAMETER_NAME"


class ResolveByName:
    """Mark a parameter as injected by name rather than type.

    Without an explicit name the parameter name is used as binding name.

    Values are also registered under their base classes, so a ``bool`` flag
    satisfies an ``int`` parameter and makes it ambiguous next to an ``int``
    value. Bind such plain values by name.

    Attributes:
        name: The binding name, or ``USE_PARAMETER_NAME``.
    """

    def __init__(self, name: str = USE_PARAMETER_NAME) -> None:
        self.name = name

    def binding_name(self, parameter_name: str) -> str:
        if self.name == USE_PARAMETER_NAME:
            return parameter_name
        return self.name

    def __repr__(self) -> str:
        if self.name == USE_PARAMETER_NAME:
            return "ResolveByName()"
        return f"ResolveByName({self.name!r})"


class DoNotResolve:
    """Mark an optional parameter to be ignored by dependency resolution.

    There is no marker to do the inverse, i.e. actually resolve an optional parameter.
    """

    def __repr__(self) -> str:
        return "DoNotResolve()"


class ResolveAll:
    """Resolve all matching values, e.g. every implementation of an interface.

    The marked parameter has to be declared as a container of the element type,
    such as ``List[SomeInterface]``.
    """

    def __repr__(self) -> str:
        return "ResolveAll()"


def find_marker(metadata: Any, marker_type: type) -> Optional[Any]:
    """Return the first marker of ``marker_type`` in ``Annotated`` metadata.

    Bare marker classes are instantiated with their defaults.
    """
    for item in metadata:
        if item is marker_type:
            return marker_type()
        if isinstance(item, marker_type):
            return item
    return None
