from enum import Enum


class SourceKind(str, Enum):
    """Defines how a source passed to the builder is registered.

    Attributes:
        TYPE: A class, constructed through its constructor.
        FACTORY: A function or method, constructed by calling it.
        NAMED: A ``(name, source)`` pair, resolvable only by name.
        VALUE: A ready-made value, registered as-is.
    """

    TYPE = "type"
    FACTORY = "factory"
    NAMED = "named"
    VALUE = "value"

    def __str__(self) -> str:
        return self.value
