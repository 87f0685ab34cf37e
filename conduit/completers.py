"""
Conduit completers: value suggestions for one parameter during completion.

Overview
- Completer.complete(context, parameter, text) -> list[str] | None
  • None means "nothing to offer" and is treated like an empty list.
- DefaultCompleter
  • enum.Enum subclasses: lower-cased member names.
  • bool: "true" and "false".
  • integer types (int, Byte, Short, Long): "0".
  • list[T]: whatever T completes with.
  • anything else: None.
- ChoicesCompleter(*choices)
  • A fixed set of candidates, kept in declaration order.

Both built-in completers only return candidates starting with the partial text.
"""
import builtins
import enum
import typing
from abc import ABC, abstractmethod


def _resolve(type, /):
    # NewType markers chain through __supertype__ down to a real class
    while hasattr(type, "__supertype__"):
        type = type.__supertype__
    if typing.get_origin(type) is list:
        arguments = typing.get_args(type)
        return _resolve(arguments[0]) if arguments else str
    return type


class Completer(ABC):
    @abstractmethod
    def complete(self, context, parameter, text): ...


class DefaultCompleter(Completer):
    """
    Completer used by every parameter that does not declare its own.
    """

    def candidates(self, context, parameter, text):
        type = _resolve(parameter.type)
        if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
            return [member.name.lower() for member in type]
        if type is bool:
            return ["true", "false"]
        if type is int:
            return ["0"]
        return None

    def complete(self, context, parameter, text):
        if (candidates := self.candidates(context, parameter, text)) is None:
            return None
        return [candidate for candidate in candidates if candidate.startswith(text)]


class ChoicesCompleter(Completer):
    def __init__(self, *choices):
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError("choices completer choices must be strings")
        self.choices = tuple(dict.fromkeys(choices))

    def complete(self, context, parameter, text):
        return [choice for choice in self.choices if choice.startswith(text)]

    def __repr__(self):
        return "choices-completer(%s)" % ", ".join(map(repr, self.choices))


__all__ = (
    "Completer",
    "DefaultCompleter",
    "ChoicesCompleter",
)
