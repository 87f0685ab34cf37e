"""
Conduit value parsers and the registry that maps value types to them.

Overview
- Parser: capability turning one raw token into a value and writing it into a
  command through the declaring parameter's write capability.
  • parse(parameter, command, text) -> value
  • write(parameter, command, value)
  • parse_into(parameter, command, text)
  • help(parameter) -> short hint (e.g. "integer: 0") or None
- Built-in parsers
  • bool, Byte/Short/int/Long (bounded 8/16/unbounded/64-bit), float/Double,
    Char, str, list[T] (accumulating) and enum.Enum subclasses.
- Registry
  • Lookup precedence: explicit registration > built-in default.
  • Enum parsers are registered by the pipeline builder with
    register_enum_if_absent(): the first registration wins, an explicit
    registration is never overwritten.

Value types
- Byte, Short, Long, Double and Char are typing.NewType markers: declare a
  parameter with type=Byte to get range checking while the command still
  receives a plain int.

Quick example
    >>> registry = Registry()
    >>> registry.get(list[int]).help(...)  # doctest: +SKIP
"""
import builtins
import enum
import logging
import re
import typing
from abc import ABC, abstractmethod

from .faults import FaultCode, UnsupportedValueTypeError, getdoc

logger = logging.getLogger(__name__)

Byte = typing.NewType("Byte", int)
Short = typing.NewType("Short", int)
Long = typing.NewType("Long", int)
Double = typing.NewType("Double", float)
Char = typing.NewType("Char", str)


class Parser(ABC):
    """
    Base value parser: subclasses implement parse() and usually help().

    The default write() stores the value through the parameter's write
    capability, replacing whatever the command held before.
    """

    @abstractmethod
    def parse(self, parameter, command, text): ...

    def write(self, parameter, command, value):
        parameter.write(command, value)

    def parse_into(self, parameter, command, text):
        self.write(parameter, command, self.parse(parameter, command, text))

    def help(self, parameter):
        return None


class BooleanParser(Parser):
    def parse(self, parameter, command, text):
        # only a case-insensitive "true" is truthy; anything else reads as false
        return text.lower() == "true"

    def help(self, parameter):
        return "boolean: true or false"


class IntegerParser(Parser):
    """
    Signed integer parser, optionally bounded to a two's complement width.
    """

    def __init__(self, label, bits=None):
        self.label = label
        self.bits = bits

    def parse(self, parameter, command, text):
        # plain decimal digits only: no underscores, no surrounding whitespace
        if not re.fullmatch(r"[+-]?[0-9]+", text):
            raise ValueError("%r is not a decimal integer" % text)
        value = int(text, 10)
        if self.bits is not None and not -(1 << self.bits - 1) <= value < (1 << self.bits - 1):
            raise ValueError("%s out of range for %d-bit integer" % (text, self.bits))
        return value

    def help(self, parameter):
        return "%s: 0" % self.label


class FloatParser(Parser):
    def __init__(self, label):
        self.label = label

    def parse(self, parameter, command, text):
        return float(text)

    def help(self, parameter):
        return "%s: 0.0" % self.label


class CharParser(Parser):
    def parse(self, parameter, command, text):
        if len(text) != 1:
            raise ValueError("expected a single character but received %r" % text)
        return text

    def help(self, parameter):
        return "character: 'a'"


class StringParser(Parser):
    def parse(self, parameter, command, text):
        return text

    def help(self, parameter):
        return "any string"


class ListParser(Parser):
    """
    Accumulating parser for list[T] targets.

    Each token is parsed with the element type's parser and appended; the
    backing list is created on the first value of each command instance, so a
    class-level default such as `tags = []` is never appended to. A positional
    with fixed arity refuses values past its bound.
    """

    def __init__(self, registry):
        self._registry = registry

    @staticmethod
    def element(parameter):
        arguments = typing.get_args(parameter.type)
        return arguments[0] if arguments else str

    def parse(self, parameter, command, text):
        return self._registry.get(self.element(parameter)).parse(parameter, command, text)

    def write(self, parameter, command, value):
        values = parameter.read(command)
        # a list inherited from the command class is shared by every instance
        if not isinstance(values, list) or values is getattr(type(command), parameter.field, None):
            values = []
            parameter.write(command, values)
        if parameter.nargs > 0 and len(values) >= parameter.nargs:
            raise ValueError("%s accepts at most %d values" % (parameter.name, parameter.nargs))
        values.append(value)

    def help(self, parameter):
        return self._registry.get(self.element(parameter)).help(parameter)


class EnumParser(Parser):
    """
    Case-insensitive member-name parser for an enum.Enum subclass.
    """

    def __init__(self, type):
        if not isinstance(type, builtins.type) or not issubclass(type, enum.Enum):
            raise TypeError("enum parser type must be an enum")
        self.type = type
        self.values = {member.name.lower(): member for member in type}

    def parse(self, parameter, command, text):
        try:
            return self.values[text.lower()]
        except KeyError:
            raise ValueError('expected %s but received "%s"' % (parameter.name, text)) from None

    def help(self, parameter):
        return "choice: " + ", ".join(self.values)


class Registry:
    """
    Mapping from value type to parser.

    A registry is shared by every pipeline of one tree and must be fully
    populated before building; afterwards it is only read.
    """

    def __init__(self):
        self._custom = {}
        self._builtin = {
            bool: BooleanParser(),
            Byte: IntegerParser("byte", 8),
            Short: IntegerParser("short number", 16),
            int: IntegerParser("integer"),
            Long: IntegerParser("long number", 64),
            float: FloatParser("float"),
            Double: FloatParser("double"),
            Char: CharParser(),
            str: StringParser(),
            list: ListParser(self),
        }

    def register(self, type, parser, /):
        if not isinstance(parser, Parser):
            raise TypeError("registry parser must be a parser")
        self._custom[type] = parser

    def register_if_absent(self, type, parser, /):
        """
        Register unless a custom parser exists; return whether it was registered.
        """
        if type in self._custom:
            logger.debug("keeping registered parser for %r", type)
            return False
        self.register(type, parser)
        return True

    def register_enum(self, type, /):
        self.register(type, EnumParser(type))

    def register_enum_if_absent(self, type, /):
        if type in self._custom:
            logger.debug("keeping registered parser for %r", type)
            return False
        self.register_enum(type)
        logger.debug("registered enum parser for %r", type)
        return True

    def get_if_present(self, type, /):
        for key in (type, typing.get_origin(type)):
            if key is None:
                continue
            if (parser := self._custom.get(key)) is not None:
                return parser
            if (parser := self._builtin.get(key)) is not None:
                return parser
        return None

    def get(self, type, /):
        if (parser := self.get_if_present(type)) is None:
            raise UnsupportedValueTypeError(
                "no value parser for type %r" % (type,),
                title="unsupported value type",
                code=FaultCode.UNSUPPORTED_VALUE_TYPE,
                hint="register a parser for this type before building the pipeline",
                docs=getdoc(FaultCode.UNSUPPORTED_VALUE_TYPE),
                type=type,
            )
        return parser

    def __contains__(self, type):
        return self.get_if_present(type) is not None


__all__ = (
    "Parser",
    "BooleanParser",
    "IntegerParser",
    "FloatParser",
    "CharParser",
    "StringParser",
    "ListParser",
    "EnumParser",
    "Registry",
    "Byte",
    "Short",
    "Long",
    "Double",
    "Char",
)
