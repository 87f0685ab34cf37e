r"""
Conduit parameter declarations.

Overview
- Option: named, prefix-marked parameter (e.g. -o/--output), order-independent
  among options. Consumes exactly one value token unless it is a boolean flag.
- Positional: unnamed parameter consumed strictly in declaration order after
  all options, with an arity (nargs):
  • nargs > 0: exactly that many tokens.
  • nargs == 0: no token at all (marker-only positional).
  • nargs < 0: every remaining token, at least abs(nargs) of them.

Both declarations carry a target value type (looked up in the value-parser
registry), a target field and a write capability: writer(command, value)
stores a parsed value, reader(command) returns the current one (used by
accumulating parsers such as list[T]).

Metadata (sanitized on construction)
- Shared
  • field: Unset | str, a valid identifier. Defaults to the longest option
    name or the positional name, stripped of leading markers, lower-cased,
    hyphens turned into underscores.
  • type: a class, a parameterized generic (list[int]) or a typing.NewType.
  • symbol: Unset | str, placeholder shown in help. Defaults to the
    upper-cased field (positional: its name).
  • descr: Unset | str, short description, non-empty when provided.
  • completer: Unset | Completer (defaults to DefaultCompleter).
  • writer/reader: Unset | callable.
- Option only
  • names: one or more non-empty, whitespace-free, unique strings. The
    option prefix is enforced when the pipeline is built.
  • required, repeatable, store_true, store_false, skip_parsing: bool.
  • A flag (store_true/store_false) must target bool and cannot be both.
- Positional only
  • name: non-empty, whitespace-free string.
  • nargs: int.

Quick example:
    >>> from conduit.arguments import Option, Positional
    >>> Option("-v", "--verbose", store_true=True).field
    'verbose'
    >>> Positional("FILES", type=list[str], nargs=-1).symbol
    'FILES'
"""
import builtins
import re
import typing

from .completers import Completer, DefaultCompleter
from .utils import *

DEFAULT_COMPLETER = DefaultCompleter()


def _writer(field, /):
    @rename("write_" + field)
    def writer(command, value):
        setattr(command, field, value)
    return writer


def _reader(field, /):
    @rename("read_" + field)
    def reader(command):
        return getattr(command, field, None)
    return reader


def _normalize(name, /):
    return re.sub(r"^\W+", "", name).replace("-", "_").lower()


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the metadata shared by options and positionals.

    Expects metadata["field"] to already hold the derived default when the
    caller left it Unset. Mutates metadata in place.

    Raises
    - TypeError: for wrongly typed values.
    - ValueError: for empty strings or non-identifier fields.
    """
    if not isinstance(field := metadata["field"], str):
        raise TypeError(f"{cls.__typename__} 'field' must be a string")
    elif not field.isidentifier():
        raise ValueError(f"{cls.__typename__} 'field' must be a valid identifier")

    type = metadata["type"]
    if not (
        isinstance(type, builtins.type) or
        typing.get_origin(type) is not None or
        hasattr(type, "__supertype__")
    ):
        raise TypeError(f"{cls.__typename__} 'type' must be a type")

    if not isinstance(symbol := metadata["symbol"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'symbol' must be a string")
    elif isinstance(symbol, str) and not (symbol := symbol.strip()):
        raise ValueError(f"{cls.__typename__} 'symbol' cannot be empty")
    metadata["symbol"] = symbol

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not isinstance(completer := metadata["completer"], Completer | Unset):
        raise TypeError(f"{cls.__typename__} 'completer' must be a completer")
    metadata["completer"] = coalesce(completer, DEFAULT_COMPLETER)

    for capability, default in (("writer", _writer), ("reader", _reader)):
        if metadata[capability] is Unset:
            metadata[capability] = default(field)
        elif not callable(metadata[capability]):
            raise TypeError(f"{cls.__typename__} '{capability}' must be callable")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate option names and flag polarity.

    Names keep their declaration order (help output lists them as given).
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.search(r"\s", name):
            raise ValueError(f"{cls.__typename__} names cannot contain whitespaces")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)

    if metadata["store_true"] and metadata["store_false"]:
        raise ValueError(f"{cls.__typename__} cannot be both 'store_true' and 'store_false'")

    flag = metadata["store_true"] or metadata["store_false"]
    metadata["type"] = coalesce(metadata["type"], bool if flag else str)
    if flag and metadata["type"] is not bool:
        raise TypeError(f"flag {cls.__typename__} 'type' must be bool")


class Option(metaclass=SchemaType):
    """
    Named parameter specification.

    An option is matched by exact name. A flag (store_true/store_false) writes
    a constant and consumes no value; any other option parses the next token.
    A skip-parsing option short-circuits the rest of the parse straight into
    the command's terminal action (help is the canonical example).

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - name: first declared name; flag: store_true or store_false; nargs: always -1.
    """

    __introspectable__ = (
        "names",
        "field",
        "type",
        "symbol",
        "descr",
        "required",
        "repeatable",
        "store_true",
        "store_false",
        "skip_parsing",
        "completer",
        "writer",
        "reader",
    )
    __displayable__ = (
        "names",
        "field",
        "type",
        "required",
        "repeatable",
        "store_true",
        "store_false",
        "skip_parsing",
    )

    def __init__(
            self,
            *names,
            field=Unset,
            type=Unset,
            required=False,
            repeatable=False,
            store_true=False,
            store_false=False,
            skip_parsing=False,
            symbol=Unset,
            descr=Unset,
            completer=Unset,
            writer=Unset,
            reader=Unset
    ):
        metadata = {
            "names": names,
            "type": type,
            "required": bool(required),
            "repeatable": bool(repeatable),
            "store_true": bool(store_true),
            "store_false": bool(store_false),
            "skip_parsing": bool(skip_parsing),
            "symbol": symbol,
            "descr": descr,
            "completer": completer,
            "writer": writer,
            "reader": reader,
        }
        _sanitize_named_metadata(builtins.type(self), metadata)
        metadata["field"] = coalesce(field, _normalize(max(metadata["names"], key=len)))
        _sanitize_metadata(builtins.type(self), metadata)
        metadata["symbol"] = coalesce(metadata["symbol"], metadata["field"].upper())

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def name(self):
        return self._names[0]

    @property
    def flag(self):
        return self._store_true or self._store_false

    @property
    def nargs(self):
        return -1

    def write(self, command, value, /):
        self._writer(command, value)

    def read(self, command, /):
        return self._reader(command)


class Positional(metaclass=SchemaType):
    """
    Positional parameter specification.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - names: the one-element tuple (name,); required: nargs != 0; repeatable
      and flag are always False.
    """

    __introspectable__ = (
        "name",
        "field",
        "type",
        "nargs",
        "symbol",
        "descr",
        "completer",
        "writer",
        "reader",
    )
    __displayable__ = (
        "name",
        "field",
        "type",
        "nargs",
    )

    def __init__(
            self,
            name,
            /,
            field=Unset,
            type=str,
            nargs=1,
            symbol=Unset,
            descr=Unset,
            *,
            completer=Unset,
            writer=Unset,
            reader=Unset
    ):
        cls = builtins.type(self)
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        elif re.search(r"\s", name):
            raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespaces")

        if not isinstance(nargs, int) or isinstance(nargs, bool):
            raise TypeError(f"{cls.__typename__} 'nargs' must be an integer")

        metadata = {
            "name": name,
            "field": coalesce(field, _normalize(name)),
            "type": type,
            "nargs": nargs,
            "symbol": symbol,
            "descr": descr,
            "completer": completer,
            "writer": writer,
            "reader": reader,
        }
        _sanitize_metadata(cls, metadata)
        metadata["symbol"] = coalesce(metadata["symbol"], name)

        for key, object in metadata.items():
            setattr(self, "_" + key, object)

    @property
    def names(self):
        return (self._name,)

    @property
    def required(self):
        return self._nargs != 0

    @property
    def repeatable(self):
        return False

    @property
    def flag(self):
        return False

    @property
    def unlimited(self):
        return self._nargs < 0

    def write(self, command, value, /):
        self._writer(command, value)

    def read(self, command, /):
        return self._reader(command)


__all__ = (
    "Option",
    "Positional",
)
