"""
Conduit command pipelines: the immutable command tree and its execute/complete passes.

What this module provides
- Pipeline: one node of the command tree. It owns the command type, its
  label, the ordered options and positionals collected from the command's
  __parameters__, the label -> child map, a non-owning parent reference, the
  shared value-parser registry and the option prefix.
  • execute(data, arguments) / execute_with(context, label, tokens)
  • complete(data, arguments) / complete_with(context, label, tokens)
- Builder: mutable description of a tree, validated and frozen by build().
  • Pipeline.builder(type, name, ...) -> Builder
  • Builder.subcommand(type, name, ...) -> child Builder

Execution model
- Deterministic single left-to-right pass, no backtracking, one token of
  lookahead: options, then required-option check, then positionals in
  declaration order, then either subcommand dispatch through the parent's
  execute_next() hook or the command's terminal execute().
- A skip-parsing option (help) short-circuits straight into execute().
- User-input problems raise faults (conduit.faults); they travel unmodified
  through nested delegation.

Schema errors
- Everything wrong with the schema is raised by the builder (TypeError,
  ValueError, UnsupportedValueTypeError) before any execution.

Quick example
    >>> root = Pipeline.builder(Tool, "tool")
    >>> root.subcommand(Status, "status")
    >>> pipeline = root.build()
    >>> pipeline.execute(None, "status --short")
"""
import builtins
import enum
import inspect
import logging
import re
import shlex
import typing
from collections.abc import Callable, Iterable

from .arguments import Option
from .commands import Command, parameters
from .contexts import Context
from .faults import *
from .parsers import Registry
from .tokens import Tokenizer
from .utils import *

logger = logging.getLogger(__name__)


def _tokenize(arguments, /):
    if isinstance(arguments, Tokenizer):
        return arguments
    if isinstance(arguments, str):
        return Tokenizer(shlex.split(arguments))
    if isinstance(arguments, Iterable):
        return Tokenizer(arguments)
    raise TypeError("pipeline arguments must be a tokenizer, a string or an iterable of strings")


def _enum(type, /):
    """
    Return the enum class behind a value type (directly or as list element), or None.
    """
    if typing.get_origin(type) is list and (arguments := typing.get_args(type)):
        type = arguments[0]
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return type
    return None


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} name must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} name cannot be empty")
    elif re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} name cannot contain whitespaces")
    return name


def _sanitize_descr(cls, type, descr, /):
    if descr is Unset:
        # only a docstring written on the command class itself, never an inherited one
        if (doc := vars(type).get("__doc__")) is None:
            return None
        return inspect.cleandoc(doc).split("\n\n")[0].replace("\n", " ") or None
    if not isinstance(descr, str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return descr


class Builder(metaclass=SchemaType):
    """
    Mutable description of a command tree, frozen into Pipelines by build().

    Sibling labels and sibling command types are checked as soon as a
    subcommand is added; everything else is checked by build().
    """

    __introspectable__ = (
        "type",
        "name",
        "descr",
        "registry",
        "prefix",
        "factory",
        "children",
    )
    __displayable__ = (
        "type",
        "name",
        "prefix",
        "children",
    )

    def __init__(self, type, name, /, *, registry=Unset, prefix="-", factory=Unset, descr=Unset):
        cls = builtins.type(self)
        if not isinstance(type, builtins.type) or not issubclass(type, Command):
            raise TypeError(f"{cls.__typename__} command type must be a command subclass")
        if not isinstance(registry, Registry | Unset):
            raise TypeError(f"{cls.__typename__} 'registry' must be a registry")
        if not isinstance(prefix, str):
            raise TypeError(f"{cls.__typename__} 'prefix' must be a string")
        elif not prefix or re.search(r"\s", prefix):
            raise ValueError(f"{cls.__typename__} 'prefix' must be a non-empty string without whitespaces")
        if not isinstance(factory, Callable | Unset):
            raise TypeError(f"{cls.__typename__} 'factory' must be callable")

        self._type = type
        self._name = _sanitize_name(cls, name)
        self._descr = _sanitize_descr(cls, type, descr)
        self._registry = Registry() if registry is Unset else registry
        self._prefix = prefix
        self._factory = coalesce(factory, type)
        self._children = {}

    def subcommand(self, type, name, /, *, factory=Unset, descr=Unset):
        """
        Add a child command under this one and return its builder.

        The child shares this builder's registry and option prefix.

        Raises
        - ValueError: when the label or the command type is already used by a sibling.
        """
        child = Builder(type, name, registry=self._registry, prefix=self._prefix, factory=factory, descr=descr)
        if child.name in self._children:
            raise ValueError(f"{builtins.type(self).__typename__} subcommand name {child.name!r} is already in use")
        if any(sibling.type is child.type for sibling in self._children.values()):
            raise ValueError(f"{builtins.type(self).__typename__} command type {type.__qualname__!r} is already used by a sibling subcommand")
        self._children[child.name] = child
        return child

    def build(self):
        """
        Validate the whole tree and freeze it.

        Enum value types found while building are registered in the shared
        registry unless a parser for them already exists.
        """
        return Pipeline(self, None)


class Pipeline(metaclass=SchemaType):
    """
    Immutable command-tree node.

    Pipelines are only created by Builder.build(); the tree never changes
    afterwards and can be shared by concurrent, independent executions as
    long as each brings its own tokenizer and context.
    """

    __introspectable__ = (
        "name",
        "type",
        "descr",
        "parent",
        "options",
        "positionals",
        "children",
        "registry",
        "prefix",
        "factory",
    )
    __displayable__ = (
        "name",
        "type",
        "descr",
        "options",
        "positionals",
        "children",
    )

    @staticmethod
    def builder(type, name, /, *, registry=Unset, prefix="-", factory=Unset, descr=Unset):
        return Builder(type, name, registry=registry, prefix=prefix, factory=factory, descr=descr)

    def __init__(self, builder, parent, /):
        if not isinstance(builder, Builder):
            raise TypeError("pipelines are created with Pipeline.builder(...).build()")
        cls = type(self)

        self._name = builder.name
        self._type = builder.type
        self._descr = builder.descr
        self._parent = parent
        self._registry = builder.registry
        self._prefix = builder.prefix
        self._factory = builder.factory

        self._options = []
        self._positionals = []
        self._lookup = {}
        for parameter in parameters(self._type):
            if isinstance(parameter, Option):
                for name in parameter.names:
                    if not name.startswith(self._prefix) or name == self._prefix:
                        raise ValueError(
                            f"{cls.__typename__} {self._name!r} option name {name!r} must start with {self._prefix!r}"
                        )
                    if name in self._lookup:
                        raise ValueError(f"{cls.__typename__} {self._name!r} option name {name!r} is declared twice")
                    self._lookup[name] = parameter
                self._options.append(parameter)
            else:
                self._positionals.append(parameter)

        unlimited = [positional for positional in self._positionals if positional.nargs < 0]
        if len(unlimited) > 1:
            raise ValueError(f"{cls.__typename__} {self._name!r} declares more than one unlimited positional")
        if unlimited and unlimited[0] is not self._positionals[-1]:
            raise ValueError(f"{cls.__typename__} {self._name!r} unlimited positional must be the last one")
        if unlimited and builder.children:
            raise ValueError(f"{cls.__typename__} {self._name!r} cannot have subcommands after an unlimited positional")

        for parameter in self._options + self._positionals:
            if (type_ := _enum(parameter.type)) is not None:
                self._registry.register_enum_if_absent(type_)
            self._registry.get(parameter.type)

        self._children = {label: Pipeline(child, self) for label, child in builder.children.items()}

    @property
    def parents(self):
        """
        Ancestors of this node, root first (empty for the root).
        """
        parents = []
        parent = self._parent
        while parent is not None:
            parents.append(parent)
            parent = parent.parent
        return tuple(reversed(parents))

    @property
    def root(self):
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def path(self):
        return self.parents + (self,)

    def child(self, label, /):
        return self._children.get(label)

    def option(self, name, /):
        return self._lookup.get(name)

    def _fault(self, cls, message, /, **options):
        return cls(message, pipeline=self, docs=getdoc(options["code"]), **options)

    def _parse(self, parameter, command, text):
        parser = self._registry.get(parameter.type)
        expected = parser.help(parameter)
        try:
            parser.parse_into(parameter, command, text)
        except CommandException:
            raise
        except Exception as exception:
            raise self._fault(
                ValueParseError,
                "invalid value %r for %s: %s" % (text, parameter.name, exception),
                title="invalid value",
                code=FaultCode.VALUE_PARSE_ERROR,
                hint=expected and "expected " + expected,
                type=parameter.type,
                text=text,
                parameter=parameter,
            ) from exception

    def execute(self, data=None, arguments=(), /, *, label=Unset):
        """
        Run the tree against one argument list and return the terminal action's result.

        arguments may be a Tokenizer, a shell-like string (split with shlex)
        or an iterable of strings. label defaults to this pipeline's name.
        """
        tokens = _tokenize(arguments)
        return self.execute_with(Context(data, tokens), coalesce(label, self._name), tokens)

    def execute_with(self, context, label, tokens, /):
        """
        Parse this node's share of the tokens into a fresh command and run or delegate it.
        """
        command = self._factory()
        context.append(self, self._type, command, label)

        counts = dict.fromkeys(self._options, 0)
        while tokens.has_next() and tokens.peek().startswith(self._prefix):
            token = tokens.peek()
            if (option := self._lookup.get(token)) is None:
                raise self._fault(
                    UnknownOptionError,
                    "unknown option %r" % token,
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    hint="valid options are: %s" % ", ".join(self._lookup) if self._lookup else "this command takes no options",
                    option=token,
                )
            tokens.skip()
            counts[option] += 1

            if option.flag:
                option.write(command, option.store_true)
            elif counts[option] > 1 and not option.repeatable:
                raise self._fault(
                    NotRepeatableError,
                    "option %r cannot be given more than once" % token,
                    title="repeated option",
                    code=FaultCode.NOT_REPEATABLE,
                    hint="keep a single occurrence of %s" % " / ".join(option.names),
                    option=option,
                )
            elif not tokens.has_next():
                raise self._fault(
                    MissingValueError,
                    "option %r expects a value" % token,
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="write it as '%s %s'" % (token, option.symbol),
                    option=option,
                )
            else:
                self._parse(option, command, tokens.next())

            if option.skip_parsing:
                logger.debug("option %r of %r skips parsing", token, label)
                return command.execute(context)

        if missing := [option for option in self._options if option.required and counts[option] == 0]:
            names = tuple(option.name for option in missing)
            raise self._fault(
                MissingRequiredOptionError,
                "missing required %s: %s" % (pluralize("option") if len(names) > 1 else "option", ", ".join(names)),
                title="missing option",
                code=FaultCode.MISSING_REQUIRED_OPTION,
                hint="provide %s" % " and ".join(names),
                names=names,
            )

        for positional in self._positionals:
            required = abs(positional.nargs)
            if not tokens.has_next(required):
                raise self._fault(
                    MissingArgumentsError,
                    "missing %s %s: expected %s%d but received %d" % (
                        "argument" if required == 1 else pluralize("argument"),
                        positional.symbol,
                        "at least " if positional.nargs < 0 else "",
                        required,
                        tokens.remaining(),
                    ),
                    title="missing arguments",
                    code=FaultCode.MISSING_ARGUMENTS,
                    positional=positional,
                )
            for text in tokens.stream() if positional.nargs < 0 else tokens.next(required):
                self._parse(positional, command, text)

        if tokens.has_next():
            if not self._children:
                leftover = " ".join(tokens.stream())
                raise self._fault(
                    UnexpectedArgumentsError,
                    "unexpected arguments: %s" % leftover,
                    title="unexpected arguments",
                    code=FaultCode.UNEXPECTED_ARGUMENTS,
                    hint="remove the extra arguments",
                    leftover=leftover,
                )
            label = tokens.next()
            if (child := self._children.get(label)) is None:
                raise self._fault(
                    UnknownSubcommandError,
                    "unknown subcommand %r" % label,
                    title="unknown subcommand",
                    code=FaultCode.UNKNOWN_SUBCOMMAND,
                    hint="available subcommands are: %s" % ", ".join(self._children),
                    label=label,
                )
            logger.debug("dispatching %r to %s", label, child.type.__qualname__)
            return command.execute_next(context, self, child, label, tokens)

        return command.execute(context)

    def complete(self, data=None, arguments=(), /, *, label=Unset):
        """
        Suggest completions for the final token of a partial argument list.

        Returns None when no tokens were given, otherwise a sorted, deduplicated list.
        """
        tokens = _tokenize(arguments)
        return self.complete_with(Context(data, tokens), coalesce(label, self._name), tokens)

    def complete_with(self, context, label, tokens, /):
        command = self._factory()
        context.append(self, self._type, command, label)

        if not tokens.has_next():
            return None

        def values(parameter, text):
            return sorted(set(parameter.completer.complete(context, parameter, text) or ()))

        def unsatisfied(prefix=""):
            return {
                name
                for option in self._options if option.repeatable or counts[option] == 0
                for name in option.names if name.startswith(prefix)
            }

        results = set()
        counts = dict.fromkeys(self._options, 0)
        while tokens.has_next():
            token = tokens.peek()
            if not token.startswith(self._prefix):
                results |= unsatisfied()
                break
            tokens.skip()
            if (option := self._lookup.get(token)) is None or not tokens.has_next():
                results |= unsatisfied(token)
                continue
            counts[option] += 1
            if option.skip_parsing or option.flag:
                continue
            text = tokens.next()
            if not tokens.has_next():
                return values(option, text)

        if missing := [option for option in self._options if option.required and counts[option] == 0]:
            return sorted({name for option in missing for name in option.names})

        for positional in self._positionals:
            required = abs(positional.nargs)
            if not tokens.has_next(required) or positional.nargs < 0:
                if tokens.has_next():
                    return values(positional, tokens.last())
                return sorted(results)
            tokens.skip(required)

        if tokens.has_next():
            if not self._children:
                prefix = tokens.last()
                return sorted(result for result in results if result.startswith(prefix))
            label = tokens.next()
            if (child := self._children.get(label)) is not None and tokens.has_next():
                return child.complete_with(context, label, tokens)
            return sorted(name for name in self._children if name.startswith(label))

        return sorted(results)


__all__ = (
    "Pipeline",
    "Builder",
)
