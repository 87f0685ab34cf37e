"""
Conduit faults (user-facing parsing errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing
  parsing error. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- CommandException: base type that carries a message + options and knows how
  to render itself in a friendly, lowercased and actionable way.
- trigger(): central entry point to surface any fault (respecting
  shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Propagation
- The pipelines raise faults directly; they travel unmodified through nested
  subcommand delegation up to the top-level caller.
- Schema construction problems are not faults: they are raised as
  TypeError/ValueError while building, before any execution.

Integration
- The entry point (conduit.commands.invoke) calls trigger(fault, **ctx).
- In non-shell mode, faults are raised; in shell mode, they are rendered via
  rich on stderr and the process exits with the fault's status.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - routing (2110x)
      • UNKNOWN_SUBCOMMAND, UNEXPECTED_ARGUMENTS
    - options (2111x)
      • UNKNOWN_OPTION, MISSING_VALUE, NOT_REPEATABLE, MISSING_REQUIRED_OPTION
    - positionals (2112x)
      • MISSING_ARGUMENTS
    - values (2113x)
      • VALUE_PARSE_ERROR, UNSUPPORTED_VALUE_TYPE
    - unexpected (2119x)
      • UNEXPECTED_ERROR (rendered by the entry point only)
    """
    # --- routing errors ---
    UNKNOWN_SUBCOMMAND          = 21101
    UNEXPECTED_ARGUMENTS        = 21102

    # --- option errors ---
    UNKNOWN_OPTION              = 21111
    MISSING_VALUE               = 21112
    NOT_REPEATABLE              = 21113
    MISSING_REQUIRED_OPTION     = 21114

    # --- positional errors ---
    MISSING_ARGUMENTS           = 21121

    # --- value errors ---
    VALUE_PARSE_ERROR           = 21131
    UNSUPPORTED_VALUE_TYPE      = 21132

    # --- unexpected errors ---
    UNEXPECTED_ERROR            = 21191

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base of every user-facing parsing fault.

    - message: one lowercased sentence describing what went wrong.
    - options: immutable mapping with rendering context and payload, typically
      title, code, hint, docs, pipeline plus fault-specific keys.
    - status: process exit status used when triggered in shell mode.
    """
    status = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        try:
            name = self.options["pipeline"].root.name
        except KeyError:
            name = "conduit"
        prog = text(getattr(main, "__prog__", name), styler("prog-name"))

        code = self.options.get("code", FaultCode.UNEXPECTED_ERROR)
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize(), styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class UnknownOptionError(CommandException): ...
class MissingValueError(CommandException): ...
class NotRepeatableError(CommandException): ...
class MissingRequiredOptionError(CommandException): ...
class MissingArgumentsError(CommandException): ...
class UnexpectedArgumentsError(CommandException): ...
class UnknownSubcommandError(CommandException): ...
class ValueParseError(CommandException): ...
class UnsupportedValueTypeError(CommandException): ...


class UnexpectedCommandError(CommandException):
    status = 2


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, the fault is raised.

    typical options
    - pipeline, shell, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "UnknownOptionError",
    "MissingValueError",
    "NotRepeatableError",
    "MissingRequiredOptionError",
    "MissingArgumentsError",
    "UnexpectedArgumentsError",
    "UnknownSubcommandError",
    "ValueParseError",
    "UnsupportedValueTypeError",
    "UnexpectedCommandError",
    "FaultCode",
    "trigger",
    "getdoc",
)
