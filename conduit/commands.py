"""
Conduit command layer: command base types and the process entry point.

What this module provides
- Command: abstract base of every command. A command class declares its
  parameters in a __parameters__ tuple (Option/Positional); the tuples of
  every class along the MRO are collected base-first, so a base such as
  HelpedCommand contributes its -h/--help option to every subclass.
  • execute(context): terminal action, returns the invocation's result.
  • execute_next(context, pipeline, child, label, tokens): continuation hook
    called when this command delegates to a subcommand; override it to wrap
    pre/post logic around the delegation.
- HelpedCommand: Command with a -h/--help skip-parsing flag. execute() shows
  the help page when the flag is set and calls run(context) otherwise.
- parameters(type): the collected declarations of a command class.
- invoke(pipeline, data, prompt): run a pipeline as a process entry point,
  mapping faults to exit statuses.

Quick start
    from conduit import HelpedCommand, Option, Pipeline, invoke

    class Tool(HelpedCommand):
        __parameters__ = (Option("-n", "--name", required=True),)

        def run(self, context):
            print("hello", self.name)

    if __name__ == "__main__":
        invoke(Pipeline.builder(Tool, "tool", descr="Greet someone.").build())
"""
import logging
import sys
from abc import ABC, abstractmethod

from rich.console import Console
from rich.text import Text

from .arguments import Option, Positional
from .faults import *
from .formatting import HelpFormatter
from .utils import *

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def parameters(type, /):
    """
    Return the parameter declarations of a command class, base classes first.

    Raises
    - TypeError: when a __parameters__ entry is not an Option or a Positional.
    """
    collected = []
    for klass in reversed(type.__mro__):
        for parameter in vars(klass).get("__parameters__", ()):
            if not isinstance(parameter, Option | Positional):
                raise TypeError(f"{klass.__qualname__} parameters must be options or positionals")
            collected.append(parameter)
    return tuple(collected)


class Command(ABC):
    """
    Base of every command.

    Instances are created fresh for each execution by the pipeline's factory
    (the class itself unless the builder was given another one), populated
    through the declarations' writers, then executed or asked to delegate.
    """

    __parameters__ = ()

    @abstractmethod
    def execute(self, context): ...

    def execute_next(self, context, pipeline, child, label, tokens):
        return child.execute_with(context, label, tokens)


class HelpedCommand(Command):
    """
    Command with a built-in -h/--help option.
    """

    __parameters__ = (
        Option("-h", "--help", field="help", store_true=True, skip_parsing=True, descr="Show this help message."),
    )

    formatter = HelpFormatter()
    help = False

    def execute(self, context):
        if self.help:
            self.show_help(context)
            return None
        return self.run(context)

    @abstractmethod
    def run(self, context): ...

    def show_help(self, context):
        console.print(Text(self.formatter.format_help(context.pipeline(self))), soft_wrap=True)


def invoke(pipeline, data=None, prompt=Unset, /, *, shell=True, fancy=False, colorful=True):
    """
    Run a pipeline as a process entry point.

    Parameters
    - pipeline: root Pipeline to execute.
    - data: caller payload handed to every command through the context.
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string, split with shlex.
      • Iterable[str]: pre-tokenized arguments.
    - shell: when True, faults are rendered on stderr and the process exits
      with status 1 (user-input faults) or 2 (any other exception); when
      False, every exception propagates unchanged.
    - fancy/colorful: rendering options of shell mode.

    Returns
    - The terminal action's result.
    """
    try:
        return pipeline.execute(data, sys.argv[1:] if prompt is Unset else prompt)
    except CommandException as fault:
        if not shell:
            raise
        trigger(fault, pipeline=pipeline, shell=shell, fancy=fancy, colorful=colorful)
    except Exception as exception:
        if not shell:
            raise
        logger.debug("unexpected error while running %r", pipeline.name, exc_info=True)
        fault = UnexpectedCommandError(
            "%s: %s" % (type(exception).__name__, exception),
            title="unexpected error",
            code=FaultCode.UNEXPECTED_ERROR,
            hint="this is a bug in the command, not in your input",
            docs=getdoc(FaultCode.UNEXPECTED_ERROR),
        )
        fault.__cause__ = exception
        trigger(fault, pipeline=pipeline, shell=shell, fancy=fancy, colorful=colorful)


__all__ = (
    "Command",
    "HelpedCommand",
    "parameters",
    "invoke",
)
