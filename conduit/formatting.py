"""
Conduit help formatter.

Renders plain-text usage and help pages from a pipeline's read-only schema
accessors. Descriptions are word-wrapped with rich; words longer than a line
are folded.

Layout
    Usage: tool sub [options] FILE [FILE..] {cmd}

    Description of the command.

    Commands:
    status      Show the status.

    Positional arguments:
    FILE        Files to process.

    Options:
    -h, --help  Show this help message.
    -o OUT      Output file.
"""
from rich.console import Console
from rich.text import Text

SPACING = 2


def format_positional(positional, /):
    """
    Usage form of a positional: nargs copies of its symbol, plus "[SYMBOL..]"
    when it accepts an unbounded number of values.
    """
    parts = [positional.symbol] * abs(positional.nargs)
    if positional.nargs <= 0:
        parts.append("[%s..]" % positional.symbol)
    return " ".join(parts)


class HelpFormatter:
    """
    Plain-text help formatter.

    - width: maximum line width.
    - indent: column where descriptions start.
    - hints: suffix each parameter description with its value parser's hint.
    """

    def __init__(self, width=256, indent=12, *, hints=False):
        if not isinstance(width, int) or not isinstance(indent, int):
            raise TypeError("help-formatter 'width' and 'indent' must be integers")
        if indent <= SPACING:
            raise ValueError("help-formatter 'indent' must be greater than %d" % SPACING)
        if width <= indent:
            raise ValueError("help-formatter 'width' must be greater than 'indent'")
        self.width = width
        self.indent = indent
        self.hints = bool(hints)
        self._console = Console(width=width)

    def _entry(self, header, text):
        if not text:
            return [header[:self.width]]
        padding = " " * self.indent
        if len(header) <= self.indent - SPACING:
            lines = [header.ljust(self.indent)]
        else:
            lines = [header[:self.width], padding]
        blocks = Text(text).wrap(self._console, self.width - self.indent, overflow="fold")
        for index, block in enumerate(blocks):
            if index:
                lines.append(padding)
            lines[-1] += block.plain.rstrip()
        return lines

    def _describe(self, pipeline, parameter):
        descr = parameter.descr
        if self.hints and not parameter.flag and (hint := pipeline.registry.get(parameter.type).help(parameter)):
            return "%s (%s)" % (descr, hint) if descr else "(%s)" % hint
        return descr

    def format_usage(self, pipeline):
        usage = "Usage: " + " ".join(node.name for node in pipeline.path)
        if pipeline.options:
            usage += " [options]"
        if pipeline.positionals:
            usage += " " + " ".join(map(format_positional, pipeline.positionals))
        if pipeline.children:
            usage += " {cmd}"
        return usage

    def format_help(self, pipeline):
        lines = [self.format_usage(pipeline)]

        if pipeline.descr:
            lines += ["", pipeline.descr]

        if pipeline.children:
            lines += ["", "Commands:"]
            for label, child in pipeline.children.items():
                lines += self._entry(label, child.descr)

        if pipeline.positionals:
            lines += ["", "Positional arguments:"]
            for positional in pipeline.positionals:
                lines += self._entry(positional.symbol, self._describe(pipeline, positional))

        if pipeline.options:
            lines += ["", "Options:"]
            for option in sorted(pipeline.options, key=lambda option: option.name.lower()):
                if option.flag:
                    header = ", ".join(option.names)
                else:
                    header = ", ".join("%s %s" % (name, option.symbol) for name in option.names)
                lines += self._entry(header, self._describe(pipeline, option))

        return "\n".join(lines)


__all__ = (
    "HelpFormatter",
    "format_positional",
)
