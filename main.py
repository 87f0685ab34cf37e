import enum
import logging
import sys

from rich.logging import RichHandler
from rich.pretty import pprint

from conduit import *

__prog__ = "notes"


class Priority(enum.Enum):
    LOW = 1
    NORMAL = 2
    HIGH = 3


class Notes(HelpedCommand):
    """Keep short notes from the command line."""

    __parameters__ = (
        Option("-v", "--verbose", store_true=True, descr="Log what happens."),
    )

    verbose = False

    def execute_next(self, context, pipeline, child, label, tokens):
        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        return super().execute_next(context, pipeline, child, label, tokens)

    def run(self, context):
        self.show_help(context)


class Add(HelpedCommand):
    """Add a note."""

    __parameters__ = (
        Option("-p", "--priority", type=Priority, descr="Priority of the note."),
        Option("-t", "--tag", field="tags", type=list[str], repeatable=True, descr="Tag the note."),
        Positional("TEXT", field="words", type=list[str], nargs=-1, descr="Words of the note."),
    )

    priority = Priority.NORMAL
    tags = None

    def run(self, context):
        context.data.append((self.priority, " ".join(self.words), tuple(self.tags or ())))
        return context.data[-1]


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler()])
    root = Pipeline.builder(Notes, "notes")
    root.subcommand(Add, "add")
    pipeline = root.build()
    if sys.argv[1:2] == ["--complete"]:
        print("\n".join(pipeline.complete(None, sys.argv[2:]) or ()))
    else:
        pprint(invoke(pipeline, []))
