"""
Conduit execution context and traces.

A Context is created per top-level invocation. It carries the caller's data
payload, the tokenizer of the invocation and one Trace per command type that
took part in it (pipeline, type, command instance, label), so a command can
reach its parents' parsed state or its own pipeline while executing.

Recording a second trace for the same command type is a programming error
and raises RuntimeError.
"""
from types import MappingProxyType

from .utils import *


class Trace(metaclass=SchemaType):
    """
    Record correlating a command type with the pipeline, label and instance
    that handled it during one execution.
    """

    __introspectable__ = (
        "pipeline",
        "type",
        "command",
        "label",
    )
    __displayable__ = (
        "type",
        "command",
        "label",
    )

    def __init__(self, pipeline, type, command, label, /):
        self._pipeline = pipeline
        self._type = type
        self._command = command
        self._label = label


class Context:
    """
    Per-invocation state: data payload, tokenizer and traces.

    Never share a context between concurrent executions.
    """

    def __init__(self, data=None, tokens=None, /):
        self.data = data
        self.tokens = tokens
        self._traces = {}

    @property
    def traces(self):
        return MappingProxyType(self._traces)

    def append(self, *parameters):
        """
        Record a trace, given either as a Trace or as (pipeline, type, command, label).
        """
        match parameters:
            case (Trace() as trace,):
                pass
            case (pipeline, type, command, label):
                trace = Trace(pipeline, type, command, label)
            case _:
                raise TypeError("append() takes a trace or 4 arguments but %d were given" % len(parameters))
        if trace.type in self._traces:
            raise RuntimeError("command trace for %r already in context" % (trace.type,))
        self._traces[trace.type] = trace
        return trace

    def get(self, object, /):
        """
        Return the trace of a command type, or of a command instance's type, or None.
        """
        return self._traces.get(object if isinstance(object, type) else type(object))

    def pipeline(self, object, /):
        if (trace := self.get(object)) is None:
            return None
        return trace.pipeline

    def command(self, object, /):
        if (trace := self.get(object)) is None:
            return None
        return trace.command

    def __contains__(self, object):
        return self.get(object) is not None

    def __repr__(self):
        return "context(data=%r, traces=%r)" % (self.data, list(self._traces.values()))


__all__ = (
    "Trace",
    "Context",
)
