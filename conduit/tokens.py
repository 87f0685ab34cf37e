"""
Conduit tokenizer: a cursor over an ordered sequence of argument strings.

The tokenizer owns an immutable tuple of arguments and a mutable index in
0..total(). Consuming operations move the index forward; every operation that
would read or move past the end raises IndexError, leaving the index as it was.

Quick example
    >>> tokens = Tokenizer(["-v", "value", "rest"])
    >>> tokens.next()
    '-v'
    >>> tokens.peek(2)
    ('value', 'rest')
    >>> list(tokens.stream())
    ['value', 'rest']
    >>> tokens.has_next()
    False
"""
from collections.abc import Iterable

from .utils import Unset


class Tokenizer:
    """
    Cursor over the arguments of one invocation.

    A tokenizer is per-invocation state: never share one between concurrent
    executions.
    """

    __slots__ = ("_arguments", "_index")

    def __init__(self, arguments, /):
        if isinstance(arguments, str) or not isinstance(arguments, Iterable):
            raise TypeError("tokenizer arguments must be an iterable of strings")
        arguments = tuple(arguments)
        for argument in arguments:
            if not isinstance(argument, str):
                raise TypeError("tokenizer arguments must be an iterable of strings")
        self._arguments = arguments
        self._index = 0

    @property
    def arguments(self):
        return self._arguments

    @property
    def index(self):
        return self._index

    def _span(self, size):
        if not isinstance(size, int):
            raise TypeError("tokenizer size must be an integer")
        if size < 0:
            raise ValueError("tokenizer size cannot be negative")
        if self._index + size > len(self._arguments):
            raise IndexError("tokenizer has %d remaining tokens, %d requested" % (self.remaining(), size))
        return self._index + size

    def peek(self, size=Unset, /):
        """
        Return the next token (or a tuple of the next `size` tokens) without consuming.
        """
        if size is Unset:
            self._span(1)
            return self._arguments[self._index]
        return self._arguments[self._index:self._span(size)]

    def next(self, size=Unset, /):
        """
        Consume and return the next token (or a tuple of the next `size` tokens).
        """
        if size is Unset:
            self._span(1)
            self._index += 1
            return self._arguments[self._index - 1]
        start, self._index = self._index, self._span(size)
        return self._arguments[start:self._index]

    def skip(self, size=1, /):
        self._index = self._span(size)

    def has_next(self, size=1, /):
        return self._index + size <= len(self._arguments)

    def remaining(self):
        return len(self._arguments) - self._index

    def total(self):
        return len(self._arguments)

    def stream(self):
        """
        Consume every remaining token, returned as a one-shot iterator.
        """
        stream = iter(self._arguments[self._index:])
        self._index = len(self._arguments)
        return stream

    def peek_stream(self):
        return iter(self._arguments[self._index:])

    def set_index(self, index, /):
        if not isinstance(index, int):
            raise TypeError("tokenizer index must be an integer")
        if not 0 <= index <= len(self._arguments):
            raise IndexError("tokenizer index %d out of range 0..%d" % (index, len(self._arguments)))
        self._index = index

    def last(self):
        """
        Jump to the end and return the final token (used by completion).
        """
        if not self._arguments:
            raise IndexError("tokenizer is empty")
        self._index = len(self._arguments)
        return self._arguments[-1]

    def __repr__(self):
        return "tokenizer(arguments=%r, index=%r)" % (self._arguments, self._index)


__all__ = (
    "Tokenizer",
)
