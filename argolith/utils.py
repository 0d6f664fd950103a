"""
Argolith utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the option model, the registry and the parser.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with fresh
    copies of containers.

- split(line, cursor=None)
  • Quote-aware splitting of a raw command line, marking the completion cursor.

- gestalt(source, target) / similar(name, names)
  • Gestalt pattern-matching similarity and the “did you mean” ranking built on it.

Stability and contract
- Names not in __all__ are internal and may change without notice.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> split("prog -a 'b c'")
    ['prog', '-a', 'b c']
    >>> gestalt("verbose", "verbos")
    0.9230769230769231
"""
import builtins
import functools
import re
import unicodedata
from collections.abc import Sequence, Mapping, Set
from typing import final

CURSOR = "\0"
"""Marker inserted by split() at the completion cursor."""


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. In requirement values,
    None means “absent” and Unset means “present with any value”.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values so callers cannot mutate the original.

    Strings and compiled patterns are returned as-is, tuples keep being tuples.
    """
    if isinstance(object, tuple):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a fresh
    copy for container types.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def split(line, cursor=None, /):
    """
    Split a raw command line into arguments.

    Rules
    - Arguments are separated by spaces or newlines outside of quotes.
    - Single and double quotes toggle quoting; the other kind of quote is literal
      inside them. There is no escape processing.
    - When cursor is an index into (or the end of) the line, CURSOR is inserted at
      that position, so the argument being completed carries the marker.

    Examples
    - split("a 'b c'")      -> ["a", "b c"]
    - split("a bc", 3)      -> ["a", "b\\0c"]
    - split("a ", 2)        -> ["a", "\\0"]
    """
    if not isinstance(line, str):
        raise TypeError("split() first argument must be a string")

    result = []
    argument = None
    quote = ""

    def append(char):
        nonlocal argument
        argument = char if argument is None else argument + char

    for index, char in enumerate(line):
        if index == cursor:
            append(CURSOR)
        match char:
            case " " | "\n":
                if quote:
                    append(char)
                elif argument is not None:
                    result.append(argument)
                    argument = None
            case "'" | '"':
                if quote == char:
                    quote = ""
                elif quote:
                    append(char)
                else:
                    quote = char
            case _:
                append(char)

    if cursor == len(line):
        append(CURSOR)
    if argument is not None:
        result.append(argument)
    return result


def _longest_common_substrings(source, target):
    """
    Length of the longest common substrings and every (i, j) pair where one starts.
    """
    table = [0] * len(target)
    indices = []
    longest = 0
    for i in range(len(source)):
        last = 0
        for j in range(len(target)):
            if source[i] == target[j]:
                length = 1 if i == 0 or j == 0 else last + 1
                if length >= longest:
                    if length > longest:
                        longest = length
                        indices.clear()
                    indices.append((i - longest + 1, j - longest + 1))
                last = table[j]
                table[j] = length
            else:
                last = table[j]
                table[j] = 0
    return longest, indices


def _matching_characters(source, target):
    # best over every longest common substring, then recursively on both sides
    longest, indices = _longest_common_substrings(source, target)
    best = 0
    for i, j in indices:
        left = _matching_characters(source[:i], target[:j])
        right = _matching_characters(source[i + longest:], target[j + longest:])
        best = max(best, longest + left + right)
    return best


def gestalt(source, target, /):
    """
    Gestalt pattern-matching similarity of two strings, in [0, 1].

    Twice the number of matching characters divided by the total length, where the
    matching characters are a longest common substring plus, recursively, the
    matching characters on both sides of it. Every longest common substring is tried
    and the best total wins.
    """
    if not (total := len(source) + len(target)):
        return 0.0
    return 2 * _matching_characters(source, target) / total


def similar(name, names, /, threshold=0.6):
    """
    Names similar to the given one, most similar first.

    Punctuation is ignored and the comparison is case-insensitive. Ties keep the
    order of the candidate names.
    """
    def simplify(text):
        return "".join(char for char in text if not unicodedata.category(char).startswith("P")).lower()

    search = simplify(name)
    scored = []
    for candidate in names:
        if (score := gestalt(search, simplify(candidate))) >= threshold:
            scored.append((candidate, score))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [candidate for candidate, _ in scored]


def display(value, /):
    """
    Render a value the way diagnostics quote it.

    Examples
    - display("a")        -> "'a'"
    - display(5.0)        -> "5"
    - display(True)       -> "true"
    - display(["a", "b"]) -> "['a', 'b']"
    """
    match value:
        case bool():
            return "true" if value else "false"
        case str():
            return f"'{value}'"
        case float() if value.is_integer():
            return str(int(value))
        case list() | tuple():
            return "[" + ", ".join(map(display, value)) + "]"
        case re.Pattern():
            return f"/{value.pattern}/"
        case _:
            return str(value)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: None keeps its own meaning wherever Unset is accepted.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "split",
    "gestalt",
    "similar",
    "display",

    # Types
    "UnsetType",

    # Constants
    "Unset",
    "CURSOR",
)
