"""
Argolith requirement expressions.

Overview
- Model
  • Reference(key): the option must be present (any value).
  • Value(key, value): Unset means present, None means absent, anything else means
    present and equal to the (normalized) value.
  • All(*items), One(*items), Not(item): conjunction, disjunction and negation.
  • Shorthand: a str is a Reference and a mapping {key: value} is an All of Value leaves.
    coerce() turns shorthand into nodes; req.all/req.one/req.not_ build nodes from it.

- Visitors (two independent walks over the same tree)
  • evaluate(expr, values, options=None): pure boolean evaluation.
  • render(expr, values, options): text of the unsatisfied branch only, or None.
  • references(expr): every leaf as a (key, value) pair, for static validation.

Notes
- A values mapping may be partially filled; missing keys and None count as absent.
- Array values compare in order, unless the referenced option is unique, in which
  case they compare as multisets (the option deduplicates its own values).
- Deferred values never fail a requirement: render() skips them, evaluate() treats
  them as satisfying an equality.
"""
from collections import Counter
from collections.abc import Mapping

from .faults import InvalidParameterError, TooManyValuesError
from .utils import Unset, display


class Requirement:
    """
    Base node of a requirement expression. Nodes are immutable and hashable.
    """
    __slots__ = ()
    __match_args__ = ()

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self):
        return hash((type(self), self._fields()))

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(map(repr, self._fields()))})"

    def _fields(self):
        return tuple(getattr(self, name) for name in type(self).__match_args__)


class Reference(Requirement):
    __slots__ = ("key",)
    __match_args__ = ("key",)

    def __init__(self, key, /):
        if not isinstance(key, str):
            raise TypeError("reference key must be a string")
        object.__setattr__(self, "key", key)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")


class Value(Requirement):
    __slots__ = ("key", "value")
    __match_args__ = ("key", "value")

    def __init__(self, key, value=Unset, /):
        if not isinstance(key, str):
            raise TypeError("required value key must be a string")
        if isinstance(value, list):
            value = tuple(value)
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "value", value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")


class All(Requirement):
    __slots__ = ("items",)
    __match_args__ = ("items",)

    def __init__(self, *items):
        object.__setattr__(self, "items", tuple(map(coerce, items)))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self):
        return f"All({', '.join(map(repr, self.items))})"


class One(Requirement):
    __slots__ = ("items",)
    __match_args__ = ("items",)

    def __init__(self, *items):
        object.__setattr__(self, "items", tuple(map(coerce, items)))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self):
        return f"One({', '.join(map(repr, self.items))})"


class Not(Requirement):
    __slots__ = ("item",)
    __match_args__ = ("item",)

    def __init__(self, item, /):
        object.__setattr__(self, "item", coerce(item))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")


def coerce(object, /):
    """
    Turn requirement shorthand into a node.

    - Requirement -> itself
    - str         -> Reference(str)
    - Mapping     -> Value leaf for a single entry, All(Value, ...) otherwise
    """
    match object:
        case Requirement():
            return object
        case str():
            return Reference(object)
        case Mapping() if len(object) == 1:
            (key, value), = object.items()
            return Value(key, value)
        case Mapping():
            return All(*(Value(key, value) for key, value in object.items()))
        case _:
            raise TypeError("requirement must be an option key, a mapping of values or a requirement expression")


class req:
    """
    Builders for requirement expressions from shorthand items.

        req.all("a", req.one({"b": "x"}, req.not_("c")))
    """

    def __init__(self):
        raise TypeError("req is a namespace and cannot be instantiated")

    @staticmethod
    def all(*items):
        return All(*items)

    @staticmethod
    def one(*items):
        return One(*items)

    @staticmethod
    def not_(item, /):
        return Not(item)


def _present(values, key, /):
    return values.get(key) is not None


def _deferred(value, /):
    return hasattr(value, "__await__")


def _expected(option, value, /):
    """
    Normalize a required literal the way the referenced option stores its values.

    Returns Unset when the option rejects the literal: no stored value can equal it.
    """
    value = list(value) if isinstance(value, tuple) else value
    if option is None or not hasattr(option, "normalize_value"):
        return value
    try:
        return option.normalize_value(value, option.preferred_name)
    except (InvalidParameterError, TooManyValuesError):
        return Unset


def _equals(actual, expected, unique, /):
    if expected is Unset:
        return False
    if isinstance(expected, list):
        if not isinstance(actual, list | tuple) or len(actual) != len(expected):
            return False
        if unique:
            return Counter(actual) == Counter(expected)
        return list(actual) == expected
    return actual == expected


def evaluate(expr, values, options=None, /):
    """
    Evaluate a requirement expression against a values mapping.

    Pure: it neither mutates the values nor calls option callbacks other than value
    normalization. All([]) is true and One([]) is false. A required literal that the
    referenced option rejects (outside its enums, regex or range) never matches.
    """
    options = options or {}
    match coerce(expr):
        case Reference(key):
            return _present(values, key)
        case Value(key, value) if value is Unset:
            return _present(values, key)
        case Value(key, None):
            return not _present(values, key)
        case Value(key, value):
            if not _present(values, key):
                return False
            if _deferred(actual := values[key]):
                return True
            option = options.get(key)
            return _equals(actual, _expected(option, value), getattr(option, "unique", False))
        case All(items):
            return all(evaluate(item, values, options) for item in items)
        case One(items):
            return any(evaluate(item, values, options) for item in items)
        case Not(item):
            return not evaluate(item, values, options)


def _render_items(items, values, options, negate, invert, collect, /):
    """
    Walk sibling items.

    collect=False: stop at the first failing item and return its text.
    collect=True: stop at the first satisfied item (no error), else join all texts
    with " or " (" and " when inverted).
    """
    errors = {}
    for item in items:
        error = render(item, values, options, negate, invert)
        if error is not None:
            if not collect:
                return error
            errors[error] = None
        elif collect:
            return None
    if not collect:
        return None
    error = (" and " if invert else " or ").join(errors)
    return error if len(errors) == 1 else f"({error})"


def _render_leaf(key, value, values, options, negate, invert, /):
    option = options[key]
    name = option.preferred_name
    specified = _present(values, key)
    required = value is not None
    valued = required and value is not Unset
    if option.niladic or not specified or not valued:
        if specified:
            if required != negate:
                return None
        elif not valued and required == negate:
            return None
        return f"no {name}" if specified != invert else name
    if _deferred(actual := values[key]):
        return None
    if (expected := _expected(option, value)) is Unset:
        expected = list(value) if isinstance(value, tuple) else value
        matched = False
    else:
        matched = _equals(actual, expected, option.unique)
    if matched != negate:
        return None
    return f"{name} != {display(expected)}" if negate != invert else f"{name} = {display(expected)}"


def render(expr, values, options, negate=False, invert=False, /):
    """
    Render the unsatisfied part of a requirement expression.

    Returns None when the expression is satisfied. Satisfied All children are skipped;
    a failing One reports every alternative joined by " or ". Not flips the polarity,
    so a negated All behaves like a One and vice versa.

    invert renders a condition that holds instead of one that fails: called with
    negate and invert set, it describes why a conditional requirement applies
    (alternatives join with " and ", "no" marks absent options).

    Examples
    - All("a", One({"b": "x"}, "c")) with a present, b = 'y' -> "(b = 'x' or c)"
    - Not("a") with a present                            -> "no a"
    - "a" with a present, negate and invert              -> "a"
    """
    match coerce(expr):
        case Reference(key):
            return _render_leaf(key, Unset, values, options, negate, invert)
        case Value(key, value):
            return _render_leaf(key, value, values, options, negate, invert)
        case Not(item):
            return render(item, values, options, not negate, invert)
        case All(items):
            return _render_items(items, values, options, negate, invert, negate)
        case One(items):
            return _render_items(items, values, options, negate, invert, not negate)


def references(expr, /):
    """
    Yield every leaf of a requirement expression as a (key, value) pair.

    References yield Unset as their value.
    """
    match coerce(expr):
        case Reference(key):
            yield key, Unset
        case Value(key, value):
            yield key, value
        case Not(item):
            yield from references(item)
        case All(items) | One(items):
            for item in items:
                yield from references(item)


__all__ = (
    "Requirement",
    "Reference",
    "Value",
    "All",
    "One",
    "Not",
    "req",
    "coerce",
    "evaluate",
    "render",
    "references",
)
