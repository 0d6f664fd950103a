"""
Argolith option model: declarative option definitions.

Overview
- OptionKind: the closed set of option kinds. The parser dispatches on it with
  match statements; the kind also answers whether an option is niladic (takes no
  parameter), valued (has a slot in the values map) or an array.
- Option classes, one per kind:
  • Flag, Function, Command, Help, Version: niladic options.
  • Boolean, String, Number: monadic options (exactly one parameter).
  • Strings, Numbers: array options. Without a separator they are variadic (consume
    parameters until the next option name); with one they split a single parameter.
- OptionType metaclass provides stable __repr__/__rich_repr__ and exposes every name
  in __introspectable__ (accumulated along the bases) as a read-only property.

Normalization
- convert(): raw text to a typed value (number/boolean parsing).
- normalize(): per-value directives and checks, in order:
  strings: trim -> case -> enums -> regex
  numbers: round -> enums -> range
- normalize_array(): deduplication (unique) then the element limit.
- normalize_value(): a full value (scalar or list) as the parser would store it; used
  for defaults, examples and required values.

Notes
- Constructor arguments are sanitized eagerly: wrong Python types raise TypeError,
  malformed values raise ValueError. Cross-option checks (names, requirements,
  enumeration consistency) belong to the registry.

Examples
    >>> Number("-n", "--num", default=1, range=(0, 10))
    number(names=('-n', '--num'), ...)
    >>> Strings("-s", separator=",", append=True, unique=True)
    strings(names=('-s',), ...)
"""
import functools
import math
import operator
import re
from collections.abc import Iterable, Mapping
from enum import StrEnum

from rich.text import Text

from .faults import InvalidParameterError, TooManyValuesError
from .requirements import coerce
from .utils import Unset, coalesce, display, mirror, rename


class OptionKind(StrEnum):
    FLAG = "flag"
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    STRINGS = "strings"
    NUMBERS = "numbers"
    FUNCTION = "function"
    COMMAND = "command"
    HELP = "help"
    VERSION = "version"

    @property
    def niladic(self):
        return self in (OptionKind.FLAG, OptionKind.FUNCTION, OptionKind.COMMAND, OptionKind.HELP, OptionKind.VERSION)

    @property
    def valued(self):
        return self not in (OptionKind.FUNCTION, OptionKind.HELP, OptionKind.VERSION)

    @property
    def array(self):
        return self in (OptionKind.STRINGS, OptionKind.NUMBERS)


class OptionType(type):
    """
    Metaclass of every option class.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens), used
      in sanitization messages and representations.
    - Accumulate __introspectable__ along the bases and expose each declared name as
      a read-only property mirroring the private "_name" field (unless the class
      defines that attribute itself).
    - Provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        declared = namespace.get("__introspectable__", ())
        inherited = [field for base in reversed(bases) for field in getattr(base, "__introspectable__", ())]
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name.lstrip("_")).lower(),
                "__introspectable__": tuple(dict.fromkeys(inherited + list(declared))),
            } | {
                field: mirror(field) for field in declared if field not in namespace
            },
            **options,
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - number(names=('-n',), preferred_name='-n', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_text(cls, metadata, field, /):
    if not isinstance(value := metadata[field], str | Unset):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif isinstance(value, str) and not (value := value.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    metadata[field] = coalesce(value)


def _sanitize_callable(cls, metadata, field, /, required=False):
    if metadata[field] is Unset:
        if required:
            raise TypeError(f"{cls.__typename__} must specify {field!r}")
        metadata[field] = None
    elif not callable(metadata[field]):
        raise TypeError(f"{cls.__typename__} {field!r} must be callable")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the metadata shared by every option kind.

    Responsibilities
    - names: strings; the empty string is accepted (an unnamed slot used only for
      documentation). Character and uniqueness checks happen in the registry.
    - preferred_name/group: Unset or a non-empty string.
    - descr: Unset, a non-empty string or a rich Text.
    - cluster_letters: Unset or a non-empty string without whitespace.
    - deprecated: a bool or a non-empty reason string.
    - requires/required_if: Unset or requirement shorthand, coerced into a requirement node.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
    metadata["names"] = tuple(metadata["names"])

    _sanitize_text(cls, metadata, "preferred_name")
    _sanitize_text(cls, metadata, "group")

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not isinstance(letters := metadata["cluster_letters"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'cluster_letters' must be a string")
    elif isinstance(letters, str) and (not letters or re.search(r"\s", letters)):
        raise ValueError(f"{cls.__typename__} 'cluster_letters' must be non-empty and contain no whitespace")
    metadata["cluster_letters"] = coalesce(letters)

    if isinstance(deprecated := metadata["deprecated"], str):
        if not (deprecated := deprecated.strip()):
            raise ValueError(f"{cls.__typename__} 'deprecated' reason cannot be empty")
        metadata["deprecated"] = deprecated
    else:
        metadata["deprecated"] = bool(deprecated)

    metadata["hidden"] = bool(metadata["hidden"])
    metadata["required"] = bool(metadata["required"])
    metadata["requires"] = coerce(metadata["requires"]) if metadata["requires"] is not Unset else None
    metadata["required_if"] = coerce(metadata["required_if"]) if metadata["required_if"] is not Unset else None


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate the metadata of options that take parameters.

    - param_name: Unset or a non-empty string.
    - positional: True, False or a marker string (emptiness is a registry error).
    - parse/complete: Unset or callables.
    - env_var: Unset or a non-empty string.
    """
    _sanitize_text(cls, metadata, "param_name")
    if not isinstance(metadata["positional"], bool | str):
        raise TypeError(f"{cls.__typename__} 'positional' must be a bool or a marker string")
    _sanitize_callable(cls, metadata, "parse")
    _sanitize_callable(cls, metadata, "complete")
    _sanitize_text(cls, metadata, "env_var")


def _truthy(text, /):
    # false for zeros-only text (blank included) or "false" in any case
    return not re.fullmatch(r"0*|false", text.strip(), re.IGNORECASE)


def _sanitize_enums(cls, metadata, element, /):
    if (enums := metadata["enums"]) is Unset:
        metadata["enums"] = None
        return
    if isinstance(enums, str) or not isinstance(enums, Iterable):
        raise TypeError(f"{cls.__typename__} 'enums' must be an iterable of values")
    enums = tuple(enums)
    for value in enums:
        if not isinstance(value, element) or isinstance(value, bool):
            raise TypeError(f"{cls.__typename__} 'enums' values must be of type {element.__name__!r}")
    metadata["enums"] = enums


class Option(metaclass=OptionType):
    """
    Base of every option definition. Not instantiable by itself.

    Common metadata
    - names: invocation names; "" marks an unnamed slot.
    - preferred_name: display name used in diagnostics (see the property).
    - cluster_letters: letters that invoke this option inside a cluster.
    - descr/group/hidden: help metadata.
    - deprecated: True or a reason; warns the first time the option is specified.
    - required: the option must be specified on the command line.
    - requires: requirement expression checked when the option is specified.
    - required_if: the option must be specified whenever this expression holds.
    """
    kind = None

    __introspectable__ = (
        "kind",
        "names",
        "preferred_name",
        "cluster_letters",
        "descr",
        "group",
        "hidden",
        "deprecated",
        "required",
        "requires",
        "required_if",
    )

    def __init__(
            self,
            *names,
            preferred_name=Unset,
            cluster_letters=Unset,
            descr=Unset,
            group=Unset,
            hidden=False,
            deprecated=False,
            required=False,
            requires=Unset,
            required_if=Unset,
            **metadata
    ):
        if type(self).kind is None:
            raise TypeError(f"type {type(self).__name__!r} cannot be instantiated directly")
        if metadata:
            raise TypeError(f"{type(self).__typename__} got unexpected keyword arguments: {", ".join(metadata)}")
        common = {
            "names": names,
            "preferred_name": preferred_name,
            "cluster_letters": cluster_letters,
            "descr": descr,
            "group": group,
            "hidden": hidden,
            "deprecated": deprecated,
            "required": required,
            "requires": requires,
            "required_if": required_if,
        }
        _sanitize_metadata(type(self), common)
        self._store(common)

    def _store(self, metadata, /):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def preferred_name(self):
        """
        Display name: the explicit preferred name, else the first non-empty name,
        else the positional marker, else "unnamed".
        """
        if self._preferred_name:
            return self._preferred_name
        if name := next(filter(None, self._names), None):
            return name
        if isinstance(marker := getattr(self, "_positional", False), str) and marker:
            return marker
        return "unnamed"

    @property
    def niladic(self):
        return self.kind.niladic

    @property
    def valued(self):
        return self.kind.valued

    @property
    def array(self):
        return self.kind.array

    @property
    def parametric(self):
        return isinstance(self, Parametric)

    @property
    def variadic(self):
        return self.array and getattr(self, "_separator", None) is None

    @property
    def unique(self):
        return getattr(self, "_unique", False)

    def accepts(self, value, /):
        """
        Whether a value has the shape this option stores (used for defaults, examples
        and required values).
        """
        return True

    def normalize_value(self, value, name, /):
        return value


class Flag(Option):
    """
    Niladic option storing True when specified, or False through a negation name.

    - env_var: environment variable read when the flag is not specified; its text is
      parsed like a boolean parameter.
    """
    kind = OptionKind.FLAG
    __valuetype__ = "boolean"

    __introspectable__ = (
        "negation_names",
        "default",
        "env_var",
    )

    def __init__(self, *names, negation_names=(), default=Unset, env_var=Unset, **common):
        super().__init__(*names, **common)
        if isinstance(negation_names, str) or not isinstance(negation_names, Iterable):
            raise TypeError(f"{type(self).__typename__} 'negation_names' must be an iterable of strings")
        negation_names = tuple(negation_names)
        if not all(isinstance(name, str) for name in negation_names):
            raise TypeError(f"{type(self).__typename__} 'negation_names' must be strings")
        metadata = {"negation_names": negation_names, "default": default, "env_var": env_var}
        _sanitize_text(type(self), metadata, "env_var")
        self._store(metadata)

    def convert(self, text, name, /):
        return _truthy(text)

    def accepts(self, value, /):
        return isinstance(value, bool)


class Parametric(Option):
    """
    Base of the options that take parameters (boolean, string, number and arrays).

    - default: a value, or a callable default(values) that may return an awaitable.
    - example: a documentation value, validated like a default.
    - param_name: the parameter name shown in help.
    - positional: True to receive bare positional arguments, or a marker token after
      which every argument is positional.
    - parse(name, value): custom conversion; its result (possibly awaitable) is
      normalized like a converted value.
    - complete(values, words): custom completion returning candidate words.
    - env_var: environment variable read when the option is not specified; its text
      is parsed like a command-line parameter.
    """
    __valuetype__ = None

    __introspectable__ = (
        "default",
        "example",
        "param_name",
        "positional",
        "parse",
        "complete",
        "env_var",
    )

    def __init__(
            self,
            *names,
            default=Unset,
            example=Unset,
            param_name=Unset,
            positional=False,
            parse=Unset,
            complete=Unset,
            env_var=Unset,
            **common
    ):
        super().__init__(*names, **common)
        metadata = {
            "default": default,
            "example": example,
            "param_name": param_name,
            "positional": positional,
            "parse": parse,
            "complete": complete,
            "env_var": env_var,
        }
        _sanitize_parametric_metadata(type(self), metadata)
        self._store(metadata)

    def convert(self, text, name, /):
        """
        Convert a raw parameter into a value, before normalization.
        """
        return text

    def normalize(self, value, name, /):
        return value

    def normalize_array(self, values, name, /):
        return values

    def normalize_value(self, value, name, /):
        return self.normalize(value, name)

    def accepts(self, value, /):
        if isinstance(value, bool):
            return self._element is bool
        return isinstance(value, self._element)

    _element = object


class Boolean(Parametric):
    """
    Monadic option parsing its parameter as a boolean: false iff the trimmed text
    is made of zeros (or empty) or is "false", case-insensitively.
    """
    kind = OptionKind.BOOLEAN
    __valuetype__ = "boolean"
    _element = bool

    def convert(self, text, name, /):
        return _truthy(text)


class String(Parametric):
    """
    Monadic option storing its parameter as a string.

    - enums: allowed values (mutually exclusive with regex).
    - regex: pattern the value must match (searched, not anchored).
    - trim: strip surrounding whitespace.
    - case: "lower" or "upper".
    """
    kind = OptionKind.STRING
    __valuetype__ = "string"
    _element = str

    __introspectable__ = (
        "enums",
        "regex",
        "trim",
        "case",
    )

    def __init__(self, *names, enums=Unset, regex=Unset, trim=False, case=Unset, **common):
        metadata = {"enums": enums, "regex": regex, "trim": bool(trim), "case": case}
        _sanitize_enums(type(self), metadata, str)
        if regex is not Unset:
            if enums is not Unset:
                raise TypeError(f"{type(self).__typename__} cannot have both 'enums' and 'regex'")
            if not isinstance(regex, str | re.Pattern):
                raise TypeError(f"{type(self).__typename__} 'regex' must be a string or a compiled pattern")
            metadata["regex"] = re.compile(regex)
        else:
            metadata["regex"] = None
        if case is not Unset and case not in ("lower", "upper"):
            raise ValueError(f"{type(self).__typename__} 'case' must be one of 'lower' or 'upper'")
        metadata["case"] = coalesce(case)
        super().__init__(*names, **common)
        self._store(metadata)

    def normalize(self, value, name, /):
        if self._trim:
            value = value.strip()
        match self._case:
            case "lower":
                value = value.lower()
            case "upper":
                value = value.upper()
        if self._enums is not None and value not in self._enums:
            raise InvalidParameterError(
                f"Invalid parameter to {name}: {display(value)}. "
                f"Possible values are [{", ".join(map(display, self._enums))}].",
                name=name, value=value,
            )
        if self._regex is not None and not self._regex.search(value):
            raise InvalidParameterError(
                f"Invalid parameter to {name}: {display(value)}. Value must match the regex {display(self._regex)}.",
                name=name, value=value,
            )
        return value


_ROUNDING = {
    "trunc": math.trunc,
    "ceil": math.ceil,
    "floor": math.floor,
    "nearest": lambda value: math.floor(value + 0.5),
}

# signed decimals (optional exponent) and Infinity, or unsigned 0x/0o/0b integers
_NUMERIC = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|Infinity)|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+",
    re.ASCII,
)


class Number(Parametric):
    """
    Monadic option storing its parameter as a number (int when integral text).

    - enums: allowed values (mutually exclusive with range).
    - range: inclusive (min, max) pair.
    - round: "trunc", "ceil", "floor" or "nearest", applied before the checks.
    """
    kind = OptionKind.NUMBER
    __valuetype__ = "number"
    _element = int | float

    __introspectable__ = (
        "enums",
        "range",
        "round",
    )

    def __init__(self, *names, enums=Unset, range=Unset, round=Unset, **common):
        metadata = {"enums": enums, "range": range, "round": round}
        _sanitize_enums(type(self), metadata, int | float)
        if range is not Unset:
            if enums is not Unset:
                raise TypeError(f"{type(self).__typename__} cannot have both 'enums' and 'range'")
            if isinstance(range, str) or not isinstance(range, Iterable) or len(range := tuple(range)) != 2:
                raise TypeError(f"{type(self).__typename__} 'range' must be a (min, max) pair")
            if not all(isinstance(bound, int | float) and not isinstance(bound, bool) for bound in range):
                raise TypeError(f"{type(self).__typename__} 'range' bounds must be numbers")
            if range[0] > range[1]:
                raise ValueError(f"{type(self).__typename__} 'range' minimum cannot exceed its maximum")
        metadata["range"] = coalesce(range)
        if round is not Unset and round not in _ROUNDING:
            raise ValueError(f"{type(self).__typename__} 'round' must be one of 'trunc', 'ceil', 'floor' or 'nearest'")
        metadata["round"] = coalesce(round)
        super().__init__(*names, **common)
        self._store(metadata)

    def convert(self, text, name, /):
        """
        Parse numeric text: surrounding whitespace is ignored and blank text is 0.
        Digit separators, non-ASCII digits and "inf"/"nan" spellings are rejected.
        """
        if not (stripped := text.strip()):
            return 0
        if not _NUMERIC.fullmatch(stripped):
            raise InvalidParameterError(
                f"Invalid parameter to {name}: {display(text)}. Value must be a number.",
                name=name, value=text,
            )
        if stripped[1:2] in ("x", "X", "o", "O", "b", "B"):
            return int(stripped, 0)
        try:
            return int(stripped)
        except ValueError:
            return float(stripped)

    def normalize(self, value, name, /):
        if self._round is not None and math.isfinite(value):
            value = _ROUNDING[self._round](value)
        if self._enums is not None and value not in self._enums:
            raise InvalidParameterError(
                f"Invalid parameter to {name}: {display(value)}. "
                f"Possible values are [{", ".join(map(display, self._enums))}].",
                name=name, value=value,
            )
        if self._range is not None and not self._range[0] <= value <= self._range[1]:
            raise InvalidParameterError(
                f"Invalid parameter to {name}: {display(value)}. "
                f"Value must be in the range [{", ".join(map(display, self._range))}].",
                name=name, value=value,
            )
        return value


class _Array(metaclass=OptionType):
    """
    Array behavior shared by Strings and Numbers.

    - separator: string or compiled pattern splitting a single parameter; without
      one the option is variadic.
    - parse_delimited(name, value): custom conversion of a whole delimited parameter
      into a list (possibly awaitable).
    - append: accumulate across occurrences instead of replacing.
    - unique: deduplicate, keeping first occurrences.
    - limit: maximum number of elements across the whole accumulated value.
    """
    __introspectable__ = (
        "separator",
        "parse_delimited",
        "append",
        "unique",
        "limit",
    )

    def __init__(
            self,
            *names,
            separator=Unset,
            parse_delimited=Unset,
            append=False,
            unique=False,
            limit=Unset,
            **common
    ):
        cls = type(self)
        metadata = {
            "separator": separator,
            "parse_delimited": parse_delimited,
            "append": bool(append),
            "unique": bool(unique),
            "limit": limit,
        }
        if not isinstance(separator, str | re.Pattern | Unset):
            raise TypeError(f"{cls.__typename__} 'separator' must be a string or a compiled pattern")
        if isinstance(separator, str) and not separator:
            raise ValueError(f"{cls.__typename__} 'separator' cannot be empty")
        metadata["separator"] = coalesce(separator)
        _sanitize_callable(cls, metadata, "parse_delimited")
        if not isinstance(limit, int | Unset) or isinstance(limit, bool):
            raise TypeError(f"{cls.__typename__} 'limit' must be an integer")
        if isinstance(limit, int) and limit < 1:
            raise ValueError(f"{cls.__typename__} 'limit' must be a positive integer")
        metadata["limit"] = coalesce(limit)
        super().__init__(*names, **common)
        self._store(metadata)

    def split(self, text, /):
        """
        Split a parameter with the separator (no-op for variadic options).
        """
        match self._separator:
            case None:
                return [text]
            case re.Pattern() as pattern:
                return pattern.split(text)
            case separator:
                return text.split(separator)

    def normalize_array(self, values, name, /):
        if self._unique:
            values[:] = dict.fromkeys(values)
        if self._limit is not None and len(values) > self._limit:
            raise TooManyValuesError(
                f"Option {name} has too many values ({len(values)}). Should have at most {self._limit}.",
                name=name, count=len(values), limit=self._limit,
            )
        return values

    def normalize_value(self, value, name, /):
        return self.normalize_array([self.normalize(element, name) for element in value], name)

    def accepts(self, value, /):
        return isinstance(value, list | tuple) and all(map(super().accepts, value))


class Strings(_Array, String):
    kind = OptionKind.STRINGS
    __valuetype__ = "string[]"


class Numbers(_Array, Number):
    kind = OptionKind.NUMBERS
    __valuetype__ = "number[]"


class Function(Option):
    """
    Niladic option invoking exec(values, rest, completing) when specified.

    - values: the values parsed so far (defaults not yet applied).
    - rest: the remaining arguments after the option.
    - break_: stop parsing after the call (requirements are checked first).
    """
    kind = OptionKind.FUNCTION

    __introspectable__ = (
        "exec",
        "break_",
    )

    def __init__(self, *names, exec=Unset, break_=False, **common):
        super().__init__(*names, **common)
        metadata = {"exec": exec, "break_": bool(break_)}
        _sanitize_callable(type(self), metadata, "exec", required=True)
        self._store(metadata)


class Command(Option):
    """
    Niladic option that parses the remaining arguments with its own options, then
    invokes exec(values, command_values). The result (or the nested values when no
    exec is given) is stored as the command's value. Parsing always stops after it.

    - options: the nested option definitions, or a zero-argument callable returning
      them; a callable is invoked for every nested parse, so a command may contain
      itself.
    - cluster_prefix: cluster prefix of the nested parse.
    """
    kind = OptionKind.COMMAND

    __introspectable__ = (
        "exec",
        "options",
        "cluster_prefix",
        "default",
    )

    def __init__(self, *names, exec=Unset, options=Unset, cluster_prefix=Unset, default=Unset, **common):
        super().__init__(*names, **common)
        metadata = {"exec": exec, "options": options, "cluster_prefix": cluster_prefix, "default": default}
        _sanitize_callable(type(self), metadata, "exec")
        if options is Unset:
            metadata["options"] = {}
        elif not isinstance(options, Mapping) and not callable(options):
            raise TypeError(f"{type(self).__typename__} 'options' must be a mapping or a callable returning one")
        _sanitize_text(type(self), metadata, "cluster_prefix")
        self._store(metadata)

    def resolve_options(self):
        """
        The nested option definitions, invoking the thunk if one was given.
        """
        options = self._options() if callable(self._options) else self._options
        if not isinstance(options, Mapping):
            raise TypeError(f"{type(self).__typename__} 'options' callable must return a mapping")
        return options


class Help(Option):
    """
    Niladic option raising a HelpMessage with the usage, the option table and the footer.
    """
    kind = OptionKind.HELP

    __introspectable__ = (
        "usage",
        "footer",
    )

    def __init__(self, *names, usage=Unset, footer=Unset, **common):
        super().__init__(*names, **common)
        metadata = {"usage": usage, "footer": footer}
        _sanitize_text(type(self), metadata, "usage")
        _sanitize_text(type(self), metadata, "footer")
        self._store(metadata)


class Version(Option):
    """
    Niladic option raising a VersionMessage with a literal version, or the result of
    resolve() (which may be awaitable).
    """
    kind = OptionKind.VERSION

    __introspectable__ = (
        "version",
        "resolve",
    )

    def __init__(self, *names, version=Unset, resolve=Unset, **common):
        super().__init__(*names, **common)
        metadata = {"version": version, "resolve": resolve}
        _sanitize_text(type(self), metadata, "version")
        _sanitize_callable(type(self), metadata, "resolve")
        self._store(metadata)


__all__ = (
    "OptionKind",
    "Option",
    "Parametric",
    "Flag",
    "Boolean",
    "String",
    "Number",
    "Strings",
    "Numbers",
    "Function",
    "Command",
    "Help",
    "Version",
)
