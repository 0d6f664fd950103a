"""
Argolith option registry: indexing and static validation of option definitions.

Overview
- OptionRegistry(options) / build(options)
  • Indexes every name, negation name and positional marker to its option key, every
    cluster letter to its option key, the required keys (declaration order) and the
    single positional option.
  • Fails fast on duplicate names, duplicate cluster letters, a duplicate positional
    option or an empty positional marker: later stages trust these indexes.

- OptionRegistry.validate()
  • The deeper checks, kept out of construction so programs may skip them in
    production: name characters, missing names, enumerations, default and example
    values, requirement references and values, version sources. Nested command
    options given as a mapping are validated recursively; thunks stay lazy.
  • Naming issues are warnings, surfaced once every check passed: names too similar
    to each other, mixed naming conventions within a name slot and variadic options
    with cluster letters.

Notes
- Declaration order of the options mapping is significant (defaults, required and
  requirement checks follow it).
- Diagnostics use the offending option's preferred display name.
"""
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from .faults import (
    DuplicateClusterLetterError,
    DuplicateEnumeratedValueError,
    DuplicateNameError,
    DuplicatePositionalOptionError,
    EmptyEnumerationError,
    EmptyPositionalMarkerError,
    IncompatibleRequiredValueError,
    IncompatibleValueError,
    InvalidNameCharactersError,
    InvalidParameterError,
    MissingNameError,
    MissingVersionSourceError,
    MixedNamingConventionWarning,
    NiladicOptionWithValueError,
    SelfReferentialRequirementError,
    TooManyValuesError,
    TooSimilarOptionNamesWarning,
    UnknownRequiredOptionError,
    VariadicWithClusterLetterWarning,
    trigger,
)
from .options import Option, OptionKind
from .requirements import references
from .utils import Unset, display, similar


# one category per convention axis; a slot mixing two rules of a category warns
_NAMING_CONVENTIONS = {
    "cases": {
        "lowercase": lambda name: name == name.lower() and name != name.upper(),
        "UPPERCASE": lambda name: name != name.lower() and name == name.upper(),
        "Capitalized": lambda name: name[0] != name.lower()[0] and name != name.upper(),
    },
    "dashes": {
        "noDash": lambda name: not name.startswith("-"),
        "-singleDash": lambda name: name.startswith("-") and not name.startswith("--"),
        "--doubleDash": lambda name: name.startswith("--"),
    },
    "delimiters": {
        "kebab-case": lambda name: re.search(r"[^-]+-[^-]+", name) is not None,
        "snake_case": lambda name: re.search(r"[^_]+_[^_]+", name) is not None,
        "colon:case": lambda name: re.search(r"[^:]+:[^:]+", name) is not None,
    },
}


class Positional(NamedTuple):
    """
    The positional option of a registry.

    marker is None when the option accepts bare positional arguments anywhere,
    else the token after which every argument is positional.
    """
    key: str
    name: str
    option: Option
    marker: str | None


def _names_of(option, /):
    """
    Every token that invokes an option: names, negation names and the marker.
    """
    yield from option.names
    if option.kind is OptionKind.FLAG:
        yield from option.negation_names
    if option.parametric and isinstance(option.positional, str):
        yield option.positional


class OptionRegistry:
    """
    Validated index of a set of option definitions.

    Properties
    - options: key -> option (read-only, declaration order).
    - names: invocation token -> key.
    - letters: cluster letter -> key.
    - required: keys of required options, in declaration order.
    - positional: Positional or None.
    """

    def __init__(self, options, /):
        if not isinstance(options, Mapping):
            raise TypeError("option registry expects a mapping of option definitions")
        for key, option in options.items():
            if not isinstance(key, str):
                raise TypeError("option keys must be strings")
            if not isinstance(option, Option):
                raise TypeError(f"option {key!r} must be an option definition, not {type(option).__name__!r}")

        names = {}
        letters = {}
        required = []
        positional = None
        for key, option in options.items():
            for name in _names_of(option):
                if not name:
                    continue
                if name in names:
                    raise DuplicateNameError(f"Duplicate option name {name}.", name=name)
                names[name] = key

            for letter in option.cluster_letters or "":
                if letter in letters:
                    raise DuplicateClusterLetterError(f"Duplicate cluster letter {letter}.", name=letter)
                letters[letter] = key

            if option.parametric and (marker := option.positional) is not False:
                if positional is not None:
                    raise DuplicatePositionalOptionError(
                        f"Duplicate positional option {option.preferred_name}.", name=option.preferred_name,
                    )
                if marker == "":
                    raise EmptyPositionalMarkerError(
                        f"Option {option.preferred_name} has empty positional marker.", name=option.preferred_name,
                    )
                positional = Positional(key, option.preferred_name, option, marker if isinstance(marker, str) else None)

            if option.required:
                required.append(key)

        self._options = MappingProxyType(dict(options))
        self._names = MappingProxyType(names)
        self._letters = MappingProxyType(letters)
        self._required = tuple(required)
        self._positional = positional

    @property
    def options(self):
        return self._options

    @property
    def names(self):
        return self._names

    @property
    def letters(self):
        return self._letters

    @property
    def required(self):
        return self._required

    @property
    def positional(self):
        return self._positional

    def __contains__(self, key):
        return key in self._options

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"OptionRegistry({", ".join(self._options)})"

    def validate(self, /, warn=trigger):
        """
        Run the static validation pass. Returns the registry for chaining.

        Raises
        - MissingNameError, InvalidNameCharactersError
        - EmptyEnumerationError, DuplicateEnumeratedValueError
        - IncompatibleValueError (default/example of the wrong shape or violating a constraint)
        - SelfReferentialRequirementError, UnknownRequiredOptionError,
          NiladicOptionWithValueError, IncompatibleRequiredValueError
        - MissingVersionSourceError

        Warns (through warn, once the checks pass)
        - TooSimilarOptionNamesWarning, MixedNamingConventionWarning,
          VariadicWithClusterLetterWarning
        """
        found = []
        self._validate(set(), found, "")
        for warning in found:
            warn(warning)
        return self

    def _validate(self, seen, found, prefix, /):
        for key, option in self._options.items():
            self._validate_names(option)
            if option.parametric:
                self._validate_enums(option)
                if not callable(option.default):
                    self._validate_value(option, option.default, IncompatibleValueError)
                self._validate_value(option, option.example, IncompatibleValueError)
            elif option.kind is OptionKind.FLAG and not callable(option.default):
                self._validate_value(option, option.default, IncompatibleValueError)
            for requirement in (option.requires, option.required_if):
                if requirement is not None:
                    for required_key, required_value in references(requirement):
                        self._validate_requirement(key, option, required_key, required_value)
            if option.variadic and option.cluster_letters:
                found.append(VariadicWithClusterLetterWarning(
                    f"{prefix}Variadic option {option.preferred_name} may only appear as the last option in a cluster.",
                    name=option.preferred_name,
                ))
            match option.kind:
                case OptionKind.VERSION if option.version is None and option.resolve is None:
                    raise MissingVersionSourceError(
                        f"Option {option.preferred_name} contains no version or resolve function.",
                        name=option.preferred_name,
                    )
                case OptionKind.COMMAND if isinstance(nested := option.options, Mapping):
                    if id(option) not in seen:
                        seen.add(id(option))
                        OptionRegistry(nested)._validate(seen, found, f"{prefix}{option.preferred_name}: ")
        self._detect_naming_issues(found, prefix)

    def _detect_naming_issues(self, found, prefix, /):
        names = list(self._names)
        visited = set()
        for name in names:
            if name in visited:
                continue
            if matches := similar(name, [other for other in names if other != name], 0.8):
                found.append(TooSimilarOptionNamesWarning(
                    f"{prefix}Option name {name} has too similar names: {", ".join(matches)}.",
                    name=name, similar=tuple(matches),
                ))
                visited.update(matches)

        slots = []
        for option in self._options.values():
            for index, name in enumerate(option.names):
                if not name:
                    continue
                while index >= len(slots):
                    slots.append([])
                slots[index].append(name)
        for index, slot in enumerate(slots):
            for rules in _NAMING_CONVENTIONS.values():
                matched = {}
                for name in slot:
                    for rule, test in rules.items():
                        if rule not in matched and test(name):
                            matched[rule] = name
                if len(matched) > 1:
                    listing = ", ".join(f"{rule}: {name}" for rule, name in matched.items())
                    found.append(MixedNamingConventionWarning(
                        f"{prefix}Name slot {index} has mixed naming conventions: {listing}.", slot=index,
                    ))

    def _validate_names(self, option, /):
        names = [name for name in _names_of(option) if name]
        positional = option.parametric and option.positional is not False
        if not names and not positional:
            raise MissingNameError(f"Option {option.preferred_name} has no name.", name=option.preferred_name)
        for name in names:
            if re.search(r"[\s=]", name):
                raise InvalidNameCharactersError(f"Invalid option name {name}.", name=name)

    def _validate_enums(self, option, /):
        if (enums := option.enums if hasattr(option, "enums") else None) is None:
            return
        if not enums:
            raise EmptyEnumerationError(
                f"Option {option.preferred_name} has zero enum values.", name=option.preferred_name,
            )
        seen = set()
        for value in enums:
            if value in seen:
                raise DuplicateEnumeratedValueError(
                    f"Option {option.preferred_name} has duplicate enum {display(value)}.",
                    name=option.preferred_name, value=value,
                )
            seen.add(value)

    def _validate_value(self, option, value, error, /):
        if value is Unset or value is None:
            return
        name = option.preferred_name
        if not option.accepts(value):
            raise error(
                f"Option {name} has incompatible value {display(value)}. "
                f"Should be of type {option.__valuetype__!r}.",
                name=name, value=value,
            )
        try:
            option.normalize_value(list(value) if isinstance(value, list | tuple) else value, name)
        except (InvalidParameterError, TooManyValuesError) as exc:
            raise error(exc.message, name=name, value=value) from exc

    def _validate_requirement(self, key, option, required_key, required_value, /):
        if required_key == key:
            raise SelfReferentialRequirementError(
                f"Option {option.preferred_name} requires itself.", name=option.preferred_name,
            )
        if required_key not in self._options:
            raise UnknownRequiredOptionError(f"Unknown required option {required_key}.", name=required_key)
        if required_value is Unset or required_value is None:
            return
        required = self._options[required_key]
        if required.niladic or not required.valued:
            raise NiladicOptionWithValueError(
                f"Required option {required.preferred_name} does not accept values.", name=required.preferred_name,
            )
        self._validate_value(required, required_value, IncompatibleRequiredValueError)


def build(options, /):
    """
    Build a registry from option definitions (see OptionRegistry).
    """
    return OptionRegistry(options)


__all__ = (
    "Positional",
    "OptionRegistry",
    "build",
)
