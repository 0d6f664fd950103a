"""
Argolith faults (errors, warnings and messages) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every outcome surfaced to a
  caller. Codes are grouped by domain to keep copy consistent and make logs and
  searches predictable.
- OptionException: base type of every failure. Two subtrees:
  • DefinitionError: mistakes in the option declarations (unrecoverable, fail at startup).
  • ParseError: user mistakes on the command line (catch, render, exit nonzero).
- OptionMessage: non-error outcomes that share the raise channel with errors (help,
  version and completion words). Callers print them and exit with status 0.
- OptionWarning: non-fatal diagnostics (deprecated options, naming issues found by
  the validation pass).
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Rendering
- Every fault knows how to render itself through rich (__rich__): a header with the
  program name, the normalized code and a short title, followed by the message and
  an optional hint. Styles are overridable with a __styles__ mapping in __main__,
  the program name with __prog__ and the codes with __codes__.

Integration
- The registry and the parser raise these types directly (library mode).
- ArgumentParser(shell=True) routes them through trigger(), which prints them on the
  rich console and exits with the fault's status.
"""
import copy
import inspect
import os
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - messages (10xxx)
      • HELP, VERSION, COMPLETION
    - parse errors (11xxx)
      • names (1110x): UNKNOWN_OPTION
      • parameters (1111x): MISSING_PARAMETER, INLINE_VALUE_NOT_ALLOWED, INVALID_CLUSTER_OPTION
      • values (1112x): INVALID_PARAMETER, TOO_MANY_VALUES
      • requirements (1113x): MISSING_REQUIRED_OPTION, UNSATISFIED_REQUIREMENT,
        UNSATISFIED_CONDITIONAL_REQUIREMENT
      • callbacks (1114x): DEFERRED_VALUE
    - warnings (12xxx)
      • usage (121xx): DEPRECATED_OPTION
      • definitions (122xx): TOO_SIMILAR_OPTION_NAMES, MIXED_NAMING_CONVENTION,
        VARIADIC_WITH_CLUSTER_LETTER
    - definition errors (21xxx)
      • names (2110x), enumerations and values (2111x), requirements (2112x)
    """
    # --- messages (10xxx) ---
    HELP                         = 10001
    VERSION                      = 10002
    COMPLETION                   = 10003

    # --- parse errors (11xxx) ---
    UNKNOWN_OPTION               = 11101
    MISSING_PARAMETER            = 11111
    INLINE_VALUE_NOT_ALLOWED     = 11112
    INVALID_CLUSTER_OPTION       = 11113
    INVALID_PARAMETER            = 11121
    TOO_MANY_VALUES              = 11122
    MISSING_REQUIRED_OPTION      = 11131
    UNSATISFIED_REQUIREMENT      = 11132
    UNSATISFIED_CONDITIONAL_REQUIREMENT = 11133
    DEFERRED_VALUE               = 11141

    # --- warnings (12xxx) ---
    DEPRECATED_OPTION            = 12111
    TOO_SIMILAR_OPTION_NAMES     = 12201
    MIXED_NAMING_CONVENTION      = 12202
    VARIADIC_WITH_CLUSTER_LETTER = 12203

    # --- definition errors (21xxx) ---
    MISSING_NAME                 = 21101
    INVALID_NAME_CHARACTERS      = 21102
    DUPLICATE_NAME               = 21103
    EMPTY_POSITIONAL_MARKER      = 21104
    DUPLICATE_POSITIONAL_OPTION  = 21105
    DUPLICATE_CLUSTER_LETTER     = 21106
    MISSING_VERSION_SOURCE       = 21107
    EMPTY_ENUMERATION            = 21111
    DUPLICATE_ENUMERATED_VALUE   = 21112
    INCOMPATIBLE_VALUE           = 21113
    SELF_REFERENTIAL_REQUIREMENT = 21121
    UNKNOWN_REQUIRED_OPTION      = 21122
    NILADIC_OPTION_WITH_VALUE    = 21123
    INCOMPATIBLE_REQUIRED_VALUE  = 21124

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to override
        numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _progname(options, /):
    if prog := options.get("prog"):
        return prog
    default = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argolith"
    return getattr(__import__("__main__"), "__prog__", default)


class _Renderable:
    """
    Shared rendering and replacement plumbing of faults and messages.

    Subclasses declare their code, title and exit status as class keywords:

        class UnknownOptionError(ParseError, code=FaultCode.UNKNOWN_OPTION, title="unknown option"): ...
    """
    __code__ = Unset
    __title__ = Unset
    __status__ = 1
    __palette__ = {}

    def __init_subclass__(cls, /, code=Unset, title=Unset, status=Unset, **options):
        super().__init_subclass__(**options)
        if code is not Unset:
            cls.__code__ = code
        if title is not Unset:
            cls.__title__ = title
        if status is not Unset:
            cls.__status__ = status

    def _setup(self, message, options, /):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    def _body(self, styler, text, /):
        """
        Renderables shown under the header (message and hint by default).
        """
        body = [text(self.message, styler("message"))]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        return body

    def __rich__(self):
        styles = _styles(type(self).__palette__)
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style if colorful else "")

        header = Text.assemble(
            "[ ",
            text(_progname(self.options), styler("prog-name")),
            " — ",
            text(self.code.normalize() if isinstance(self.code, FaultCode) else "-", styler("code")),
            " | ",
            text(str(self.options.get("title") or "").title(), styler("title")),
            " ]",
        )
        body = self._body(styler, text)

        if fancy:
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        clone = copy.copy(self)
        clone.options = MappingProxyType({**self.options, **overrides})
        return clone


class OptionException(_Renderable, Exception):
    """
    Base type of every failure raised by the registry or the parser.

    The message is the exact diagnostic text; options carry structured context
    (code, title, hint and the offending name, value or constraint).
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }

    def __init__(self, message=Unset, /, **options):
        super().__init__(message)
        self._setup(message, options)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(type(self).__status__)


class DefinitionError(OptionException): ...
class ParseError(OptionException): ...


# --- definition errors ---
class MissingNameError(DefinitionError, code=FaultCode.MISSING_NAME, title="missing name"): ...
class InvalidNameCharactersError(DefinitionError, code=FaultCode.INVALID_NAME_CHARACTERS, title="invalid name"): ...
class DuplicateNameError(DefinitionError, code=FaultCode.DUPLICATE_NAME, title="duplicate name"): ...
class EmptyPositionalMarkerError(DefinitionError, code=FaultCode.EMPTY_POSITIONAL_MARKER, title="empty positional marker"): ...
class DuplicatePositionalOptionError(DefinitionError, code=FaultCode.DUPLICATE_POSITIONAL_OPTION, title="duplicate positional option"): ...
class DuplicateClusterLetterError(DefinitionError, code=FaultCode.DUPLICATE_CLUSTER_LETTER, title="duplicate cluster letter"): ...
class MissingVersionSourceError(DefinitionError, code=FaultCode.MISSING_VERSION_SOURCE, title="missing version"): ...
class EmptyEnumerationError(DefinitionError, code=FaultCode.EMPTY_ENUMERATION, title="empty enumeration"): ...
class DuplicateEnumeratedValueError(DefinitionError, code=FaultCode.DUPLICATE_ENUMERATED_VALUE, title="duplicate enumerated value"): ...
class IncompatibleValueError(DefinitionError, code=FaultCode.INCOMPATIBLE_VALUE, title="incompatible value"): ...
class SelfReferentialRequirementError(DefinitionError, code=FaultCode.SELF_REFERENTIAL_REQUIREMENT, title="self-referential requirement"): ...
class UnknownRequiredOptionError(DefinitionError, code=FaultCode.UNKNOWN_REQUIRED_OPTION, title="unknown required option"): ...
class NiladicOptionWithValueError(DefinitionError, code=FaultCode.NILADIC_OPTION_WITH_VALUE, title="niladic option with value"): ...
class IncompatibleRequiredValueError(DefinitionError, code=FaultCode.INCOMPATIBLE_REQUIRED_VALUE, title="incompatible required value"): ...

# --- parse errors ---
class UnknownOptionError(ParseError, code=FaultCode.UNKNOWN_OPTION, title="unknown option"): ...
class MissingParameterError(ParseError, code=FaultCode.MISSING_PARAMETER, title="missing parameter"): ...
class InlineValueNotAllowedError(ParseError, code=FaultCode.INLINE_VALUE_NOT_ALLOWED, title="inline value not allowed"): ...
class InvalidClusterOptionError(ParseError, code=FaultCode.INVALID_CLUSTER_OPTION, title="invalid cluster"): ...
class InvalidParameterError(ParseError, code=FaultCode.INVALID_PARAMETER, title="invalid parameter"): ...
class TooManyValuesError(ParseError, code=FaultCode.TOO_MANY_VALUES, title="too many values"): ...
class MissingRequiredOptionError(ParseError, code=FaultCode.MISSING_REQUIRED_OPTION, title="missing required option"): ...
class UnsatisfiedRequirementError(ParseError, code=FaultCode.UNSATISFIED_REQUIREMENT, title="unsatisfied requirement"): ...
class UnsatisfiedConditionalRequirementError(ParseError, code=FaultCode.UNSATISFIED_CONDITIONAL_REQUIREMENT, title="unsatisfied condition"): ...
class DeferredValueError(ParseError, code=FaultCode.DEFERRED_VALUE, title="deferred value"): ...


class OptionMessage(_Renderable, Exception, status=0):
    """
    Base type of the non-error outcomes raised through the same channel as errors.

    Callers distinguish them by type: an OptionMessage means “print and exit 0”.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #9CE19C",
        "title": "bold #C2E0FF",
        "message": "",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }

    def __init__(self, message=Unset, /, **options):
        super().__init__(message)
        self._setup(message, options)

    def __rich__(self):
        return Text(str(self))

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        Console().print(self)
        sys.exit(type(self).__status__)


class HelpMessage(OptionMessage, code=FaultCode.HELP, title="help"):
    """
    Help request. Carries the usage, the displayable options and the footer.

    The layout is delegated to rich: one table per option group.
    """

    def __str__(self):
        return self.message

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = _styles({
            "usage": "bold",
            "group": "bold #FF4DA6",
            "names": "#00E5FF",
            "param": "#9CE19C",
            "descr": "",
            "footer": "dim",
        })

        def styler(style):
            return styles[style] if colorful else ""

        parts = []
        if usage := self.options.get("usage"):
            parts.append(Text(usage, styler("usage")))
        for group, rows in self.options.get("groups", {}).items():
            table = Table.grid(padding=(0, 2))
            table.add_column(style=styler("names"))
            table.add_column(style=styler("param"))
            table.add_column(style=styler("descr"))
            for row in rows:
                table.add_row(*row)
            parts.append(Text(f"{group}:", styler("group")))
            parts.append(table)
        if footer := self.options.get("footer"):
            parts.append(Text(footer, styler("footer")))
        return Group(*parts)


class VersionMessage(OptionMessage, code=FaultCode.VERSION, title="version"):
    def __str__(self):
        return self.message


class CompletionWords(OptionMessage, code=FaultCode.COMPLETION, title="completion"):
    """
    Completion result: the candidate words, one per line when printed.
    """

    def __init__(self, words=(), /, **options):
        self.words = tuple(words)
        super().__init__("\n".join(self.words), **options)

    def __str__(self):
        return self.message

    def __replace__(self, *unused, **overrides):
        clone = super().__replace__(*unused, **overrides)
        clone.words = self.words
        return clone


class OptionWarning(_Renderable, Warning):
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __init__(self, message=Unset, /, **options):
        super().__init__(message)
        self._setup(message, options)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)


class DeprecatedOptionWarning(OptionWarning, code=FaultCode.DEPRECATED_OPTION, title="deprecated option"): ...
class TooSimilarOptionNamesWarning(OptionWarning, code=FaultCode.TOO_SIMILAR_OPTION_NAMES, title="similar names"): ...
class MixedNamingConventionWarning(OptionWarning, code=FaultCode.MIXED_NAMING_CONVENTION, title="mixed naming"): ...
class VariadicWithClusterLetterWarning(OptionWarning, code=FaultCode.VARIADIC_WITH_CLUSTER_LETTER, title="variadic cluster letter"): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace before triggering.
    - in shell mode, rendering happens on the rich console and the process exits
      with the fault's status (0 for messages, 1 for errors); warnings only print.
    - otherwise, exceptions and messages are raised and warnings are warned.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "OptionException",
    "DefinitionError",
    "ParseError",
    "MissingNameError",
    "InvalidNameCharactersError",
    "DuplicateNameError",
    "EmptyPositionalMarkerError",
    "DuplicatePositionalOptionError",
    "DuplicateClusterLetterError",
    "MissingVersionSourceError",
    "EmptyEnumerationError",
    "DuplicateEnumeratedValueError",
    "IncompatibleValueError",
    "SelfReferentialRequirementError",
    "UnknownRequiredOptionError",
    "NiladicOptionWithValueError",
    "IncompatibleRequiredValueError",
    "UnknownOptionError",
    "MissingParameterError",
    "InlineValueNotAllowedError",
    "InvalidClusterOptionError",
    "InvalidParameterError",
    "TooManyValuesError",
    "MissingRequiredOptionError",
    "UnsatisfiedRequirementError",
    "UnsatisfiedConditionalRequirementError",
    "DeferredValueError",
    "OptionMessage",
    "HelpMessage",
    "VersionMessage",
    "CompletionWords",
    "OptionWarning",
    "DeprecatedOptionWarning",
    "TooSimilarOptionNamesWarning",
    "MixedNamingConventionWarning",
    "VariadicWithClusterLetterWarning",
    "trigger",
)
