"""
Argolith parsing and completion engine.

Overview
- ArgumentParser(options, *, cluster_prefix=None, shell=False, colorful=True, fancy=False)
  • Wraps an OptionRegistry and turns a token stream into a values map.
  • parse()/parse_into() are synchronous and reject deferred values;
    parse_async()/parse_into_async() await every deferred value before returning.
  • complete()/complete_async() return the completion words instead of raising them.

- Input
  • An explicit sequence of arguments, or a raw command line (the first word, the
    program name, is dropped after quote-aware splitting).
  • Without a command, COMP_LINE/COMP_POINT (shell completion protocol) when set,
    else sys.argv[1:].
  • A cursor switches the parse to completion mode: an index into the raw line, or
    the index of the argument being completed for a sequence.

- Main loop (one argument at a time)
  • option name, name=value, or a cluster of option letters -> dispatch to the option
  • positional marker -> every following argument is positional
  • otherwise the pending option's parameter, the positional option's parameter, or
    an unknown option (with similar-name suggestions)

- Post-loop (skipped after a break)
  • environment variables, then defaults, for options that were not specified, in
    declaration order
  • required options, then the requirements of every specified option and the
    conditional requirements (required_if) of every other one

Notes
- Callbacks run left to right in argument order; defaults in declaration order.
- Deferred values (awaitables returned by callbacks) are wrapped in Pending slots and
  resolved together by the asynchronous entry points, preserving their order.
- Completion signals its result through CompletionWords, like help and version do
  through HelpMessage and VersionMessage. Errors met while seeking the cursor are
  swallowed.
"""
import asyncio
import functools
import inspect
import os
import sys
from typing import NamedTuple

from .faults import (
    CompletionWords,
    DeferredValueError,
    DeprecatedOptionWarning,
    HelpMessage,
    InlineValueNotAllowedError,
    InvalidClusterOptionError,
    MissingParameterError,
    MissingRequiredOptionError,
    OptionException,
    OptionMessage,
    ParseError,
    UnknownOptionError,
    UnsatisfiedConditionalRequirementError,
    UnsatisfiedRequirementError,
    VersionMessage,
    trigger,
)
from .options import OptionKind
from .registry import OptionRegistry
from .requirements import evaluate, render
from .utils import CURSOR, Unset, display, similar, split


class Pending:
    """
    A deferred value slot: wraps an awaitable produced by a callback.

    The awaitable is scheduled once, the first time the slot is resolved or awaited,
    so several chained slots may await the same one.
    """

    def __init__(self, awaitable, name, /):
        self._awaitable = awaitable
        self._future = None
        self.name = name

    def __await__(self):
        return self.resolve().__await__()

    def __repr__(self):
        return f"Pending({self.name})"

    def resolve(self):
        if self._future is None:
            self._future = asyncio.ensure_future(self._awaitable)
        return self._future

    def then(self, callback, /):
        async def chained():
            return callback(await self)
        return Pending(chained(), self.name)

    def close(self):
        if self._future is not None:
            self._future.cancel()
        elif inspect.iscoroutine(self._awaitable):
            self._awaitable.close()


class _Suspended(Exception):
    """
    Internal: an outcome (completion words or version) that depends on an awaitable.
    """

    def __init__(self, awaitable, finish, /, swallow=False):
        super().__init__()
        self.awaitable = awaitable
        self.finish = finish
        self.swallow = swallow

    def close(self):
        if inspect.iscoroutine(self.awaitable):
            self.awaitable.close()

    async def settle(self):
        try:
            result = await self.awaitable
        except Exception:
            if not self.swallow:
                raise
            result = ()
        raise self.finish(result)


class _Target(NamedTuple):
    key: str
    name: str
    option: object


class _Session:
    """
    Per-call state shared by a loop and the loops of its nested commands.
    """

    def __init__(self, completing, warn, /):
        self.completing = completing
        self.warn = warn
        self.deferred = []
        self.maps = []

    def defer(self, awaitable, name, /, callback=None):
        pending = Pending(awaitable, name)
        self.deferred.append(pending)
        if callback is not None:
            pending = pending.then(callback)
            self.deferred.append(pending)
        return pending

    def discard(self):
        for pending in self.deferred:
            pending.close()

    async def settle(self):
        await asyncio.gather(*(pending.resolve() for pending in self.deferred))
        for values in self.maps:
            for key, value in values.items():
                if isinstance(value, Pending):
                    values[key] = await value


def _initial(registry, /):
    return {key: None for key, option in registry.options.items() if option.valued}


def _first_name(option, /):
    return next(filter(None, option.names), None)


def _word(value, /):
    return value if isinstance(value, str) else display(value)


def _help_rows(registry, /):
    """
    Group the displayable options into (names, parameter, description) rows.
    """
    groups = {}
    for option in registry.options.values():
        if option.hidden:
            continue
        names = list(filter(None, option.names))
        if option.kind is OptionKind.FLAG:
            names += filter(None, option.negation_names)
        param = ""
        if option.parametric:
            if (enums := getattr(option, "enums", None)) is not None:
                param = "{" + ",".join(map(_word, enums)) + "}"
            else:
                param = f"<{option.param_name or option.kind}>"
            if option.variadic:
                param += "..."
            if isinstance(option.positional, str):
                names.append(option.positional)
        descr = [str(option.descr)] if option.descr else []
        if option.required:
            descr.append("Always required.")
        if env_var := getattr(option, "env_var", None):
            descr.append(f"Can be specified through the {env_var} environment variable.")
        default = getattr(option, "default", Unset)
        if default is not Unset and default is not None and not callable(default):
            descr.append(f"Defaults to {display(default)}.")
        if option.deprecated:
            descr.append(f"Deprecated: {option.deprecated}." if isinstance(option.deprecated, str) else "Deprecated.")
        groups.setdefault(option.group or "options", []).append((", ".join(names), param, " ".join(descr)))
    return groups


class _Loop:
    """
    The parsing loop over one argument list.

    Dispatch follows the state of the previous arguments:
    - marker: the positional marker was seen, every argument is a positional value.
    - single: the previous argument was a monadic option waiting for its parameter.
    - current: the option receiving bare arguments (variadic or positional).
    """

    def __init__(self, session, registry, values, args, cluster_prefix, /):
        self.session = session
        self.registry = registry
        self.values = values
        self.args = list(args)
        self.cluster_prefix = cluster_prefix
        self.completing = session.completing
        self.specified = {}
        session.maps.append(values)

    def run(self):
        marker = single = False
        current = None
        index = 0
        while index < len(self.args):
            arg, cursor, _ = self.args[index].partition(CURSOR)
            here = bool(cursor)
            if marker or single:
                add_key = inline = False
                value = arg
            else:
                if (result := self._parse_option(arg, index, here, current)) is None:
                    index += 1
                    continue
                add_key, marker, inline, current, value = result
                if add_key:
                    self._specify(current)

            key, name, option = current
            if option.niladic:
                if here:
                    raise CompletionWords(())
                if value is not None:
                    if not self.completing:
                        raise InlineValueNotAllowedError(
                            f"Option {name} does not accept inline values.", name=name, value=value,
                        )
                elif self._niladic(current, index):
                    return
                current = None
            elif here:
                self._complete_value(option, index, value)
                if not inline and not marker and (add_key or option.variadic):
                    self._complete_name(value)
                raise CompletionWords(())
            else:
                if add_key:
                    self._reset(key, option)
                if value is not None:
                    try:
                        self._parse_value(key, option, name, value)
                    except Exception as exc:
                        # do not propagate user errors during completion
                        if not self.completing or isinstance(exc, OptionMessage):
                            raise
                    if single:
                        single = False
                        current = None
                    elif inline and not option.variadic:
                        current = None
                elif not marker and not option.variadic:
                    if index + 1 == len(self.args):
                        raise MissingParameterError(f"Missing parameter to {name}.", name=name)
                    single = True
            index += 1

        if self.completing:
            raise CompletionWords(())
        self._defaults()
        self._check_requirements()

    def _parse_option(self, arg, index, here, current):
        """
        Resolve an argument into (add_key, marker, inline, target, value).

        Returns None when the argument was consumed otherwise (cluster expansion or
        an unknown option ignored while completing).
        """
        name, equals, value = arg.partition("=")
        value = value if equals else None
        if (key := self.registry.names.get(name)) is not None:
            if here and value is None:
                raise CompletionWords((name,))
            positional = self.registry.positional
            if positional is not None and name == positional.marker:
                if here:
                    raise CompletionWords(())
                if value is not None:
                    raise InlineValueNotAllowedError(
                        f"Positional marker {name} does not accept inline values.", name=name, value=value,
                    )
                if index + 1 == len(self.args) and not positional.option.variadic:
                    raise MissingParameterError(f"Missing parameter after positional marker {name}.", name=name)
                return True, True, False, _Target(positional.key, positional.name, positional.option), None
            return True, False, True, _Target(key, name, self.registry.options[key]), value

        if self._cluster(arg, index, here):
            return None

        if current is None:
            positional = self.registry.positional
            if positional is None or positional.marker is not None:
                if here:
                    self._complete_name(arg)
                if self.completing:
                    return None
                self._unknown(name)
            return True, False, False, _Target(positional.key, positional.name, positional.option), arg
        return False, False, False, current, arg

    def _cluster(self, arg, index, here):
        """
        Expand a cluster of option letters in place. Returns whether arg was one.

        - The first letter unknown: not a cluster.
        - A later letter unknown: the rest is the first option's inline parameter.
        - Otherwise every letter becomes its option's name, followed by the
          parameters it takes from the next arguments.
        """
        prefix = self.cluster_prefix
        if prefix is None or not arg.startswith(prefix) or len(arg) == len(prefix):
            return False
        rest = arg[len(prefix):]
        letters = self.registry.letters
        unknown = next((position for position, letter in enumerate(rest) if letter not in letters), None)
        if unknown == 0:
            return False
        if here:
            raise CompletionWords(())
        if unknown is not None:
            name = _first_name(self.registry.options[letters[rest[0]]])
            self.args.insert(index + 1, rest[1:] if name is None else f"{name}={rest[1:]}")
            return True

        position = index + 1
        for offset, letter in enumerate(rest):
            if self.completing and position >= len(self.args):
                break
            option = self.registry.options[letters[letter]]
            if offset < len(rest) - 1 and (option.kind is OptionKind.COMMAND or option.variadic):
                raise InvalidClusterOptionError(
                    f"Option letter {letter} must be the last in a cluster.", name=letter,
                )
            if (name := _first_name(option)) is not None:
                self.args.insert(position, name)
                position += 1
            if not option.niladic:
                position += 1
        return True

    def _specify(self, target):
        key, name, option = target
        if key in self.specified:
            return
        self.specified[key] = None
        if option.deprecated and not self.completing:
            reason = f" {option.deprecated}" if isinstance(option.deprecated, str) else ""
            self.session.warn(DeprecatedOptionWarning(f"Option {name} is deprecated.{reason}", name=name))

    def _unknown(self, name):
        message = f"Unknown option {name}."
        if suggestions := similar(name, self.registry.names):
            message += f"\nSimilar names are: {", ".join(suggestions)}."
        raise UnknownOptionError(message, name=name, suggestions=tuple(suggestions))

    def _complete_name(self, prefix):
        names = list(self.registry.names)
        raise CompletionWords([name for name in names if name.startswith(prefix)] if prefix else names)

    def _complete_value(self, option, index, param):
        if option.complete is not None:
            try:
                words = option.complete(self.values, [param or "", *self.args[index + 1:]])
            except Exception:
                # do not propagate user errors during completion
                raise CompletionWords(()) from None
            if inspect.isawaitable(words):
                raise _Suspended(words, CompletionWords, swallow=True)
            raise CompletionWords(words)
        if option.kind is OptionKind.BOOLEAN:
            words = ["true", "false"]
        elif (enums := getattr(option, "enums", None)) is not None:
            words = list(map(_word, enums))
        else:
            words = []
        if words and param:
            words = [word for word in words if word.startswith(param)]
        if words:
            raise CompletionWords(words)

    def _niladic(self, target, index):
        """
        Handle a niladic option. Returns whether the loop should stop.
        """
        key, name, option = target
        match option.kind:
            case OptionKind.FLAG:
                self.values[key] = name not in option.negation_names
                return False
            case OptionKind.FUNCTION:
                return self._function(option, index)
            case OptionKind.COMMAND:
                self._command(target, index)
                return True
            case _ if self.completing:
                return False
            case OptionKind.HELP:
                raise HelpMessage(
                    self._help_text(option),
                    usage=option.usage,
                    groups=_help_rows(self.registry),
                    footer=option.footer,
                )
            case OptionKind.VERSION:
                if option.version is not None or option.resolve is None:
                    raise VersionMessage(option.version or "")
                version = option.resolve()
                if inspect.isawaitable(version):
                    raise _Suspended(version, lambda version: VersionMessage(str(version)))
                raise VersionMessage(str(version))

    def _function(self, option, index):
        if option.break_ and not self.completing:
            self._check_requirements()
        try:
            result = option.exec(self.values, self.args[index + 1:], self.completing)
        except Exception as exc:
            # do not propagate user errors during completion
            if not self.completing or isinstance(exc, OptionMessage):
                raise
            result = None
        if inspect.isawaitable(result):
            self.session.defer(result, option.preferred_name)
        return option.break_ and not self.completing

    def _command(self, target, index):
        key, name, option = target
        if not self.completing:
            self._check_requirements()
        registry = OptionRegistry(option.resolve_options())
        command_values = _initial(registry)
        _Loop(self.session, registry, command_values, self.args[index + 1:], option.cluster_prefix).run()
        if option.exec is None:
            self.values[key] = command_values
        elif inspect.isawaitable(result := option.exec(self.values, command_values)):
            self.values[key] = self.session.defer(result, name)
        else:
            self.values[key] = result

    def _help_text(self, option):
        parts = [option.usage] if option.usage else []
        for group, rows in _help_rows(self.registry).items():
            lines = [f"{group}:"]
            for names, param, descr in rows:
                lines.append("  " + "  ".join(filter(None, (names, param, descr))))
            parts.append("\n".join(lines))
        if option.footer:
            parts.append(option.footer)
        return "\n\n".join(parts)

    def _reset(self, key, option):
        if option.array and (self.values.get(key) is None or not option.append):
            self.values[key] = []

    def _parse_value(self, key, option, name, text):
        if option.array:
            return self._parse_array(key, option, name, text)
        result = option.parse(name, text) if option.parse is not None else option.convert(text, name)
        if inspect.isawaitable(result):
            self.values[key] = self.session.defer(result, name, lambda value: option.normalize(value, name))
        else:
            self.values[key] = option.normalize(result, name)

    def _parse_array(self, key, option, name, text):
        if option.parse is not None:
            result, delimited = option.parse(name, text), False
        elif option.parse_delimited is not None:
            result, delimited = option.parse_delimited(name, text), True
        else:
            result, delimited = [option.convert(part, name) for part in option.split(text)], True

        def merge(previous, result):
            previous.extend(option.normalize(element, name) for element in (result if delimited else [result]))
            return option.normalize_array(previous, name)

        previous = self.values[key]
        if isinstance(previous, Pending) or inspect.isawaitable(result):
            async def chained():
                values = await previous if isinstance(previous, Pending) else previous
                return merge(values, await result if inspect.isawaitable(result) else result)
            self.values[key] = self.session.defer(chained(), name)
        else:
            self.values[key] = merge(previous, result)

    def _defaults(self):
        for key, option in self.registry.options.items():
            if not option.valued or key in self.specified:
                continue
            if (env_var := getattr(option, "env_var", None)) is not None and (text := os.environ.get(env_var)) is not None:
                self._environment(key, option, env_var, text)
                continue
            if (default := getattr(option, "default", Unset)) is Unset:
                continue
            name = option.preferred_name
            if callable(default):
                default = default(self.values)
            if inspect.isawaitable(default):
                self.values[key] = self.session.defer(default, name, functools.partial(self._normalize, option))
            else:
                self.values[key] = self._normalize(option, default)

    def _environment(self, key, option, name, text):
        # the variable specifies the option, diagnostics name the variable
        self.specified[key] = None
        if option.kind is OptionKind.FLAG:
            self.values[key] = option.convert(text, name)
        else:
            self._reset(key, option)
            self._parse_value(key, option, name, text)

    @staticmethod
    def _normalize(option, value):
        if value is None:
            return None
        if option.array:
            value = list(value)
        return option.normalize_value(value, option.preferred_name)

    def _check_requirements(self):
        for key in self.registry.required:
            if key not in self.specified:
                name = self.registry.options[key].preferred_name
                raise MissingRequiredOptionError(f"Option {name} is required.", name=name)

        # presence is "specified during this parse"
        view = {}
        for key in self.specified:
            view[key] = value if (value := self.values.get(key)) is not None else True
        options = self.registry.options
        for key, option in options.items():
            name = option.preferred_name
            if key in self.specified:
                if option.requires is not None and (error := render(option.requires, view, options)) is not None:
                    raise UnsatisfiedRequirementError(f"Option {name} requires {error}.", name=name, requirement=error)
            elif (
                option.required_if is not None and
                evaluate(option.required_if, view, options) and
                (condition := render(option.required_if, view, options, True, True)) is not None
            ):
                raise UnsatisfiedConditionalRequirementError(
                    f"Option {name} is required if {condition}.", name=name, requirement=condition,
                )


class ArgumentParser:
    """
    Parse command-line arguments into option values.

    Parameters
    - options: mapping of option keys to option definitions (declaration order matters).
    - cluster_prefix: prefix of option-letter clusters (e.g. "-"); None disables clusters.
    - shell: surface faults on the rich console and exit instead of raising them.
    - colorful/fancy: rendering options forwarded to the faults.

    Example
        >>> parser = ArgumentParser({"num": Number("-n", default=1)})
        >>> parser.parse(["-n", "5"])
        {'num': 5}
    """

    def __init__(self, options, /, *, cluster_prefix=None, shell=False, colorful=True, fancy=False):
        if cluster_prefix is not None and (not isinstance(cluster_prefix, str) or not cluster_prefix):
            raise TypeError("argument parser 'cluster_prefix' must be a non-empty string")
        self._registry = OptionRegistry(options)
        self._cluster_prefix = cluster_prefix
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)

    @property
    def registry(self):
        return self._registry

    def validate(self):
        """
        Validate the option definitions (see OptionRegistry.validate). Returns self.

        Naming warnings go through this parser's trigger (printed in shell mode).
        """
        self._registry.validate(self.trigger)
        return self

    def trigger(self, fault, /, **options):
        trigger(fault, **options, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def parse(self, command=Unset, /, *, cursor=Unset):
        """
        Parse arguments into a new values map and return it.
        """
        return self.parse_into(_initial(self._registry), command, cursor=cursor)

    def parse_into(self, values, command=Unset, /, *, cursor=Unset):
        """
        Parse arguments into an existing values map and return it.

        Raises DeferredValueError if any callback returned an awaitable.
        """
        try:
            return self._parse(values, command, cursor)
        except (OptionException, OptionMessage) as fault:
            self.trigger(fault)

    async def parse_async(self, command=Unset, /, *, cursor=Unset):
        return await self.parse_into_async(_initial(self._registry), command, cursor=cursor)

    async def parse_into_async(self, values, command=Unset, /, *, cursor=Unset):
        """
        Parse arguments into an existing values map, awaiting every deferred value.
        """
        try:
            return await self._parse_async(values, command, cursor)
        except (OptionException, OptionMessage) as fault:
            self.trigger(fault)

    def complete(self, command, cursor=Unset, /):
        """
        Completion words at the cursor (default: the end of the line, or a new
        argument after a sequence).
        """
        try:
            self._parse(_initial(self._registry), command, self._cursor(command, cursor))
        except CompletionWords as words:
            return list(words.words)
        except DeferredValueError:
            raise
        except ParseError:
            # errors met while seeking the cursor do not prevent completion
            return []
        return []

    async def complete_async(self, command, cursor=Unset, /):
        try:
            await self._parse_async(_initial(self._registry), command, self._cursor(command, cursor))
        except CompletionWords as words:
            return list(words.words)
        except DeferredValueError:
            raise
        except ParseError:
            # errors met while seeking the cursor do not prevent completion
            return []
        return []

    @staticmethod
    def _cursor(command, cursor, /):
        if cursor is not Unset:
            return cursor
        return len(command) if isinstance(command, str) else len(list(command))

    def _arguments(self, command, cursor, /):
        if command is Unset:
            if (line := os.environ.get("COMP_LINE")) is not None:
                command = line
                if cursor is Unset and (point := os.environ.get("COMP_POINT", "")).isdigit():
                    cursor = int(point)
            else:
                command = sys.argv[1:]

        if isinstance(command, str):
            if cursor is not Unset and (not isinstance(cursor, int) or isinstance(cursor, bool)):
                raise TypeError("parse() 'cursor' must be an integer")
            if cursor is Unset:
                return split(command)[1:], False
            return split(command, cursor)[1:], True

        args = list(command)
        if not all(isinstance(arg, str) for arg in args):
            raise TypeError("parse() arguments must be strings")
        if cursor is Unset:
            return args, False
        if not isinstance(cursor, int) or not 0 <= cursor <= len(args):
            raise ValueError("parse() 'cursor' must be the index of an argument")
        if cursor == len(args):
            args.append(CURSOR)
        else:
            args[cursor] += CURSOR
        return args, True

    def _start(self, values, command, cursor, /):
        args, completing = self._arguments(command, cursor)
        session = _Session(completing, self.trigger)
        return _Loop(session, self._registry, values, args, self._cluster_prefix), session

    def _parse(self, values, command, cursor, /):
        loop, session = self._start(values, command, cursor)
        try:
            loop.run()
        except _Suspended as suspended:
            suspended.close()
            session.discard()
            raise DeferredValueError(
                "An option callback returned an awaitable. Use parse_async() to await it.",
            ) from None
        except BaseException:
            session.discard()
            raise
        if session.deferred:
            session.discard()
            name = session.deferred[0].name
            raise DeferredValueError(
                f"Option {name} has a deferred value. Use parse_async() to await it.", name=name,
            )
        return values

    async def _parse_async(self, values, command, cursor, /):
        loop, session = self._start(values, command, cursor)
        try:
            loop.run()
        except _Suspended as suspended:
            session.discard()
            await suspended.settle()
        except BaseException:
            session.discard()
            raise
        try:
            await session.settle()
        except BaseException:
            session.discard()
            raise
        return values


__all__ = (
    "Pending",
    "ArgumentParser",
)
