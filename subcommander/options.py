r"""
Subcommander option layer: switch definitions, deferred registration and the option sheet.

Overview
- Switch: one option definition (names, optional metavar, converter, help, callback).
  Name forms:
    "-v", "--verbose"           presence-only; callback(True)
    "--[no-]debug"              negatable; callback(True) / callback(False) for --no-debug
    "--level INTEGER", "-l N"   value-bearing; callback(type(value))
    "--level=INTEGER"           same as above
  A Switch doubles as a decorator to bind its callback after construction.

- OptionSurface: the object handed to a command's define_parameters. It only
  records tagged operations (on/on_head/on_tail/separator) so the toplevel can
  decide on the "command options" header before anything reaches the real sheet.

- OptionSheet: the real parser. Keeps a banner plus head/body/tail entries,
  renders help in that order and parses arguments through optparse in order
  mode (parsing stops at the first positional argument).

Quick example:
    >>> sheet = OptionSheet("Usage: tool [options]")
    >>> @sheet.on("-l", "--level INTEGER", type=int, help="Set the level")
    ... def on_level(level): ...
    >>> sheet.order(["--level", "3", "rest"])
    ['rest']
"""
import itertools
import logging
import optparse
import re
from typing import NamedTuple

from .faults import InvalidOptionError
from .utils import *

logger = logging.getLogger(__name__)

_PATTERN = re.compile(r"(?P<flag>--\[no-\][^\W_][\w-]*|--[^\W_][\w-]*|-[^\W_])(?:[ =](?P<metavar>\S+))?")


class Switch:
    """
    Named option definition bound to an optional callback.

    Properties
    - names: the flags as written, without metavar ("-v", "--[no-]verbose").
    - metavar: the value label, or None for presence-only switches.
    - type: converter applied to values (str when value-bearing and not given).
    - help: description shown in help, or None.
    - callback: the bound handler, or None.
    """

    def __init__(self, *names, type=Unset, help=Unset, callback=Unset):
        if not names:
            raise TypeError("Switch() must specify at least one name")

        shorts, longs, metavar = [], [], Unset
        for name in names:
            if not isinstance(name, str):
                raise TypeError("Switch() names must be strings")
            elif not (match := _PATTERN.fullmatch(name.strip())):
                raise ValueError("Switch() name %r is not a valid option name" % name)
            elif match["flag"] in shorts + longs:
                raise ValueError("Switch() names cannot contain duplicates")

            if match["metavar"]:
                if metavar not in (Unset, match["metavar"]):
                    raise ValueError("Switch() names disagree on the metavar")
                metavar = match["metavar"]
            (longs if match["flag"].startswith("--") else shorts).append(match["flag"])

        if metavar is not Unset and any("[no-]" in flag for flag in longs):
            raise ValueError("negatable Switch() cannot take a value")
        if type is not Unset and not callable(type):
            raise TypeError("Switch() 'type' must be callable")
        if type is not Unset and metavar is Unset:
            raise TypeError("Switch() 'type' requires a value-bearing name (e.g. '--level INTEGER')")
        if help is not Unset and not isinstance(help, str):
            raise TypeError("Switch() 'help' must be a string")
        if callback is not Unset and not callable(callback):
            raise TypeError("Switch() 'callback' must be callable")

        self._shorts = tuple(shorts)
        self._longs = tuple(longs)
        self._metavar = metavar
        self._type = coalesce(type, str)
        self._help = help
        self._callback = callback

    @property
    def names(self):
        return self._shorts + self._longs

    @property
    def metavar(self):
        return coalesce(self._metavar)

    @property
    def type(self):
        return self._type if self._metavar is not Unset else None

    @property
    def help(self):
        return coalesce(self._help)

    @property
    def callback(self):
        return coalesce(self._callback)

    def __call__(self, callback, /):
        """
        Bind the callback when the switch is used as a decorator.

        Returns the callback itself so decorated functions stay usable.
        """
        if not callable(callback):
            raise TypeError("@Switch must be applied to a callable")
        if self._callback is not Unset:
            raise TypeError("@Switch must be applied only once")
        self._callback = callback
        return callback

    def __repr__(self):
        return "Switch(%s)" % ", ".join(map(repr, self.names))

    def summary(self):
        """Yield the help lines for this switch."""
        left = ", ".join(self._shorts)
        if self._longs:
            left += (", " if left else " " * 4) + ", ".join(self._longs)
        if self._metavar is not Unset:
            left += " " + self._metavar
        yield from summarize(left, self.help)

    def _forms(self):
        # (optparse names, value passed to the callback for presence-only forms)
        yield list(self._shorts) + [flag.replace("[no-]", "") for flag in self._longs], True
        if negatives := [flag.replace("[no-]", "no-") for flag in self._longs if "[no-]" in flag]:
            yield negatives, False

    def attach(self, parser, /):
        """Register every form of this switch on an optparse parser."""
        for names, default in self._forms():
            parser.add_option(
                *names,
                action="callback",
                callback=self._trigger,
                callback_args=(default,),
                **({"type": "string"} if self._metavar is not Unset else {})
            )

    def _trigger(self, option, token, value, parser, default):
        if self._metavar is not Unset:
            try:
                default = self._type(value)
            except (TypeError, ValueError):
                raise optparse.OptionValueError("invalid argument: %s %s" % (token, value)) from None
        logger.debug("switch %s -> %r", token, default)
        if self._callback is not Unset:
            self._callback(default)


def _switch(names, options):
    # Accept a pre-built Switch so recorded operations replay the same object.
    if len(names) == 1 and isinstance(names[0], Switch):
        if options:
            raise TypeError("a pre-built Switch cannot be combined with keyword options")
        return names[0]
    return Switch(*names, **options)


class _Parser(optparse.OptionParser):
    def error(self, msg):
        raise InvalidOptionError(msg)


class OptionSheet:
    """
    The option parser a toplevel builds for one parsing phase.

    Entries are kept in three lists, rendered in this order:
    - head: on_head() entries, each new one placed first;
    - body: on() and separator() entries, in call order;
    - tail: on_tail() entries, in call order.

    When parsing, tail switches yield their names to clashing head or body
    switches; a body switch takes clashing names from a head switch, and
    a later body switch from an earlier one.
    """

    def __init__(self, banner="", /):
        self.banner = banner
        self._head = []
        self._body = []
        self._tail = []

    def on(self, *names, **options):
        self._body.append(switch := _switch(names, options))
        return switch

    def on_head(self, *names, **options):
        self._head.insert(0, switch := _switch(names, options))
        return switch

    def on_tail(self, *names, **options):
        self._tail.append(switch := _switch(names, options))
        return switch

    def separator(self, text="", /):
        if not isinstance(text, str):
            raise TypeError("separator() argument must be a string")
        self._body.append(text)

    def __iter__(self):
        return itertools.chain(self._head, self._body, self._tail)

    @property
    def switches(self):
        return tuple(entry for entry in self if isinstance(entry, Switch))

    def help(self):
        """Render the banner followed by every separator and switch."""
        lines = [self.banner]
        for entry in self:
            if isinstance(entry, Switch):
                lines.extend(entry.summary())
            else:
                lines.append(entry)
        return "\n".join(lines)

    __str__ = help

    def order(self, args, /):
        """
        Parse leading options and return the remaining arguments.

        Parsing stops at the first positional argument (or after "--"), so
        everything from the command token on is returned untouched.

        Raises
        - InvalidOptionError: unknown switch, missing or unconvertible value,
          ambiguous abbreviation.
        """
        parser = _Parser(usage=optparse.SUPPRESS_USAGE, add_help_option=False, conflict_handler="resolve")
        parser.disable_interspersed_args()
        # tail first, so head and body definitions take its names over
        for entry in itertools.chain(self._tail, self._head, self._body):
            if isinstance(entry, Switch):
                entry.attach(parser)
        _, rest = parser.parse_args(list(args))
        logger.debug("options consumed %d of %d arguments", len(args) - len(rest), len(args))
        return rest


class Operation(NamedTuple):
    """One deferred registration: the sheet method to call and its payload."""
    verb: str
    payload: Switch | str


class OptionSurface:
    """
    Deferred-registration buffer handed to define_parameters.

    Only on, on_head, on_tail and separator are available. Each call is kept
    as an Operation and replayed onto an OptionSheet later; on* calls return
    the recorded Switch so a callback can be bound with a decorator:

        def define_parameters(self, options):
            @options.on("-i", "--increment INTEGER", type=int, help="Set increment amount")
            def increment(value):
                self.increment = value
    """

    __verbs__ = ("on", "on_head", "on_tail", "separator")

    def __init__(self):
        self._operations = []

    def on(self, *names, **options):
        return self._record("on", _switch(names, options))

    def on_head(self, *names, **options):
        return self._record("on_head", _switch(names, options))

    def on_tail(self, *names, **options):
        return self._record("on_tail", _switch(names, options))

    def separator(self, text="", /):
        if not isinstance(text, str):
            raise TypeError("separator() argument must be a string")
        self._operations.append(Operation("separator", text))

    def _record(self, verb, switch):
        self._operations.append(Operation(verb, switch))
        return switch

    @property
    def defined(self):
        """True once any on/on_head/on_tail registration happened."""
        return any(operation.verb != "separator" for operation in self._operations)

    def __iter__(self):
        return iter(self._operations)

    def __len__(self):
        return len(self._operations)

    def replay(self, sheet, /):
        for verb, payload in self._operations:
            getattr(sheet, verb)(payload)


__all__ = (
    "Switch",
    "OptionSheet",
    "Operation",
    "OptionSurface",
)
