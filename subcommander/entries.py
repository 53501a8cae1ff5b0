"""
Subcommander entries: command instances, providers and the registration DSL.

Command instances
- Any object with a callable run(*args) is a command. Two hooks are optional:
  • define_parameters(options): register switches on an OptionSurface.
  • usage_suffix: a string (or a zero-argument method returning one) appended
    to the command usage banner, e.g. "FILES".
- Capabilities.probe(instance) resolves those hooks once into an explicit record,
  so the toplevel never asks "does it have ...?" twice.
- Command is an optional base class with the no-op defaults.

Providers (how a spec produces its instance for one dispatch)
- Factory: calls a class or factory every time (fresh instance per dispatch).
- Singleton: returns the same object every time (state persists across parses).
- ClosurePair: adapts a run closure, a parameters closure and a usage suffix
  collected by block_command.

Registration (Registrar, handed to the toplevel's registration callback)
    def commands(registrar):
        registrar.command("build", BuildCommand, ["make"], "Build the project")
        registrar.object_command("count", counter, "Count invocations")

        @registrar.block_command("clean", "Remove build output")
        def clean(entry):
            entry.usage_suffix = "[DIRS]"

            @entry.run
            def run(args): ...

Trailing arguments after the name (and factory/object): two are
(aliases, description), one is the description alone.
"""
import logging
from collections.abc import Callable
from typing import NamedTuple

from .registry import CommandSpec
from .utils import *

logger = logging.getLogger(__name__)


class Command:
    """
    Optional base class for commands.

    Subclasses override run(*args) and, when needed, define_parameters(options)
    and usage_suffix.
    """
    usage_suffix = None

    def define_parameters(self, options):
        pass

    def run(self, *args):
        raise NotImplementedError(f"{type(self).__name__}.run() is not implemented")


class Capabilities(NamedTuple):
    """
    The probed interface of one command instance.

    - run: bound run callable (always present).
    - define_parameters: bound callable or None.
    - usage_suffix: resolved string or None.
    """
    run: Callable
    define_parameters: Callable | None
    usage_suffix: str | None

    @classmethod
    def probe(cls, instance, /):
        if not callable(run := getattr(instance, "run", None)):
            raise TypeError("command instance %r must provide a callable run()" % (instance,))

        define_parameters = getattr(instance, "define_parameters", None)
        if define_parameters is not None and not callable(define_parameters):
            raise TypeError("command instance %r define_parameters must be callable" % (instance,))

        usage_suffix = getattr(instance, "usage_suffix", None)
        if callable(usage_suffix):
            usage_suffix = usage_suffix()
        if usage_suffix is not None and not isinstance(usage_suffix, str):
            raise TypeError("command instance %r usage_suffix must be a string or None" % (instance,))

        logger.debug(
            "probed %s: parameters=%s, usage suffix=%r",
            type(instance).__name__, define_parameters is not None, usage_suffix
        )
        return cls(run, define_parameters, usage_suffix)


class Factory:
    """Builds a fresh instance per dispatch."""

    def __init__(self, factory, /):
        if not callable(factory):
            raise TypeError("Factory() argument must be a class or a callable")
        self._factory = factory

    def produce(self):
        return self._factory()

    def __repr__(self):
        return "Factory(%r)" % (self._factory,)


class Singleton:
    """Returns the same pre-built instance on every dispatch."""

    def __init__(self, instance, /):
        self._instance = instance

    def produce(self):
        return self._instance

    def __repr__(self):
        return "Singleton(%r)" % (self._instance,)


class BlockEntry:
    """
    Collects the closures of a block command.

    - run(callback): the run closure, called with the remaining arguments as a list.
    - parameters(callback): the parameters closure, called with an OptionSurface.
    - usage_suffix: plain attribute, None by default.

    run and parameters return the callback, so both work as decorators.
    """

    def __init__(self, name, /):
        self.name = name
        self.usage_suffix = None
        self._run = Unset
        self._parameters = Unset

    @property
    def run_block(self):
        return coalesce(self._run)

    @property
    def parameters_block(self):
        return coalesce(self._parameters)

    def run(self, callback, /):
        if not callable(callback):
            raise TypeError("run() argument must be callable")
        self._run = callback
        return callback

    def parameters(self, callback, /):
        if not callable(callback):
            raise TypeError("parameters() argument must be callable")
        self._parameters = callback
        return callback


class BlockCommand:
    """Presents the closures of a BlockEntry through the command instance interface."""

    def __init__(self, entry, /):
        self._run = entry.run_block
        self._parameters = entry.parameters_block
        self.usage_suffix = entry.usage_suffix

    def run(self, *args):
        if self._run is not None:
            self._run(list(args))

    def define_parameters(self, options):
        if self._parameters is not None:
            self._parameters(options)


class ClosurePair:
    """Produces a BlockCommand from the closures collected by block_command."""

    def __init__(self, entry, /):
        if not isinstance(entry, BlockEntry):
            raise TypeError("ClosurePair() argument must be a BlockEntry")
        self._entry = entry

    def produce(self):
        return BlockCommand(self._entry)

    def __repr__(self):
        return "ClosurePair(%r)" % (self._entry.name,)


def _trailing(method, arguments, /):
    """split (aliases, description) off the trailing arguments of a registration call."""
    match len(arguments):
        case 0:
            aliases, description = (), ""
        case 1:
            aliases, (description,) = (), arguments
        case 2:
            aliases, description = arguments
        case _:
            raise TypeError(
                "%s() takes at most 2 trailing arguments (aliases, description) but %d were given" % (method, len(arguments))
            )

    if not isinstance(aliases, list | tuple):
        raise TypeError("%s() aliases must be a list or a tuple of strings" % method)
    if not isinstance(description, str):
        raise TypeError("%s() description must be a string" % method)
    return tuple(aliases), description


class Registrar:
    """The registration surface handed to a toplevel's registration callback."""

    def __init__(self, registry, /):
        self._registry = registry

    def command(self, name, factory, /, *arguments):
        """register a command whose instance is built by `factory` on every dispatch."""
        aliases, description = _trailing("command", arguments)
        return self._registry.register(CommandSpec(name, aliases, description, Factory(factory)))

    def object_command(self, name, object, /, *arguments):
        """register a pre-built instance; it is reused (with its state) on every dispatch."""
        aliases, description = _trailing("object_command", arguments)
        return self._registry.register(CommandSpec(name, aliases, description, Singleton(object)))

    def block_command(self, name, /, *arguments):
        """
        return a decorator registering a command defined by closures.

        The decorated function receives a BlockEntry to configure and is
        returned unchanged.
        """
        aliases, description = _trailing("block_command", arguments)

        @rename("block_command")
        def wrapper(configure, /):
            if not callable(configure):
                raise TypeError("@block_command() must be applied to a callable")
            configure(entry := BlockEntry(name))
            self._registry.register(CommandSpec(name, aliases, description, ClosurePair(entry)))
            return configure

        return wrapper


__all__ = (
    "Command",
    "Capabilities",
    "Factory",
    "Singleton",
    "ClosurePair",
    "BlockEntry",
    "BlockCommand",
    "Registrar",
)
