"""
Subcommander toplevel: the `program [global-options] <command> [options]` dispatcher.

What this module provides
- Context: the debug/verbose switches of one toplevel (no process-wide globals).
- Toplevel: owns the command registry, builds the option sheets, resolves the
  command token, runs the command and maps failures to exit statuses.

Phases of parse(args)
1. Global phase: an option sheet with the "Commands:" listing and the common
   options parses leading switches (order mode, so it stops at the command token).
   An empty invocation prints "No command provided", the help, and exits -1.
2. Command phase: the token is resolved (exact match first, then unique prefix).
   Unknown and ambiguous tokens print a diagnostic and the help, then exit -1.
   The command's own switches (collected through an OptionSurface) and the
   common options form a second sheet; what it leaves is passed to run().
3. DispatchError raised by run() prints "Error: <message>", the command help when
   requested, and exits with the error's status. Anything else propagates.

Exit statuses
- 0 for --help and --version, -1 for usage errors, DispatchError.status otherwise.
  Negative statuses reach SystemExit unchanged; POSIX shells see them modulo 256.

Quick start
    from subcommander import Toplevel, DispatchError

    def commands(registrar):
        @registrar.block_command("greet", ["hello"], "Greet someone")
        def greet(entry):
            entry.usage_suffix = "NAME"

            @entry.run
            def run(args):
                if not args:
                    raise DispatchError("nobody to greet", 2)
                print("hello, %s" % args[0])

    if __name__ == "__main__":
        Toplevel("greeter", "1.0", registrar=commands).parse()
"""
import logging
import os.path
import shlex
import sys
from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console

from .entries import Capabilities, Registrar
from .faults import AmbiguousCommandError, DispatchError, InvalidOptionError, UnknownCommandError
from .options import OptionSheet, OptionSurface
from .registry import Registry
from .utils import *

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """Switches toggled by the common options; shared by every phase of a toplevel."""
    debug: bool = False
    verbose: bool = False


def _tokenize(args, /):
    if args is Unset:
        return sys.argv[1:]
    if isinstance(args, str):
        return shlex.split(args)
    if isinstance(args, Iterable):
        tokens = list(args)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class Toplevel:
    """
    A program with top-level command dispatch.

    Parameters
    - name: program name used in usage banners and --version. None reads the
      host's __main__.__prog__, falling back to the basename of sys.argv[0].
    - version: version string printed by --version.
    - output: writable text stream; defaults to the process stdout.
    - registrar: optional callable receiving a Registrar to define commands.
    - context: optional Context to share switches with the caller.
    - colorful: style diagnostics; defaults to True only when writing to stdout.
      An explicit True styles any sink, terminal or not.
    """

    def __init__(self, name, version, /, output=Unset, registrar=Unset, *, context=Unset, colorful=Unset):
        if name is None:
            name = getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]))
        if not isinstance(name, str):
            raise TypeError("Toplevel() name must be a string")
        if not isinstance(version, str):
            raise TypeError("Toplevel() version must be a string")

        self._name = name
        self._version = version
        self._context = coalesce(context, Context())
        self._console = Console(
            file=coalesce(output),
            color_system="auto" if coalesce(colorful, output is Unset) else None,
            force_terminal=True if colorful is True else None,
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

        self._registry = Registry()
        self._registrar = Registrar(self._registry)
        if registrar is not Unset:
            registrar(self._registrar)

    @property
    def name(self):
        return self._name

    @property
    def version(self):
        return self._version

    @property
    def output(self):
        return self._console.file

    @property
    def context(self):
        return self._context

    @property
    def registrar(self):
        return self._registrar

    @property
    def commands(self):
        return tuple(self._registry)

    @property
    def version_string(self):
        return "%s: %s" % (self._name, self._version)

    def usage_string(self, command="command", /):
        return "%s [global-options] %s [options]" % (self._name, command)

    def __repr__(self):
        return "Toplevel(name=%r, version=%r, commands=%d)" % (self._name, self._version, len(self._registry))

    def parse(self, args=Unset, /):
        """
        Parse the command line and dispatch to the selected command.

        Parameters
        - args: list of strings, a shell-like string (split with shlex), or
          omitted to read sys.argv[1:].

        Returns normally only when the command ran to completion (or when the
        invocation held nothing but global options); every other outcome
        raises SystemExit.
        """
        tokens = _tokenize(args)

        sheet = OptionSheet("Usage: " + self.usage_string())
        self._commands_usage(sheet)
        self._common_options(sheet)

        rest = self._order(sheet, tokens)
        if not tokens:
            self._console.print("No command provided")
            self._usage_and_exit(sheet)
        if rest:
            self._dispatch(sheet, rest)

    def _commands_usage(self, sheet, /):
        if not self._registry:
            return
        sheet.separator()
        sheet.separator("Commands:")
        for spec in self._registry:
            for line in summarize(", ".join(spec.names), spec.description):
                sheet.separator(line)

    def _common_options(self, sheet, /):
        sheet.separator()
        sheet.separator("Common options:")

        @sheet.on("--[no-]debug", help="Show debugging output")
        def debug(value):
            self._context.debug = value

        @sheet.on("-v", "--[no-]verbose", help="Show extra output")
        def verbose(value):
            self._context.verbose = value

        @sheet.on_tail("-h", "--help", help="Show this message")
        def help(value):
            self._usage_and_exit(sheet, 0)

        @sheet.on("--version", help="Show version")
        def version(value):
            self._console.print(self.version_string)
            sys.exit(0)

    def _order(self, sheet, args, /):
        try:
            return sheet.order(args)
        except InvalidOptionError as fault:
            logger.debug("invalid option: %s", fault.message)
            self._console.print(fault)
            self._usage_and_exit(sheet)

    def _dispatch(self, sheet, rest, /):
        token, *rest = rest
        try:
            spec = self._registry.resolve(token)
        except (UnknownCommandError, AmbiguousCommandError) as fault:
            logger.debug("cannot resolve command token %r: %s", token, fault.message)
            self._console.print(fault)
            return self._usage_and_exit(sheet)

        instance = spec.provider.produce()
        logger.debug("%r produced %r for command %r", spec.provider, instance, spec.name)
        self._run(spec.name, instance, rest)

    def _run(self, name, instance, args, /):
        capabilities = Capabilities.probe(instance)

        suffix = "" if capabilities.usage_suffix is None else " " + capabilities.usage_suffix
        sheet = OptionSheet("Usage: " + self.usage_string(name) + suffix)

        surface = OptionSurface()
        if capabilities.define_parameters is not None:
            capabilities.define_parameters(surface)
        if surface.defined:
            sheet.separator()
            sheet.separator("%s command options:" % name.capitalize())
        surface.replay(sheet)
        self._common_options(sheet)

        rest = self._order(sheet, args)
        logger.debug("running command %r with %d arguments", name, len(rest))
        try:
            capabilities.run(*rest)
        except DispatchError as fault:
            logger.debug("command %r failed with status %d: %s", name, fault.status, fault.message)
            self._console.print(fault)
            if fault.usage:
                self._console.print(sheet.help())
            sys.exit(fault.status)

    def _usage_and_exit(self, sheet, status=-1, /):
        self._console.print(sheet.help())
        sys.exit(status)


__all__ = (
    "Context",
    "Toplevel",
)
