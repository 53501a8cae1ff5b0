"""
Subcommander faults (errors) and rendering.

Scope
- CommandException: base type that carries a message plus read-only options and
  knows how to render itself for a rich console.
- Resolution faults: UnknownCommandError, AmbiguousCommandError.
- Registration faults: DuplicateNameError (programming error, never recovered).
- Parsing faults: InvalidOptionError (raised by the option sheet).
- DispatchError: the one fault commands raise to end the process with a status
  and an optional usage dump.

Rendering
- Every fault implements __rich__, so the toplevel prints it with console.print(fault).
- Styles come from a default table merged with an optional __styles__ mapping on
  the host program's __main__ module. Colorless consoles drop the styles, so the
  rendered text is exactly the message.
"""
from collections import defaultdict
from types import MappingProxyType

from rich.text import Text

DEFAULT_STYLES = {
    # diagnostics printed before the help text
    "diagnostic": "bold #FF4DA6",

    # dispatch errors
    "error-title": "bold #FF4DA6",
    "error-message": "#C8C8D0",
}


def styles():
    """
    return the effective style table.

    the host application can provide a __styles__ mapping in __main__ to
    override any of the defaults; unknown keys resolve to no style.
    """
    return defaultdict(str, DEFAULT_STYLES | getattr(__import__("__main__"), "__styles__", {}))


class CommandException(Exception):
    __style__ = "diagnostic"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return Text(self.message, style=styles()[self.__style__])


class UnknownCommandError(CommandException):
    """The token matches no registered name or alias, not even by prefix."""

    def __init__(self, token, /, **options):
        super().__init__("Unknown command '%s'" % token, token=token, **options)
        self.token = token


class AmbiguousCommandError(CommandException):
    """The token is a prefix of two or more distinct commands."""

    def __init__(self, token, /, candidates=(), **options):
        super().__init__("Ambiguous command '%s'" % token, token=token, **options)
        self.token = token
        self.candidates = tuple(candidates)


class DuplicateNameError(CommandException):
    """A name or alias is already taken by another command."""

    def __init__(self, name, /, owner=None, **options):
        message = "command name '%s' is already registered" % name
        if owner is not None:
            message += " by '%s'" % owner
        super().__init__(message, name=name, owner=owner, **options)
        self.name = name
        self.owner = owner


class InvalidOptionError(CommandException):
    """An option could not be parsed (unknown, missing value, bad conversion)."""


class DispatchError(CommandException):
    """
    Raised by a command's run to signal a recoverable failure.

    Parameters
    - message: str, printed as "Error: <message>".
    - status: int, the process exit status (any integer; negative values are
      passed to SystemExit unchanged).
    - usage: bool, whether the command help follows the message.
    """

    def __init__(self, message, /, status=-1, usage=True, **options):
        if not isinstance(status, int) or isinstance(status, bool):
            raise TypeError("DispatchError() status must be an integer")
        super().__init__(message, status=status, usage=bool(usage), **options)
        self.status = status
        self.usage = bool(usage)

    def __rich__(self):
        table = styles()
        return Text.assemble(("Error: ", table["error-title"]), (self.message, table["error-message"]))


__all__ = (
    "CommandException",
    "UnknownCommandError",
    "AmbiguousCommandError",
    "DuplicateNameError",
    "InvalidOptionError",
    "DispatchError",
    "styles",
    "DEFAULT_STYLES",
)
