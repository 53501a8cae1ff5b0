"""
Subcommander utilities (internal helpers)

Scope
- Small building blocks shared by the options, entries and toplevel layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided", distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving None/0/""/[].

- rename(callable, name) / @rename("name")
  • Give generated wrappers a stable __name__/__qualname__ for clean tracebacks.

- summarize(left, right, width, indent)
  • Lay out one two-column help line the classic way (left column padded to
    the summary width, overflowing descriptions pushed to the next line).

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
"""
import builtins
import functools
from typing import final

SUMMARY_WIDTH = 32
SUMMARY_INDENT = " " * 4


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

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


def summarize(left, right=None, /, width=SUMMARY_WIDTH, indent=SUMMARY_INDENT):
    """
    Yield the help lines for one entry of a two-column listing.

    Layout
    - indent + left padded to width + " " + first description line.
    - When left is wider than the column, it stands alone and the description
      starts on the next line, aligned with the description column.
    - Extra description lines (split on newlines) are aligned the same way.
    - Lines never carry trailing whitespace.
    """
    lines = right.splitlines() if right else []
    if len(left) > width or not lines:
        yield (indent + left).rstrip()
    else:
        yield indent + left.ljust(width) + " " + lines.pop(0)
    for line in lines:
        yield indent + " " * width + " " + line


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Typical pattern: value = coalesce(user_value, default) to materialize a fallback
only when user_value is Unset (None and other falsey values are preserved).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "summarize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
    "SUMMARY_WIDTH",
    "SUMMARY_INDENT",
)
