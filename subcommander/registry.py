"""
Subcommander command registry: specs, registration and token resolution.

Resolution rules (resolve(token))
1. An exact match on any name or alias wins outright, even when the token is
   also a prefix of other keys.
2. Otherwise every key the token is a non-empty prefix of is collected.
3. Keys belonging to one command collapse; a single command is returned.
4. No keys: UnknownCommandError. Keys of several commands: AmbiguousCommandError.

Names and aliases are matched identically and registration order never
changes the outcome.
"""
import logging
from typing import NamedTuple

from .faults import AmbiguousCommandError, DuplicateNameError, UnknownCommandError

logger = logging.getLogger(__name__)


class CommandSpec(NamedTuple):
    """
    A registered command.

    Fields
    - name: canonical name, used in help and in the command usage banner.
    - aliases: alternate names, in declaration order.
    - description: one-line description for the "Commands:" listing.
    - provider: object whose produce() returns the command instance.
    """
    name: str
    aliases: tuple[str, ...]
    description: str
    provider: object

    @property
    def names(self):
        return (self.name, *self.aliases)


def _check_name(name, /):
    if not isinstance(name, str):
        raise TypeError("command names and aliases must be strings")
    elif not name.strip():
        raise ValueError("command names and aliases cannot be empty")
    elif name != name.strip():
        raise ValueError("command names and aliases cannot have surrounding whitespace")


class Registry:
    """
    Holds the registered commands of one toplevel.

    Iteration yields specs in registration order; `in` tests exact keys.
    """

    def __init__(self):
        self._specs = []
        self._keys = {}

    def register(self, spec, /):
        if not isinstance(spec, CommandSpec):
            raise TypeError("register() argument must be a CommandSpec")
        for name in spec.names:
            _check_name(name)
            if name in self._keys:
                raise DuplicateNameError(name, owner=self._keys[name].name)

        self._specs.append(spec)
        for name in spec.names:
            self._keys[name] = spec
        logger.debug("registered command %r (aliases: %s)", spec.name, ", ".join(spec.aliases) or "none")
        return spec

    def resolve(self, token, /):
        if not isinstance(token, str):
            raise TypeError("resolve() argument must be a string")

        if (spec := self._keys.get(token)) is not None:
            logger.debug("command token %r matched exactly", token)
            return spec

        candidates = {}
        if token:
            for key, spec in self._keys.items():
                if key.startswith(token):
                    candidates[spec.name] = spec

        match len(candidates):
            case 0:
                raise UnknownCommandError(token)
            case 1:
                spec, = candidates.values()
                logger.debug("command token %r resolved to %r by prefix", token, spec.name)
                return spec
            case _:
                raise AmbiguousCommandError(token, candidates=sorted(candidates))

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __contains__(self, key):
        return key in self._keys


__all__ = (
    "CommandSpec",
    "Registry",
)
