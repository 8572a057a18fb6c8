from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from cmdrouter.commands.exceptions import InvalidCommandSpecException

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Description unavailable."


@dataclass(frozen=True)
class EntryPoint:
    """One concrete handler signature of a command.

    ``handler`` is called with one converted value per entry of ``params``.
    When ``run_async`` is set the dispatcher schedules it in the background.
    """

    handler: Callable
    params: tuple[Hashable, ...] = ()
    run_async: bool = False

    def __post_init__(self) -> None:
        if not callable(self.handler):
            raise InvalidCommandSpecException(f"Entry point handler {self.handler!r} is not callable")
        object.__setattr__(self, "params", tuple(self.params))

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def name(self) -> str:
        return getattr(self.handler, "__qualname__", repr(self.handler))


@dataclass(frozen=True)
class CommandSpec:
    name: str
    entry_points: tuple[EntryPoint, ...]
    aliases: tuple[str, ...] = ()
    description: str = DEFAULT_DESCRIPTION

    def __post_init__(self) -> None:
        if not _is_key(self.name):
            raise InvalidCommandSpecException(
                f"Command name must be a non-empty string without surrounding whitespace: {self.name!r}"
            )
        aliases = tuple(dict.fromkeys(self.aliases))
        for alias in aliases:
            if not _is_key(alias):
                raise InvalidCommandSpecException(f"Command {self.name} declares an invalid alias: {alias!r}")
        entry_points = tuple(self.entry_points)
        if not entry_points:
            raise InvalidCommandSpecException(f"Command {self.name} declares no entry points")
        object.__setattr__(self, "aliases", aliases)
        object.__setattr__(self, "entry_points", entry_points)

    def duplicate_arities(self) -> list[int]:
        counts = Counter(ep.arity for ep in self.entry_points)
        return sorted(arity for arity, n in counts.items() if n > 1)

    def executors_for(self, arity: int) -> list[EntryPoint]:
        """Entry points taking exactly ``arity`` arguments, in declaration order."""
        return [ep for ep in self.entry_points if ep.arity == arity]


class CommandRegistry:
    """Maps command names and aliases to their :class:`CommandSpec`.

    Registering a primary name replaces whatever occupied that key before;
    an alias is only stored when its key is still free. Keys are
    case-sensitive.
    """

    def __init__(self, allow_duplicate_arity: bool = False) -> None:
        self._commands: dict[str, CommandSpec] = {}
        self._allow_duplicate_arity = allow_duplicate_arity

    def register(self, spec: CommandSpec) -> None:
        duplicates = spec.duplicate_arities()
        if duplicates and not self._allow_duplicate_arity:
            raise InvalidCommandSpecException(
                f"Command {spec.name} declares several entry points with arity {duplicates}"
            )

        previous = self._commands.get(spec.name)
        if previous is not None and previous is not spec:
            logger.info("Command %s re-registered; replacing previous definition", spec.name)
        self._commands[spec.name] = spec

        for alias in spec.aliases:
            occupant = self._commands.get(alias)
            if alias == spec.name or occupant is spec:
                continue
            if occupant is not None:
                logger.warning(
                    "Alias %s of %s already taken by %s; skipping",
                    alias,
                    spec.name,
                    occupant.name,
                )
                continue
            self._commands[alias] = spec

        logger.debug("Registered command: %s (aliases: %s)", spec.name, ", ".join(spec.aliases) or "-")

    def get(self, name: str) -> CommandSpec | None:
        return self._commands.get(name)

    def names(self) -> list[str]:
        return list(self._commands)

    def snapshot(self) -> Mapping[str, CommandSpec]:
        return MappingProxyType(dict(self._commands))

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)


def _is_key(value: object) -> bool:
    # Padded keys can never be matched by the resolver.
    return isinstance(value, str) and bool(value) and value == value.strip()
