"""Operator commands - typed command routing for ``info``, ``locate`` and ``fix``."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from tick_relic.scan import first_sighting
from tick_relic.types import ContainerKind, PermissionDenied, UnknownCommand

if TYPE_CHECKING:
    from tick_relic.warden import Warden
    from tick_relic.world import World

logger = logging.getLogger(__name__)

ROOT = "relic"
ALIASES = ("rl",)


@dataclass(frozen=True)
class CommandSource:
    """Who issued a command."""

    name: str
    permission_level: int = 0


@dataclass(frozen=True)
class InfoCommand:
    pass


@dataclass(frozen=True)
class LocateCommand:
    pass


@dataclass(frozen=True)
class FixCommand:
    pass


_SUBCOMMANDS: dict[str, type[Any]] = {
    "info": InfoCommand,
    "locate": LocateCommand,
    "fix": FixCommand,
}

_STORAGE_NAMES = {
    ContainerKind.PRIMARY: "inventory",
    ContainerKind.SECONDARY: "secondary storage",
}


class CommandRouter:
    """Parses command lines and routes them to one handler per command type.

    Handlers run synchronously and return feedback lines for the source.
    """

    def __init__(self, warden: Warden, world: World) -> None:
        self._warden = warden
        self._world = world
        self._handlers: dict[type[Any], Callable[[Any, CommandSource], list[str]]] = {
            InfoCommand: self._info,
            LocateCommand: self._locate,
            FixCommand: self._fix,
        }

    def handle(
        self,
        cmd_type: type[Any],
        handler: Callable[[Any, CommandSource], list[str]],
    ) -> None:
        """Register a handler for a command type. Later calls overwrite."""
        self._handlers[cmd_type] = handler

    def parse(self, line: str) -> Any:
        """Turn ``"relic fix"`` (or an alias) into a command object."""
        words = line.strip().lstrip("/").split()
        if not words or (words[0] != ROOT and words[0] not in ALIASES):
            raise UnknownCommand(f"Unknown command: {line!r}")
        if len(words) != 2 or words[1] not in _SUBCOMMANDS:
            raise UnknownCommand(f"Usage: /{ROOT} <{'|'.join(_SUBCOMMANDS)}>")
        return _SUBCOMMANDS[words[1]]()

    def permitted(self, cmd: Any, source: CommandSource) -> bool:
        config = self._warden.config
        if isinstance(cmd, LocateCommand) and config.allow_locate_for_all:
            return True
        return source.permission_level >= config.permission_level

    def execute(self, cmd: Any, source: CommandSource) -> list[str]:
        """Run a parsed command.

        Raises ``PermissionDenied`` if the source's level is too low and
        ``TypeError`` if no handler is registered for the command's type.
        """
        if not self.permitted(cmd, source):
            raise PermissionDenied(f"{source.name} may not run {type(cmd).__name__}")
        handler = self._handlers.get(type(cmd))
        if handler is None:
            raise TypeError(f"No handler registered for {type(cmd).__qualname__}")
        return handler(cmd, source)

    def dispatch(self, line: str, source: CommandSource) -> list[str]:
        return self.execute(self.parse(line), source)

    # --- Handlers ---

    def _info(self, cmd: InfoCommand, source: CommandSource) -> list[str]:
        item = self._warden.config.item
        return [
            f"Relic - only one {item} may exist at any time.",
            f"- If a {item} exists, duplicates are removed automatically and refunded.",
            f"- If the {item} is gone, crafting is allowed again.",
            "- Offline tracking keeps crafting blocked if someone logs out with it.",
            f"- /{ROOT} locate - search connected participants, then offline records.",
            f"- /{ROOT} fix - keep one {item}, delete extras among connected participants.",
        ]

    def _locate(self, cmd: LocateCommand, source: CommandSource) -> list[str]:
        warden = self._warden
        item = warden.config.item
        sighting = first_sighting(self._world, warden.identity)
        if sighting is not None:
            where = _STORAGE_NAMES[sighting.kind]
            return [f"The {item} is in {sighting.participant.name}'s {where}."]
        flagged = warden.cache.first_flagged()
        if flagged is not None:
            return [f"The {item} is with offline participant {flagged}."]
        return [
            f"The {item} wasn't found among connected participants or offline records. "
            "It might be in an unloaded area."
        ]

    def _fix(self, cmd: FixCommand, source: CommandSource) -> list[str]:
        item = self._warden.config.item
        report = self._warden.reconciler.repair(self._world)
        logger.info("%s ran fix: removed=%d unlocked=%s", source.name, report.removed, report.unlocked)
        if report.unlocked:
            return [f"No {item} found among connected participants. Crafting is unlocked."]
        return [f"Fixed. Kept one {item}, removed {report.removed} duplicate(s)."]
