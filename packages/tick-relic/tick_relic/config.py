"""Relic configuration dataclasses and JSON persistence."""
from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tick_relic.recipe import Recipe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Messages:
    """Message templates. ``{name}`` and ``{count}`` are substituted where relevant."""

    crafted: str = "[Relic] The {name} has been crafted!"
    lost: str = "[Relic] The {name} has been destroyed! Crafting is re-enabled."
    duplicates: str = "[Relic] Duplicate {name} removed. Materials were refunded."
    blocked: str = "A {name} has already been crafted!"
    returned: str = "The {name} cannot be stored there."


@dataclass(frozen=True)
class RelicConfig:
    """Immutable configuration for singleton enforcement.

    Attributes:
        item: Item type of the designated resource.
        recipe: Inputs refunded for every deleted duplicate.
        scan_interval: Ticks between reconciliation passes.
        announce: Broadcast crafted / lost / duplicate transitions.
        allow_in_containers: Disable the container-open veto and sanitizer.
        allow_locate_for_all: ``locate`` needs no elevated permission.
        permission_level: Level required for operator commands.
        messages: Notification templates.
    """

    item: str = "mace"
    recipe: Recipe = field(
        default_factory=lambda: Recipe("mace", inputs={"heavy_core": 1, "breeze_rod": 1})
    )
    scan_interval: int = 40
    announce: bool = True
    allow_in_containers: bool = False
    allow_locate_for_all: bool = False
    permission_level: int = 2
    messages: Messages = field(default_factory=Messages)

    def __post_init__(self) -> None:
        if not self.item:
            raise ValueError("item must be non-empty")
        if self.scan_interval <= 0:
            raise ValueError(f"scan_interval must be > 0, got {self.scan_interval}")

    def message(self, key: str, **values: Any) -> str:
        template: str = getattr(self.messages, key)
        return template.format(name=self.item, **values)


def config_to_dict(config: RelicConfig) -> dict[str, Any]:
    data = dataclasses.asdict(config)
    data["recipe"] = {"name": config.recipe.name, "inputs": dict(config.recipe.inputs)}
    return data


def config_from_dict(data: dict[str, Any]) -> RelicConfig:
    """Build a config from a JSON document. Unknown keys are ignored."""
    known = {f.name for f in dataclasses.fields(RelicConfig)}
    kwargs = {k: v for k, v in data.items() if k in known}
    if "recipe" in kwargs:
        recipe = kwargs["recipe"]
        kwargs["recipe"] = Recipe(
            name=recipe.get("name", kwargs.get("item", "mace")),
            inputs=dict(recipe.get("inputs", {})),
        )
    if "messages" in kwargs:
        message_keys = {f.name for f in dataclasses.fields(Messages)}
        kwargs["messages"] = Messages(
            **{k: v for k, v in kwargs["messages"].items() if k in message_keys}
        )
    return RelicConfig(**kwargs)


def save_config(config: RelicConfig, path: str | Path) -> bool:
    """Write pretty-printed JSON. Returns False (and logs) on I/O failure."""
    try:
        Path(path).write_text(json.dumps(config_to_dict(config), indent=2), encoding="utf-8")
    except OSError:
        logger.warning("could not write config to %s", path, exc_info=True)
        return False
    return True


def load_config(path: str | Path) -> RelicConfig:
    """Read config from *path*.

    A missing file is created with defaults. An unreadable or malformed file
    yields defaults without touching the file.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        config = RelicConfig()
        save_config(config, path)
        return config
    except (OSError, ValueError):
        logger.warning("could not read config at %s, using defaults", path, exc_info=True)
        return RelicConfig()
    try:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")
        return config_from_dict(data)
    except (ValueError, TypeError, AttributeError):
        logger.warning("invalid config at %s, using defaults", path, exc_info=True)
        return RelicConfig()
