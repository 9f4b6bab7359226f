"""tick-relic - Keep at most one instance of a designated resource in the world."""
from tick_relic.cache import OfflineHolderCache
from tick_relic.commands import CommandRouter, CommandSource, FixCommand, InfoCommand, LocateCommand
from tick_relic.config import Messages, RelicConfig, load_config, save_config
from tick_relic.events import (
    Outcome,
    PlayerJoined,
    PlayerLeft,
    ServerStarting,
    ServerStopping,
    UseBlock,
    UseEntity,
)
from tick_relic.gate import OutputGateSystem, make_output_gate_system
from tick_relic.guards import ContainmentGuard
from tick_relic.identity import ResourceIdentity
from tick_relic.inventory import ContainerHelper
from tick_relic.notices import Notice, NoticeBus, make_notice_system
from tick_relic.recipe import Recipe, refund
from tick_relic.reconcile import (
    PassReport,
    ReconcileSystem,
    Reconciler,
    RepairReport,
    make_reconcile_system,
)
from tick_relic.sanitizer import SanitizerSystem, make_sanitizer_system
from tick_relic.server import Server
from tick_relic.state import GlobalState
from tick_relic.types import (
    ContainerKind,
    Decision,
    ItemStack,
    PermissionDenied,
    RelicError,
    SessionResult,
    TickContext,
    UnknownCommand,
)
from tick_relic.warden import Warden
from tick_relic.world import (
    Block,
    Container,
    Drop,
    Fixture,
    Participant,
    Session,
    Slot,
    World,
    container_session,
    new_participant,
)

__all__ = [
    "Block",
    "CommandRouter",
    "CommandSource",
    "Container",
    "ContainerHelper",
    "ContainerKind",
    "ContainmentGuard",
    "Decision",
    "Drop",
    "FixCommand",
    "Fixture",
    "GlobalState",
    "InfoCommand",
    "ItemStack",
    "LocateCommand",
    "Messages",
    "Notice",
    "NoticeBus",
    "OfflineHolderCache",
    "Outcome",
    "OutputGateSystem",
    "Participant",
    "PassReport",
    "PermissionDenied",
    "PlayerJoined",
    "PlayerLeft",
    "Recipe",
    "ReconcileSystem",
    "Reconciler",
    "RelicConfig",
    "RelicError",
    "RepairReport",
    "ResourceIdentity",
    "SanitizerSystem",
    "Server",
    "ServerStarting",
    "ServerStopping",
    "Session",
    "SessionResult",
    "Slot",
    "TickContext",
    "UnknownCommand",
    "UseBlock",
    "UseEntity",
    "Warden",
    "World",
    "container_session",
    "load_config",
    "make_notice_system",
    "make_output_gate_system",
    "make_reconcile_system",
    "make_sanitizer_system",
    "new_participant",
    "refund",
    "save_config",
]
