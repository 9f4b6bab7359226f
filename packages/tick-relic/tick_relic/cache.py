"""OfflineHolderCache - last known holdings of disconnected participants."""
from __future__ import annotations

import contextlib
import logging
import os
import threading
import time
import uuid
from pathlib import Path
from typing import Callable

from tick_relic.types import ParticipantId

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "relic_offline.properties"

IdParser = Callable[[str], ParticipantId]


def parse_uuid(raw: str) -> ParticipantId:
    """Normalise a participant id. Raises ValueError if it is not a UUID."""
    return str(uuid.UUID(raw))


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"not a boolean: {raw!r}")


class OfflineHolderCache:
    """Thread-safe mapping of participant id -> "held the resource at disconnect".

    Entries exist only for participants that are currently disconnected.
    Connection callbacks may run off the tick thread, so every access goes
    through one lock.
    """

    def __init__(self, parse_id: IdParser = parse_uuid) -> None:
        self._entries: dict[ParticipantId, bool] = {}
        self._lock = threading.Lock()
        self._parse_id = parse_id

    # --- Connection lifecycle ---

    def on_disconnect(self, pid: ParticipantId, holding: bool) -> None:
        """Record the holding observed at disconnect. Overwrites."""
        with self._lock:
            self._entries[pid] = holding

    def on_reconnect(self, pid: ParticipantId) -> None:
        with self._lock:
            self._entries.pop(pid, None)

    # --- Queries ---

    def any_flagged(self) -> bool:
        with self._lock:
            return any(self._entries.values())

    def first_flagged(self) -> ParticipantId | None:
        """First flagged id in insertion order."""
        with self._lock:
            for pid, holding in self._entries.items():
                if holding:
                    return pid
        return None

    def get(self, pid: ParticipantId) -> bool | None:
        with self._lock:
            return self._entries.get(pid)

    def items(self) -> list[tuple[ParticipantId, bool]]:
        with self._lock:
            return list(self._entries.items())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, pid: object) -> bool:
        with self._lock:
            return pid in self._entries

    # --- Persistence ---

    def load(self, path: str | Path) -> int:
        """Replace contents with the entries stored at *path*.

        Returns the number of entries loaded. A missing file is an empty
        cache; I/O errors are logged and leave the cache empty; malformed
        lines are skipped.
        """
        path = Path(path)
        loaded: dict[ParticipantId, bool] = {}
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            text = ""
        except (OSError, UnicodeDecodeError):
            logger.warning("could not read offline cache %s", path, exc_info=True)
            text = ""
        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line[0] in "#!":
                continue
            key, sep, value = _split_entry(line)
            if not sep:
                logger.warning("%s:%d: missing separator, skipped", path, lineno)
                continue
            try:
                loaded[self._parse_id(key)] = _parse_bool(value)
            except ValueError:
                logger.warning("%s:%d: malformed entry %r, skipped", path, lineno, line)
        with self._lock:
            self._entries = loaded
        logger.info("loaded %d offline holder entries", len(loaded))
        return len(loaded)

    def persist(self, path: str | Path) -> bool:
        """Write all entries to *path*. Returns False (and logs) on I/O failure."""
        path = Path(path)
        lines = [
            "# tick-relic offline holders",
            "# " + time.strftime("%a %b %d %H:%M:%S %Z %Y"),
        ]
        lines.extend(f"{pid}={'true' if holding else 'false'}" for pid, holding in self.items())
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text("\n".join(lines) + "\n", encoding="utf-8")
            os.replace(tmp, path)
        except OSError:
            logger.warning("could not write offline cache %s", path, exc_info=True)
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            return False
        logger.info("persisted %d offline holder entries", len(lines) - 2)
        return True


def _split_entry(line: str) -> tuple[str, str, str]:
    for i, ch in enumerate(line):
        if ch in "=:":
            return line[:i].strip(), ch, line[i + 1 :].strip()
    return line, "", ""
