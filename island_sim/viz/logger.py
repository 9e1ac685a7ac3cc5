"""Structured event logging: rolling UI log plus full history for debugging."""

from __future__ import annotations

import json
import os
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Optional, TextIO

from island_sim.core.config import LOG_RECENT_LIMIT

SEVERITIES = ("info", "warning", "success", "danger")


def _prepare_path(path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    return path


@dataclass
class LogEntry:
    """One logged event; the rolling log and the JSON export both carry these."""

    entry_id: int
    time_ms: float
    category: str
    severity: str
    message: str
    npc_ids: list[int] = field(default_factory=list)
    data: dict = field(default_factory=dict)


class SimLogger:
    """Event log for one session.

    Every entry lands in the rolling `recent` view right away. Entries are
    written to stdout or the log file on `flush_tick`, filtered by verbosity:
    0 keeps danger and success, 1 adds warnings and player, weather and craft
    lines, 2 adds world and NPC lines, 3 keeps everything.
    """

    PLAYER = "PLAYER"
    WEATHER = "WEATHER"
    WORLD = "WORLD"
    NPC = "NPC"
    CRAFT = "CRAFT"
    SYSTEM = "SYSTEM"

    def __init__(
        self,
        verbosity: int = 1,
        log_file: Optional[str] = None,
        stdout: bool = False,
        recent_limit: int = LOG_RECENT_LIMIT,
    ) -> None:
        self.verbosity = verbosity
        self._next_id: int = 0
        self._buffer: list[LogEntry] = []
        self._all_entries: list[LogEntry] = []
        self._recent: deque[LogEntry] = deque(maxlen=recent_limit)
        self._file: Optional[TextIO] = None
        self._stdout = stdout

        if log_file:
            self._file = open(_prepare_path(log_file), "w", encoding="utf-8")

    def log(
        self,
        category: str,
        message: str,
        severity: str = "info",
        time_ms: float = 0.0,
        npc_ids: Optional[list[int]] = None,
        **data,
    ) -> LogEntry:
        """Log an event. It shows up in the rolling log immediately."""
        if severity not in SEVERITIES:
            raise ValueError(f"unknown severity: {severity!r}")
        entry = LogEntry(
            entry_id=self._next_id,
            time_ms=time_ms,
            category=category,
            severity=severity,
            message=message,
            npc_ids=npc_ids or [],
            data=data,
        )
        self._next_id += 1
        self._buffer.append(entry)
        self._recent.append(entry)
        return entry

    @property
    def recent(self) -> list[LogEntry]:
        """The most recent entries, oldest first."""
        return list(self._recent)

    @property
    def entries(self) -> list[LogEntry]:
        """Full history, flushed and pending."""
        return self._all_entries + self._buffer

    def _required_verbosity(self, entry: LogEntry) -> int:
        if entry.severity in ("danger", "success"):
            return 0
        if entry.severity == "warning" or entry.category in (self.PLAYER, self.WEATHER, self.CRAFT):
            return 1
        if entry.category in (self.WORLD, self.NPC):
            return 2
        return 3

    @staticmethod
    def format_entry(entry: LogEntry) -> str:
        seconds = entry.time_ms / 1000.0
        return f"[{seconds:>9.1f}s] [{entry.category:<7}] [{entry.severity:<7}] {entry.message}"

    def _emit(self, line: str) -> None:
        if self._stdout:
            print(line)
        if self._file is not None:
            print(line, file=self._file)

    def flush_tick(self) -> None:
        """Write buffered entries at or under the verbosity level, then archive them."""
        pending, self._buffer = self._buffer, []
        for entry in pending:
            if self._required_verbosity(entry) <= self.verbosity:
                self._emit(self.format_entry(entry))
        self._all_entries += pending
        if self._file is not None:
            self._file.flush()

    def clear_recent(self) -> None:
        """Empty the rolling log, e.g. when a new game starts."""
        self._recent.clear()

    def export_json(self, filepath: str) -> None:
        """Dump the full history, pending entries included, as a JSON list."""
        records = [asdict(e) for e in self.entries]
        with open(_prepare_path(filepath), "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)

    def close(self) -> None:
        self.flush_tick()
        if self._file is not None:
            self._file.close()
        self._file = None
