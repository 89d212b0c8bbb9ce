"""Append-only text log of replacement ranges."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple, Union

from .history import HistoryRecord, ReplaceHistory

_LINE = re.compile(
    r"^(?P<timestamp>\S+) \| stage=(?P<stage>\d+) "
    r"src=(?P<src0>\d+):(?P<src1>\d+) dst=(?P<dst0>\d+):(?P<dst1>\d+)$"
)


@dataclass
class AuditLogger:
    """Append replacement records to a log file, one line each.

    ``events`` keeps the lines written through ``log``; bulk writes from
    ``log_history`` go to the file only.
    """

    path: Path
    events: List[str] = field(default_factory=list)

    @staticmethod
    def _format(stage: int, rec: HistoryRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        return f"{timestamp} | stage={stage} src={rec.src0}:{rec.src1} dst={rec.dst0}:{rec.dst1}"

    def log(self, stage: int, rec: HistoryRecord) -> None:
        entry = self._format(stage, rec)
        self.events.append(entry)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(entry + "\n")

    def log_history(self, history: ReplaceHistory, stage: int = 0) -> int:
        """Write every record of ``history``; returns how many were written."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            for rec in history:
                handle.write(self._format(stage, rec) + "\n")
        return len(history)


def read_audit_log(path: Union[str, Path]) -> List[Tuple[int, HistoryRecord]]:
    entries: List[Tuple[int, HistoryRecord]] = []
    with Path(path).open("r", encoding="utf-8") as handle:
        for lineno, line in enumerate(handle, start=1):
            line = line.rstrip("\n")
            if not line:
                continue
            match = _LINE.match(line)
            if match is None:
                raise ValueError(f"{path}:{lineno}: malformed audit line {line!r}")
            rec = HistoryRecord(
                int(match["src0"]), int(match["src1"]), int(match["dst0"]), int(match["dst1"])
            )
            entries.append((int(match["stage"]), rec))
    return entries
