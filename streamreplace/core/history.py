"""Replacement ledger recording source and destination ranges of each match."""

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, NamedTuple, Optional

Visitor = Callable[[int, int, int, int], Optional[bool]]


class HistoryRecord(NamedTuple):
    """One replacement: ``src[src0:src1]`` was written as ``dst[dst0:dst1]``."""

    src0: int
    src1: int
    dst0: int
    dst1: int


@dataclass
class ReplaceHistory:
    """Append-only log of replacements in the order they were found."""

    records: List[HistoryRecord] = field(default_factory=list)

    def record(self, src0: int, src1: int, dst0: int, dst1: int) -> None:
        self.records.append(HistoryRecord(src0, src1, dst0, dst1))

    def iterate(self, visit: Visitor) -> None:
        """Call ``visit(src0, src1, dst0, dst1)`` per record; stop when it returns False."""
        for rec in self.records:
            if visit(*rec) is False:
                break

    def at(self, index: int) -> HistoryRecord:
        if not 0 <= index < len(self.records):
            raise IndexError(f"history index {index} out of range (size {len(self.records)})")
        return self.records[index]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(self.records)
