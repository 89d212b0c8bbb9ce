"""Sequential composition of transformers."""

from typing import List, Optional, Sequence

from .config import StreamConfig
from .history import ReplaceHistory
from .replacer import Replacer
from .stream import pump
from .table import ReplaceTable
from .transformer import (
    NEED_MORE_DESTINATION,
    NEED_MORE_SOURCE,
    OK,
    Buffer,
    TransformResult,
    Transformer,
    WritableBuffer,
)


class Chain(Transformer):
    """Run transformers one after another, each reading the previous one's output.

    Bytes a later stage withholds at a boundary stay in that stage's carry
    buffer until more input arrives or the stream ends. Output that does not
    fit the caller's buffer is flushed before any new source is consumed.
    """

    def __init__(self, *stages: Transformer, config: Optional[StreamConfig] = None) -> None:
        self.stages: List[Transformer] = list(stages)
        self.config = config
        self._carry = [bytearray() for _ in self.stages[1:]]
        self._out = bytearray()

    def reset(self) -> None:
        for stage in self.stages:
            stage.reset()
        for carry in self._carry:
            carry.clear()
        self._out.clear()

    def transform(self, dst: WritableBuffer, src: Buffer, at_eof: bool) -> TransformResult:
        produced = self._flush(dst, 0)
        if self._out:
            return TransformResult(0, produced, NEED_MORE_DESTINATION)

        if self.stages:
            consumed, data = pump(self.stages[0], src, at_eof, self.config)
        else:
            consumed, data = len(src), bytes(src)
        stage_eof = at_eof and consumed == len(src)

        for stage, carry in zip(self.stages[1:], self._carry):
            carry += data
            n, data = pump(stage, carry, stage_eof, self.config)
            del carry[:n]
            stage_eof = stage_eof and not carry

        self._out += data
        produced = self._flush(dst, produced)

        if self._out:
            status = NEED_MORE_DESTINATION
        elif consumed < len(src) and not at_eof:
            status = NEED_MORE_SOURCE
        else:
            status = OK
        return TransformResult(consumed, produced, status)

    def _flush(self, dst: WritableBuffer, start: int) -> int:
        n = min(len(self._out), len(dst) - start)
        dst[start:start + n] = self._out[:n]
        del self._out[:n]
        return start + n

    def __repr__(self) -> str:
        return f"Chain({', '.join(repr(stage) for stage in self.stages)})"


def replace_all(
    table: ReplaceTable,
    histories: Optional[Sequence[Optional[ReplaceHistory]]] = None,
    config: Optional[StreamConfig] = None,
) -> Chain:
    """Build a chain with one replacer per rule, applied in table order.

    Rules run sequentially: with ``[("a", "b"), ("b", "c")]`` the input
    ``"a"`` becomes ``"c"``. ``histories``, when given, holds one optional
    ledger per rule.
    """
    if histories is not None and len(histories) != len(table):
        raise ValueError(f"expected {len(table)} histories, got {len(histories)}")
    stages = []
    for i in range(len(table)):
        old, new = table.at(i)
        history = histories[i] if histories is not None else None
        stages.append(Replacer(old, new, history))
    return Chain(*stages, config=config)
