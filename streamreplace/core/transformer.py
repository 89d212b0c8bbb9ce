"""Chunked transform contract shared by replacers, chains and the stream driver."""

from abc import ABC, abstractmethod
from typing import Literal, NamedTuple, Union

Status = Literal["ok", "need_more_source", "need_more_destination"]

OK: Status = "ok"
NEED_MORE_SOURCE: Status = "need_more_source"
NEED_MORE_DESTINATION: Status = "need_more_destination"

Buffer = Union[bytes, bytearray, memoryview]
WritableBuffer = Union[bytearray, memoryview]


class TransformResult(NamedTuple):
    """Outcome of one transform call."""

    consumed: int
    produced: int
    status: Status


class TransformError(Exception):
    """Raised by the driver when a transformer cannot finish a stream."""


class Transformer(ABC):
    """Rewrites a source chunk into a caller-owned destination buffer.

    ``transform`` never raises for flow control. ``NEED_MORE_SOURCE`` asks the
    caller to append more input to the unconsumed remainder and call again;
    ``NEED_MORE_DESTINATION`` asks it to drain or grow ``dst`` and retry with
    the same remainder.
    """

    @abstractmethod
    def transform(self, dst: WritableBuffer, src: Buffer, at_eof: bool) -> TransformResult:
        ...

    def reset(self) -> None:
        """Prepare for a new stream."""
