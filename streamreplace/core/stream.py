"""Driver loops that pump bytes through a transformer."""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterable, Iterator, Optional, Tuple

from .config import StreamConfig
from .transformer import NEED_MORE_DESTINATION, Buffer, TransformError, Transformer

logger = logging.getLogger(__name__)


def pump(
    transformer: Transformer,
    data: Buffer,
    at_eof: bool,
    config: Optional[StreamConfig] = None,
) -> Tuple[int, bytes]:
    """Feed ``data`` to ``transformer`` until it stops asking for room.

    Returns the number of bytes of ``data`` consumed and the output produced.
    Bytes left unconsumed belong to the caller, who must prepend them to the
    next call.
    """
    config = config or StreamConfig()
    # one pass per buffer-full, so the remainder is re-sliced only a few times
    scratch = bytearray(min(max(config.buffer_size, len(data)), config.max_buffer_size))
    out = bytearray()
    pos = 0
    while True:
        consumed, produced, status = transformer.transform(scratch, data[pos:], at_eof)
        out += scratch[:produced]
        pos += consumed
        if status != NEED_MORE_DESTINATION:
            return pos, bytes(out)
        if consumed or produced:
            if produced == len(scratch) and len(scratch) * 2 <= config.max_buffer_size:
                scratch = bytearray(len(scratch) * 2)
            continue
        size = len(scratch) * 2
        if size > config.max_buffer_size:
            raise TransformError(
                f"{transformer!r} made no progress with a {len(scratch)} byte buffer"
            )
        logger.debug("growing destination buffer to %d bytes", size)
        scratch = bytearray(size)


def transform_bytes(
    transformer: Transformer,
    data: Buffer,
    config: Optional[StreamConfig] = None,
) -> bytes:
    """Transform a complete buffer in one pass."""
    transformer.reset()
    consumed, out = pump(transformer, data, True, config)
    if consumed != len(data):
        raise TransformError(f"{len(data) - consumed} bytes left unconsumed at end of stream")
    return out


def iter_transform(
    transformer: Transformer,
    chunks: Iterable[Buffer],
    config: Optional[StreamConfig] = None,
) -> Iterator[bytes]:
    """Yield transformed output as ``chunks`` arrive.

    Bytes the transformer withholds at a chunk boundary are carried into the
    next chunk; the last call is made with ``at_eof`` set.
    """
    transformer.reset()
    pending = bytearray()
    for chunk in chunks:
        pending += chunk
        consumed, out = pump(transformer, pending, False, config)
        del pending[:consumed]
        if out:
            yield out
    consumed, out = pump(transformer, pending, True, config)
    if consumed != len(pending):
        raise TransformError(f"{len(pending) - consumed} bytes left unconsumed at end of stream")
    if out:
        yield out


def transform_stream(
    transformer: Transformer,
    reader: BinaryIO,
    writer: BinaryIO,
    config: Optional[StreamConfig] = None,
) -> Tuple[int, int]:
    """Copy ``reader`` to ``writer`` through ``transformer``.

    Returns ``(bytes_read, bytes_written)``.
    """
    config = config or StreamConfig()
    read_total = 0
    written = 0

    def chunks() -> Iterator[bytes]:
        nonlocal read_total
        while True:
            chunk = reader.read(config.chunk_size)
            if not chunk:
                return
            read_total += len(chunk)
            yield chunk

    for out in iter_transform(transformer, chunks(), config):
        writer.write(out)
        written += len(out)
    logger.debug("transformed %d bytes into %d bytes", read_total, written)
    return read_total, written
