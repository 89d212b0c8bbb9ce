"""Streaming literal replacer that is safe across chunk boundaries."""

from typing import List, Optional, Union

from .history import ReplaceHistory
from .transformer import (
    NEED_MORE_DESTINATION,
    NEED_MORE_SOURCE,
    OK,
    Buffer,
    TransformResult,
    Transformer,
    WritableBuffer,
)

Rune = Union[int, str]

_REPLACEMENT_CHARACTER = "\ufffd"


def encode_rune(rune: Rune) -> bytes:
    """Return the UTF-8 encoding of a codepoint.

    Accepts an int or a one-character string. Surrogates and values outside
    the Unicode range encode as U+FFFD.
    """
    if isinstance(rune, str):
        if len(rune) != 1:
            raise TypeError(f"expected a single character, got {rune!r}")
        cp = ord(rune)
    elif isinstance(rune, int) and not isinstance(rune, bool):
        cp = rune
    else:
        raise TypeError(f"expected int or str codepoint, got {type(rune).__name__}")
    if cp < 0 or cp > 0x10FFFF or 0xD800 <= cp <= 0xDFFF:
        return _REPLACEMENT_CHARACTER.encode("utf-8")
    return chr(cp).encode("utf-8")


def _as_bytes(value: Optional[Buffer]) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected bytes-like pattern, got {type(value).__name__}")


def _prefix_function(pattern: bytes) -> List[int]:
    """``fail[i]`` is the longest proper prefix of ``pattern[:i + 1]`` that is also its suffix."""
    fail = [0] * len(pattern)
    k = 0
    for i in range(1, len(pattern)):
        while k and pattern[i] != pattern[k]:
            k = fail[k - 1]
        if pattern[i] == pattern[k]:
            k += 1
        fail[i] = k
    return fail


class Replacer(Transformer):
    """Replace every non-overlapping occurrence of ``old`` with ``new``.

    An empty ``old`` copies the source unchanged. When ``history`` is given,
    each replacement is recorded with offsets relative to the start of the
    stream (see ``reset``).

    The replacer keeps no partial-match state. When the end of a chunk could
    be the beginning of ``old``, those bytes are left unconsumed and the caller
    must hand them back, prefixed to the next chunk.
    """

    def __init__(
        self,
        old: Optional[Buffer],
        new: Optional[Buffer],
        history: Optional[ReplaceHistory] = None,
    ) -> None:
        self.old = _as_bytes(old)
        self.new = _as_bytes(new)
        self.history = history
        self._fail = _prefix_function(self.old)
        self._src_offset = 0
        self._dst_offset = 0

    def reset(self) -> None:
        self._src_offset = 0
        self._dst_offset = 0

    def transform(self, dst: WritableBuffer, src: Buffer, at_eof: bool) -> TransformResult:
        old, new = self.old, self.new
        if isinstance(src, memoryview):
            src = bytes(src)

        if len(src) < len(old) and not at_eof:
            return TransformResult(0, 0, NEED_MORE_SOURCE)

        if not old:
            n = min(len(dst), len(src))
            dst[:n] = src[:n]
            self._advance(n, n)
            status = NEED_MORE_DESTINATION if n < len(src) else OK
            return TransformResult(n, n, status)

        n_src = n_dst = 0
        while True:
            i = src.find(old, n_src)

            if i == -1:
                status = OK
                end = len(src)
                if not at_eof:
                    held = self._pending_prefix(src, n_src)
                    if held:
                        # may complete a match once the next chunk arrives
                        end -= held
                        status = NEED_MORE_DESTINATION
                n = min(end - n_src, len(dst) - n_dst)
                if n < end - n_src:
                    status = NEED_MORE_DESTINATION
                dst[n_dst:n_dst + n] = src[n_src:n_src + n]
                n_src += n
                n_dst += n
                break

            gap = i - n_src
            if len(dst) - n_dst < gap + len(new):
                status = NEED_MORE_DESTINATION
                break

            dst[n_dst:n_dst + gap] = src[n_src:i]
            n_dst += gap
            if self.history is not None:
                self.history.record(
                    self._src_offset + i,
                    self._src_offset + i + len(old),
                    self._dst_offset + n_dst,
                    self._dst_offset + n_dst + len(new),
                )
            dst[n_dst:n_dst + len(new)] = new
            n_dst += len(new)
            n_src = i + len(old)

        self._advance(n_src, n_dst)
        return TransformResult(n_src, n_dst, status)

    def _pending_prefix(self, src: Buffer, start: int) -> int:
        """Length of the longest suffix of ``src[start:]`` that is a proper prefix of ``old``.

        Only called when ``src[start:]`` holds no full occurrence of ``old``.
        """
        old, fail = self.old, self._fail
        k = 0
        for byte in src[max(start, len(src) - len(old) + 1):]:
            while k and byte != old[k]:
                k = fail[k - 1]
            if byte == old[k]:
                k += 1
        return k

    def _advance(self, consumed: int, produced: int) -> None:
        self._src_offset += consumed
        self._dst_offset += produced

    def __repr__(self) -> str:
        return f"Replacer({self.old!r} -> {self.new!r})"


def replace(old: Optional[Buffer], new: Optional[Buffer]) -> Replacer:
    """Shorthand for a ``Replacer`` without history."""
    return Replacer(old, new)


def replace_rune(old: Rune, new: Rune) -> Replacer:
    return replace(encode_rune(old), encode_rune(new))


def replace_string(old: str, new: str) -> Replacer:
    return replace(old.encode("utf-8"), new.encode("utf-8"))
