"""Ordered replacement rule tables backed by bytes, strings or codepoints."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Tuple

from .replacer import Rune, encode_rune

Pair = Tuple[bytes, bytes]


class ReplaceTable(ABC):
    """Ordered ``(old, new)`` rules exposed as bytes.

    Items are stored flat: element ``2*i`` is the i-th ``old``, element
    ``2*i + 1`` its replacement.
    """

    def __init__(self, items: Iterable[Any] = ()) -> None:
        items = list(items)
        if len(items) % 2:
            raise ValueError(
                f"{type(self).__name__} needs old/new pairs; rule {len(items) // 2} has no replacement"
            )
        self._items: List[Any] = []
        for old, new in zip(items[0::2], items[1::2]):
            self.add(old, new)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[Any, Any]]):
        table = cls()
        for old, new in pairs:
            table.add(old, new)
        return table

    def add(self, old: Any, new: Any) -> None:
        self._check(old)
        self._check(new)
        self._items.extend((old, new))

    def at(self, i: int) -> Pair:
        if not 0 <= i < len(self):
            raise IndexError(f"rule index {i} out of range (size {len(self)})")
        return self._encode(self._items[2 * i]), self._encode(self._items[2 * i + 1])

    def pairs(self) -> List[Pair]:
        return [self.at(i) for i in range(len(self))]

    def __len__(self) -> int:
        return len(self._items) // 2

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pairs()!r})"

    @abstractmethod
    def _check(self, value: Any) -> None:
        """Raise TypeError when ``value`` cannot be stored in this table."""

    @abstractmethod
    def _encode(self, value: Any) -> bytes:
        ...


class ByteTable(ReplaceTable):
    """Rules given as raw bytes."""

    def _check(self, value: Any) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"ByteTable expects bytes-like rules, got {type(value).__name__}")

    def _encode(self, value: Any) -> bytes:
        return bytes(value)


class StringTable(ReplaceTable):
    """Rules given as text, UTF-8 encoded on access."""

    def _check(self, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeError(f"StringTable expects str rules, got {type(value).__name__}")
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValueError(f"StringTable rule {value!r} is not encodable as UTF-8: {exc.reason}") from exc

    def _encode(self, value: str) -> bytes:
        return value.encode("utf-8")


class RuneTable(ReplaceTable):
    """Rules given as single codepoints (int or one-character str)."""

    def _check(self, value: Any) -> None:
        encode_rune(value)

    def _encode(self, value: Rune) -> bytes:
        return encode_rune(value)
