"""Stream sizing defaults and JSON rule loading."""

import binascii
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from .table import ByteTable

DEFAULT_CHUNK_SIZE = 4096
DEFAULT_BUFFER_SIZE = 4096
DEFAULT_MAX_BUFFER_SIZE = 64 * 1024 * 1024


@dataclass
class StreamConfig:
    """Buffer sizes used when pumping bytes through a transformer."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE

    def __post_init__(self) -> None:
        for name in ("chunk_size", "buffer_size", "max_buffer_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.max_buffer_size < self.buffer_size:
            raise ValueError("max_buffer_size must be at least buffer_size")


def _rule_bytes(rule: Dict[str, Any], key: str, index: int) -> bytes:
    if key in rule:
        value = rule[key]
        if not isinstance(value, str):
            raise ValueError(f"rule {index}: {key!r} must be a string")
        return value.encode("utf-8")
    hex_key = f"{key}_hex"
    if hex_key in rule:
        try:
            return binascii.unhexlify(rule[hex_key])
        except (binascii.Error, TypeError) as exc:
            raise ValueError(f"rule {index}: invalid hex in {hex_key!r}: {exc}") from exc
    raise ValueError(f"rule {index}: missing {key!r} or {hex_key!r}")


def load_rules(path: Union[str, Path]) -> ByteTable:
    """Read replacement rules from a JSON file.

    The file holds a list of rule objects, or ``{"rules": [...]}``. Each rule
    gives ``old``/``new`` as text or ``old_hex``/``new_hex`` as hex bytes.
    """
    with Path(path).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    rules: List[Any]
    if isinstance(payload, dict):
        rules = payload.get("rules", [])
    else:
        rules = payload
    if not isinstance(rules, list):
        raise ValueError("rules must be a JSON list")

    table = ByteTable()
    for index, rule in enumerate(rules):
        if not isinstance(rule, dict):
            raise ValueError(f"rule {index}: expected an object, got {type(rule).__name__}")
        table.add(_rule_bytes(rule, "old", index), _rule_bytes(rule, "new", index))
    return table
