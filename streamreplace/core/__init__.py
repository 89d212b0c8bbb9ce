"""Core modules for streaming byte replacement."""

from .audit import AuditLogger, read_audit_log  # noqa: F401
from .chain import Chain, replace_all  # noqa: F401
from .config import StreamConfig, load_rules  # noqa: F401
from .history import HistoryRecord, ReplaceHistory  # noqa: F401
from .replacer import Replacer, encode_rune, replace, replace_rune, replace_string  # noqa: F401
from .stream import iter_transform, pump, transform_bytes, transform_stream  # noqa: F401
from .table import ByteTable, ReplaceTable, RuneTable, StringTable  # noqa: F401
from .transformer import (  # noqa: F401
    NEED_MORE_DESTINATION,
    NEED_MORE_SOURCE,
    OK,
    TransformError,
    TransformResult,
    Transformer,
)
