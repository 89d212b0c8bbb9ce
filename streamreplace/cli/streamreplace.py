"""streamreplace CLI entrypoint."""

import argparse
import logging
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO, List, Optional

from streamreplace.core import (
    AuditLogger,
    ByteTable,
    ReplaceHistory,
    StreamConfig,
    TransformError,
    load_rules,
    read_audit_log,
    replace_all,
    transform_stream,
)

logger = logging.getLogger(__name__)


def build_table(args: argparse.Namespace) -> ByteTable:
    table = load_rules(args.rules) if args.rules else ByteTable()
    olds: List[str] = args.old or []
    news: List[str] = args.new or []
    if len(olds) != len(news):
        raise ValueError(f"got {len(olds)} --old but {len(news)} --new values")
    for old, new in zip(olds, news):
        # fsencode restores argument bytes that are not valid UTF-8
        table.add(os.fsencode(old), os.fsencode(new))
    return table


def _open_input(stack: ExitStack, name: str) -> BinaryIO:
    if name == "-":
        return sys.stdin.buffer
    return stack.enter_context(open(name, "rb"))


def _open_output(stack: ExitStack, name: Optional[str]) -> BinaryIO:
    if name is None or name == "-":
        return sys.stdout.buffer
    return stack.enter_context(open(name, "wb"))


def run_replace(args: argparse.Namespace) -> None:
    table = build_table(args)
    config = StreamConfig(chunk_size=args.chunk_size)
    histories = [ReplaceHistory() for _ in range(len(table))]
    chain = replace_all(table, histories, config)

    with ExitStack() as stack:
        reader = _open_input(stack, args.input)
        writer = _open_output(stack, args.output)
        read, written = transform_stream(chain, reader, writer, config)
        writer.flush()

    replaced = sum(len(history) for history in histories)
    print(
        f"rules={len(table)} read={read} written={written} replacements={replaced}",
        file=sys.stderr,
    )

    if args.audit_log:
        audit = AuditLogger(Path(args.audit_log))
        for stage, history in enumerate(histories):
            audit.log_history(history, stage)
        logger.info("wrote %d audit records to %s", replaced, args.audit_log)


def audit_log(args: argparse.Namespace) -> None:
    for stage, rec in read_audit_log(args.path):
        print(
            f"stage={stage} src=[{rec.src0}, {rec.src1}) dst=[{rec.dst0}, {rec.dst1})"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Streaming literal byte replacement")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    replace_parser = subparsers.add_parser("replace", help="Replace patterns in a file or stdin")
    replace_parser.add_argument("input", help="Input path, or - for stdin")
    replace_parser.add_argument("-o", "--output", help="Output path (default stdout)")
    replace_parser.add_argument(
        "--old", action="append", help="Text to replace; repeat together with --new"
    )
    replace_parser.add_argument("--new", action="append", help="Replacement text for the matching --old")
    replace_parser.add_argument("--rules", help="JSON rules file, applied before --old/--new pairs")
    replace_parser.add_argument(
        "--chunk-size", type=int, default=StreamConfig.chunk_size, help="Bytes read per chunk"
    )
    replace_parser.add_argument("--audit-log", help="Append replacement ranges to this log")
    replace_parser.set_defaults(func=run_replace)

    audit_parser = subparsers.add_parser("audit-log", help="Display a replacement audit log")
    audit_parser.add_argument("path", help="Path to an audit log written by `replace --audit-log`")
    audit_parser.set_defaults(func=audit_log)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except (ValueError, OSError, TransformError) as exc:
        print(f"streamreplace: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
