"""Command-line inspection of documents, segments and saved positions.

Usage:
    python -m mdreader list ~/Documents/books
    python -m mdreader toc book/book.md
    python -m mdreader segments book/book.md --config reader.yaml
    python -m mdreader position my-book --store positions.json
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .binding.locator import segment_for_offset
from .chunking.chunker import Chunker
from .config import load_config
from .errors import DocumentLoadError
from .parsing.documents import list_subfolders, read_markdown_file
from .parsing.headings import extract_headings
from .storage.kv import JsonFileKeyValueStore
from .storage.positions import PositionStore


def cmd_list(args: argparse.Namespace) -> int:
    documents = list_subfolders(args.docs_path)
    if not documents:
        print(f"No documents found in {args.docs_path}")
        return 0

    for doc in documents:
        print(f"{doc.id}\t{doc.folder_path}")
    print(f"\n{len(documents)} documents")
    return 0


def cmd_toc(args: argparse.Namespace) -> int:
    content = read_markdown_file(Path(args.file))
    headings = extract_headings(content)

    for h in headings:
        if args.max_level and h.level > args.max_level:
            continue
        indent = "  " * (h.level - 1)
        print(f"{h.index:4d}  {indent}{h.text}  (@{h.character_offset})")
    print(f"\n{len(headings)} headings")
    return 0


def cmd_segments(args: argparse.Namespace) -> int:
    reader_config, _ = load_config(Path(args.config) if args.config else None)
    target = args.target_size or reader_config.target_segment_size

    content = read_markdown_file(Path(args.file))
    chunker = Chunker(
        target_size=target,
        heading_split_ratio=reader_config.heading_split_ratio,
        force_split_ratio=reader_config.force_split_ratio,
    )
    segments = chunker.chunk(content)
    headings = extract_headings(content)

    print(f"{'='*60}")
    print(f"File: {args.file} ({len(content)} chars)")
    print(f"Target: {target} chars, {len(segments)} segments")
    print(f"{'='*60}")

    heading_counts = [0] * len(segments)
    for h in headings:
        heading_counts[segment_for_offset(h.character_offset, segments)] += 1

    for seg in segments:
        first_line = seg.text(content).split("\n", 1)[0][:50]
        print(
            f"[{seg.index:3d}] {seg.start_offset:>9d}-{seg.end_offset:<9d} "
            f"{seg.length:>7d} chars  {heading_counts[seg.index]:3d} headings  {first_line}"
        )
    return 0


def cmd_position(args: argparse.Namespace) -> int:
    positions = PositionStore(JsonFileKeyValueStore(Path(args.store)))

    if args.clear:
        asyncio.run(positions.clear(args.document_id))
        print(f"Cleared position for {args.document_id}")
        return 0

    record = asyncio.run(positions.load(args.document_id))
    if record is None:
        print(f"No saved position for {args.document_id}")
        return 1

    print(record.model_dump_json(indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdreader", description=__doc__.split("\n")[0])
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List document folders")
    p.add_argument("docs_path")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("toc", help="Print the table of contents of a markdown file")
    p.add_argument("file")
    p.add_argument("--max-level", type=int, default=0)
    p.set_defaults(func=cmd_toc)

    p = sub.add_parser("segments", help="Show how a markdown file is chunked")
    p.add_argument("file")
    p.add_argument("--config", help="YAML config file")
    p.add_argument("--target-size", type=int, default=0)
    p.set_defaults(func=cmd_segments)

    p = sub.add_parser("position", help="Show or clear a saved reading position")
    p.add_argument("document_id")
    p.add_argument("--store", required=True, help="JSON position store file")
    p.add_argument("--clear", action="store_true")
    p.set_defaults(func=cmd_position)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except DocumentLoadError as e:
        print(f"Failed to load document: {e}", file=sys.stderr)
        return 1
