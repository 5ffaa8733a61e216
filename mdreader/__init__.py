"""
mdreader - chunked markdown reading with durable reading positions.

Core modules:
- chunking: Split documents into bounded-size segments
- parsing: Heading/TOC extraction and document discovery
- binding: Offset and heading lookups against the segment table
- pagination: Sliding window of loaded segments
- storage: Key-value backends, reading positions, caches, settings
- agents: LLM-backed translation of selected text
- reader: Reading session orchestration
"""

__version__ = "0.1.0"
