"""
Exception types raised by mdreader.
"""


class MdReaderError(Exception):
    """Base class for mdreader errors."""


class HeadingNotFound(MdReaderError, LookupError):
    """A heading ordinal does not exist in the current document."""

    def __init__(self, heading_index: int, total: int) -> None:
        super().__init__(f"Heading {heading_index} not found ({total} headings)")
        self.heading_index = heading_index
        self.total = total


class DocumentLoadError(MdReaderError):
    """The full content of a document could not be read."""


class StorageError(MdReaderError):
    """A key-value store could not be read or written."""


class TranslationConfigError(MdReaderError):
    """Translation is enabled but the API settings are incomplete."""
