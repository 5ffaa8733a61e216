"""
Content hashing utilities.
"""

import hashlib


def content_hash(content: str) -> str:
    """
    Hash document content to detect changes between sessions.

    Args:
        content: Document text

    Returns:
        Hex SHA-256 digest of the UTF-8 encoded text
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
