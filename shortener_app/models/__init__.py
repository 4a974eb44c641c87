"""
Storage models for the URL shortener.

KeyValueEntry is the only table; link and user records share it and are
told apart by key prefix.
"""

from .entry import KeyValueEntry
from .records import LinkRecord

__all__ = ["KeyValueEntry", "LinkRecord"]
