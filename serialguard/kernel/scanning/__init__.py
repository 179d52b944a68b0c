"""Recursive serializability scanning."""

from serialguard.kernel.scanning.cache import ScanCache
from serialguard.kernel.scanning.classifier import (
    EntryEnumerator,
    ValueClassifier,
    get_entries,
    is_plain,
    is_plain_record,
)
from serialguard.kernel.scanning.paths import (
    ROOT_MARKER,
    WILDCARD,
    IgnorePattern,
    KeyPath,
    compile_patterns,
    matches_any,
    render_key_path,
)
from serialguard.kernel.scanning.scanner import NonSerializableValue, find_non_serializable_value

__all__ = [
    "ROOT_MARKER",
    "WILDCARD",
    "EntryEnumerator",
    "IgnorePattern",
    "KeyPath",
    "NonSerializableValue",
    "ScanCache",
    "ValueClassifier",
    "compile_patterns",
    "find_non_serializable_value",
    "get_entries",
    "is_plain",
    "is_plain_record",
    "matches_any",
    "render_key_path",
]
