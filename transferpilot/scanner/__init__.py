"""Scanner module for picked item expansion and classification."""

from .classifier import Category, classify
from .scanner import FileEntry, PickedItem, PickKind, items_from_paths, scan

__all__ = [
    "Category",
    "FileEntry",
    "PickKind",
    "PickedItem",
    "classify",
    "items_from_paths",
    "scan",
]
