"""Shared utilities: structured logging and locale-aware word segmentation."""

from .segmenter import get_word_count, register_segmenter, unregister_segmenter

__all__ = [
    "get_word_count",
    "register_segmenter",
    "unregister_segmenter",
]
