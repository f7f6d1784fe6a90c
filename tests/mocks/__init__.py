"""Test fixtures for hyperenrich tests."""

from .fixtures import ANNOTATION_ROWS, create_test_gaf, gaf_line

__all__ = [
    "ANNOTATION_ROWS",
    "create_test_gaf",
    "gaf_line",
]
