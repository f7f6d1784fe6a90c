"""Shared pytest fixtures for all test modules."""

from pathlib import Path
from typing import List

import pytest

from hyperenrich.annotation import read_gaf
from hyperenrich.hypergeometric import Hypergeometric
from tests.mocks.fixtures import ANNOTATION_ROWS, create_test_gaf, gaf_line

GAF_HEADER = [
    "!gaf-version: 2.2",
    "!date-generated: 2024-05-01T12:00",
    "!generated-by: UniProt",
]

MALFORMED_LINES = [
    # wrong number of columns
    "UniProtKB\tP00099\tBAD\tinvolved_in",
    # unknown evidence code
    gaf_line("P00009", "G9", "involved_in", "GO:0000005", "XYZ", "P"),
]


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line("markers", "integration: tests running the CLI end to end")


@pytest.fixture
def gaf_lines() -> List[str]:
    """Header, valid annotations and two malformed lines."""
    return GAF_HEADER + [gaf_line(*row) for row in ANNOTATION_ROWS] + MALFORMED_LINES


@pytest.fixture
def gaf_file(tmp_path) -> Path:
    """GAF fixture written to disk."""
    return create_test_gaf(
        tmp_path / "test.gaf", header=GAF_HEADER, extra_lines=MALFORMED_LINES
    )


@pytest.fixture
def annotation_set(gaf_file):
    """Parsed GAF fixture."""
    return read_gaf(str(gaf_file))


@pytest.fixture
def study_file(tmp_path) -> Path:
    """Study gene list G1, G2, G3 with a comment and a blank line."""
    path = tmp_path / "study.txt"
    path.write_text("# study genes\nG1\nG2\n\nG3\n", encoding="utf-8")
    return path


@pytest.fixture
def engine() -> Hypergeometric:
    """Fresh engine with an empty log-factorial cache."""
    return Hypergeometric()
