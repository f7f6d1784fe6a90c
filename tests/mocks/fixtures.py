"""Builders for GAF annotation test data."""

from pathlib import Path
from typing import Iterable, List, Optional


def gaf_line(db_object_id, symbol, qualifier, go_id, evidence, aspect) -> str:
    """Build a 17-column GAF 2.2 line."""
    fields = [
        "UniProtKB",
        db_object_id,
        symbol,
        qualifier,
        go_id,
        "PMID:12345",
        evidence,
        "",
        aspect,
        f"{symbol} protein",
        "",
        "protein",
        "taxon:9606",
        "20240101",
        "UniProt",
        "",
        "",
    ]
    return "\t".join(fields)


# GO:0000001 -> G1, G2, G3 (process, experimental and author evidence)
# GO:0000002 -> G4..G10 (process, IEA)
# GO:0000003 -> G1, and G2 with a NOT qualifier (function)
# GO:0000004 -> G5, G6 (component)
ANNOTATION_ROWS = [
    ("P00001", "G1", "involved_in", "GO:0000001", "IDA", "P"),
    ("P00002", "G2", "involved_in", "GO:0000001", "IMP", "P"),
    ("P00003", "G3", "acts_upstream_of", "GO:0000001", "TAS", "P"),
    *[(f"P{i:05d}", f"G{i}", "involved_in", "GO:0000002", "IEA", "P") for i in range(4, 11)],
    ("P00001", "G1", "enables", "GO:0000003", "IDA", "F"),
    ("P00002", "G2", "NOT|enables", "GO:0000003", "IDA", "F"),
    ("P00005", "G5", "located_in", "GO:0000004", "IBA", "C"),
    ("P00006", "G6", "located_in", "GO:0000004", "HDA", "C"),
]


def create_test_gaf(
    path: Path,
    rows: Iterable[tuple] = ANNOTATION_ROWS,
    header: Optional[List[str]] = None,
    extra_lines: Iterable[str] = (),
) -> Path:
    """Write a GAF file built from annotation rows and return its path."""
    if header is None:
        header = ["!gaf-version: 2.2", "!date-generated: 2024-05-01T12:00"]
    lines = list(header) + [gaf_line(*row) for row in rows] + list(extra_lines)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
