# File: hyperenrich/annotation.py
# Location: hyperenrich/hyperenrich/annotation.py
"""
GO annotation (GAF 2.2) reader.

Provides:
- GoTermRelation, EvidenceCategory, Aspect: closed vocabularies for the
  qualifier, evidence code and aspect columns.
- TermId: a CURIE such as "GO:0008150" or "UniProtKB:P12345".
- GoAnnotation: one parsed annotation line.
- AnnotationSet: the annotations of one file plus its header metadata. It is
  passed explicitly to everything that consumes annotations.
- parse_annotation_line / read_gaf: line and file parsers.
- annotation_descriptive_stats: summary table of a loaded file.

Format
------
GAF 2.2 files are tab separated with 17 columns. Lines starting with '!' are
header lines; '!gaf-version:' and '!date-generated:' are kept. The columns
used here are:

    0  DB                  e.g. UniProtKB
    1  DB Object ID        e.g. P12345
    2  DB Object Symbol    e.g. TP53
    3  Qualifier           relation, optionally prefixed with 'NOT|'
    4  GO ID               e.g. GO:0003677
    6  Evidence Code       e.g. IDA
    8  Aspect              F, P or C
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from hyperenrich.errors import AnnotationFormatError
from hyperenrich.utils import smart_open

logger = logging.getLogger("hyperenrich")

GOA_EXPECTED_FIELDS = 17
NEGATION_PREFIX = "NOT|"


class GoTermRelation(Enum):
    """
    Gene product to GO term relations.

    Molecular Function: ``enables``; ``contributes_to`` when the function is
    executed by a complex and cannot be ascribed to a single subunit.
    Biological Process: ``involved_in``; ``acts_upstream_of`` and
    ``acts_within`` when the mechanism linking the activity to the process
    is not known. Cellular Component: ``is_active_in`` for the location the
    function is enabled in, ``located_in`` where the product was detected,
    ``part_of`` for protein-containing complexes.
    """

    ENABLES = "enables"
    CONTRIBUTES_TO = "contributes_to"
    INVOLVED_IN = "involved_in"
    ACTS_UPSTREAM_OF = "acts_upstream_of"
    ACTS_WITHIN = "acts_within"
    IS_ACTIVE_IN = "is_active_in"
    LOCATED_IN = "located_in"
    PART_OF = "part_of"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> GoTermRelation:
        try:
            return cls(value)
        except ValueError:
            raise AnnotationFormatError(f"Did not recognize '{value}' as a GOA relation.")


class EvidenceCategory(Enum):
    """Evidence codes grouped into the categories used for filtering."""

    EXP = "EXP"  # inferred from experiment
    HTP = "HTP"  # inferred from high throughput experiment
    PHYLO = "PHYLO"  # phylogenetically inferred
    COMPUTATIONAL = "COMPUTATIONAL"  # computational analysis
    AUTHOR = "AUTHOR"  # author statement
    IC = "IC"  # curator statement
    ND = "ND"  # no biological data available
    IEA = "IEA"  # inferred from electronic annotation

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code: str) -> EvidenceCategory:
        """Map a GO evidence code (e.g. 'IDA') to its category."""
        try:
            return _EVIDENCE_CODES[code]
        except KeyError:
            raise AnnotationFormatError(f"Did not recognize '{code}' as EvidenceCode.")


_EVIDENCE_CODES = {
    **dict.fromkeys(("EXP", "IDA", "IPI", "IMP", "IGI", "IEP"), EvidenceCategory.EXP),
    **dict.fromkeys(("HTP", "HDA", "HMP", "HGI", "HEP"), EvidenceCategory.HTP),
    **dict.fromkeys(("IBA", "IBD", "IKR", "IRD"), EvidenceCategory.PHYLO),
    **dict.fromkeys(
        ("ISS", "ISO", "ISA", "ISM", "IGC", "RCA"), EvidenceCategory.COMPUTATIONAL
    ),
    **dict.fromkeys(("TAS", "NAS"), EvidenceCategory.AUTHOR),
    "IC": EvidenceCategory.IC,
    "ND": EvidenceCategory.ND,
    "IEA": EvidenceCategory.IEA,
}


class Aspect(Enum):
    """GO sub-ontology of the annotated term."""

    F = "F"  # molecular function
    P = "P"  # biological process
    C = "C"  # cellular component

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> Aspect:
        try:
            return cls(value)
        except ValueError:
            raise AnnotationFormatError(f"Did not recognize '{value}' as Aspect.")


@dataclass(frozen=True)
class TermId:
    """Compact URI of the form PREFIX:LOCAL_ID."""

    value: str

    @classmethod
    def from_parts(cls, prefix: str, local_id: str) -> TermId:
        return cls(f"{prefix}:{local_id}")

    @classmethod
    def from_curie(cls, curie: str) -> TermId:
        tokens = curie.split(":")
        if len(tokens) != 2:
            raise AnnotationFormatError(
                f"CURIE expected to have 2 fields, but had {len(tokens)} fields: {curie}"
            )
        return cls(curie)

    @property
    def prefix(self) -> str:
        return self.value.split(":", 1)[0]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GoAnnotation:
    """A single gene product to GO term annotation."""

    gene_product_id: TermId
    gene_product_symbol: str
    relation: GoTermRelation
    go_id: TermId
    evidence: EvidenceCategory
    aspect: Aspect
    negated: bool = False


@dataclass
class AnnotationSet:
    """
    Annotations loaded from one GAF file.

    Fields
    ------
    annotations : list of GoAnnotation
        Parsed annotation lines in file order.
    version : str | None
        Value of the '!gaf-version:' header, if present.
    date_generated : str | None
        Value of the '!date-generated:' header, if present.
    n_lines_read : int
        Number of lines consumed, header lines included.
    n_malformed : int
        Data lines that could not be parsed and were skipped.
    """

    annotations: list[GoAnnotation] = field(default_factory=list)
    version: str | None = None
    date_generated: str | None = None
    n_lines_read: int = 0
    n_malformed: int = 0

    def __len__(self) -> int:
        return len(self.annotations)

    def __iter__(self) -> Iterator[GoAnnotation]:
        return iter(self.annotations)

    def genes(self) -> set[str]:
        """Symbols of all annotated gene products."""
        return {a.gene_product_symbol for a in self.annotations}

    def filtered(
        self,
        aspects: Iterable[Aspect] | None = None,
        excluded_evidence: Iterable[EvidenceCategory] | None = None,
        include_negated: bool = False,
    ) -> list[GoAnnotation]:
        """Annotations restricted to the given aspects and evidence."""
        aspect_set = set(aspects) if aspects is not None else None
        excluded = set(excluded_evidence or ())
        return [
            a
            for a in self.annotations
            if (aspect_set is None or a.aspect in aspect_set)
            and a.evidence not in excluded
            and (include_negated or not a.negated)
        ]

    def term_to_genes(
        self,
        aspects: Iterable[Aspect] | None = None,
        excluded_evidence: Iterable[EvidenceCategory] | None = None,
        include_negated: bool = False,
    ) -> dict[str, set[str]]:
        """
        Map every GO id to the symbols directly annotated to it.

        Only direct annotations are used; nothing is propagated to parent
        terms.
        """
        mapping: dict[str, set[str]] = {}
        for a in self.filtered(aspects, excluded_evidence, include_negated):
            mapping.setdefault(a.go_id.value, set()).add(a.gene_product_symbol)
        return mapping


def parse_annotation_line(line: str, line_number: int | None = None) -> GoAnnotation:
    """
    Parse one GAF 2.2 data line.

    Raises
    ------
    AnnotationFormatError
        If the line does not have 17 tab-separated fields or a vocabulary
        column holds an unknown value.
    """
    tokens = line.rstrip("\r\n").split("\t")
    if len(tokens) != GOA_EXPECTED_FIELDS:
        raise AnnotationFormatError(
            f"GOA lines expected to have {GOA_EXPECTED_FIELDS} fields, "
            f"but line had {len(tokens)} fields: {line.rstrip()}",
            line_number,
        )

    qualifier = tokens[3]
    negated = qualifier.startswith(NEGATION_PREFIX)
    if negated:
        qualifier = qualifier[len(NEGATION_PREFIX) :]

    try:
        return GoAnnotation(
            gene_product_id=TermId.from_parts(tokens[0], tokens[1]),
            gene_product_symbol=tokens[2],
            relation=GoTermRelation.parse(qualifier),
            go_id=TermId.from_curie(tokens[4]),
            evidence=EvidenceCategory.parse(tokens[6]),
            aspect=Aspect.parse(tokens[8]),
            negated=negated,
        )
    except AnnotationFormatError as e:
        raise AnnotationFormatError(str(e), line_number) from e


def _header_value(line: str, key: str) -> str | None:
    prefix = f"!{key}:"
    if line.startswith(prefix):
        return line[len(prefix) :].strip()
    return None


def read_gaf(file_path: str, max_lines: int | None = None) -> AnnotationSet:
    """
    Read a GAF 2.2 file (plain or gzipped) into an AnnotationSet.

    Parameters
    ----------
    file_path : str
        Path to the annotation file.
    max_lines : int, optional
        Stop after this many lines (header lines included). None reads the
        whole file.

    Returns
    -------
    AnnotationSet
        Parsed annotations. Lines that fail to parse are logged and counted
        in ``n_malformed``; they do not abort the read.

    Raises
    ------
    FileNotFoundError, OSError
        If the file cannot be opened or read.
    """
    annotation_set = AnnotationSet()

    with smart_open(file_path, "r") as fh:
        for line_number, line in enumerate(fh, start=1):
            if max_lines is not None and line_number > max_lines:
                logger.warning(f"Stopped reading {file_path} after {max_lines} lines")
                break
            annotation_set.n_lines_read = line_number

            if line.startswith("!"):
                version = _header_value(line, "gaf-version")
                if version is not None:
                    annotation_set.version = version
                date_generated = _header_value(line, "date-generated")
                if date_generated is not None:
                    annotation_set.date_generated = date_generated
                continue

            if not line.strip():
                continue

            try:
                annotation_set.annotations.append(parse_annotation_line(line, line_number))
            except AnnotationFormatError as e:
                annotation_set.n_malformed += 1
                logger.warning(f"{file_path}:{line_number}: {e}")

    logger.info(
        f"Parsed {len(annotation_set)} annotations from {file_path} "
        f"({annotation_set.n_malformed} malformed lines skipped)"
    )
    return annotation_set


def annotation_descriptive_stats(annotation_set: AnnotationSet) -> list[dict[str, str]]:
    """
    Summarize an annotation set as a key/value table.

    Returns
    -------
    list of dict
        Entries ``{"key": ..., "value": ...}`` (values as strings) for:
        ``length`` (number of annotations), ``genes`` (distinct symbols),
        one entry per relation with its count (sorted by relation name),
        and ``date generation`` when the file header carried it.
    """
    stats = [
        {"key": "length", "value": str(len(annotation_set))},
        {"key": "genes", "value": str(len(annotation_set.genes()))},
    ]

    relation_counts = Counter(a.relation for a in annotation_set)
    for relation in sorted(relation_counts, key=lambda r: r.value):
        stats.append({"key": str(relation), "value": str(relation_counts[relation])})

    if annotation_set.date_generated:
        stats.append({"key": "date generation", "value": annotation_set.date_generated})

    return stats
