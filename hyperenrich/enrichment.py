# File: hyperenrich/enrichment.py
# Location: hyperenrich/hyperenrich/enrichment.py
"""
Term-for-term over-representation analysis.

Provides:
- EnrichmentConfig: options controlling which annotations are used and
  which terms are reported.
- TermResult: the counts and p-value for one GO term.
- perform_term_enrichment: counts population and study genes per term and
  computes P(X >= r) for each term with Hypergeometric.phypergeometric.

Every term is tested on its own, using only the genes directly annotated
to it. P-values are reported as computed; no multiple-testing correction
is applied.

Outputs
-------
A DataFrame with one row per tested term and the columns in
RESULT_COLUMNS, sorted by p_value (ascending, failures last) then term_id.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

import numpy as np
import pandas as pd

from hyperenrich.annotation import AnnotationSet, Aspect, EvidenceCategory
from hyperenrich.errors import HyperEnrichError
from hyperenrich.hypergeometric import Hypergeometric

logger = logging.getLogger("hyperenrich")

RESULT_COLUMNS = [
    "term_id",
    "population_count",
    "population_size",
    "study_count",
    "study_size",
    "proportion",
    "p_value",
    "study_genes",
    "error",
]


@dataclass
class EnrichmentConfig:
    """
    Configuration for term-for-term enrichment.

    Fields
    ------
    min_study_count : int
        Terms annotated to fewer study genes are not tested. Default: 1.
    aspects : list of Aspect | None
        Sub-ontologies to include. None = all three.
    excluded_evidence : list of EvidenceCategory
        Evidence categories whose annotations are ignored (e.g. IEA).
        Default: none.
    include_negated : bool
        Count 'NOT|' qualified annotations as annotations. Default: False.
    legacy_recurrence : bool
        Compute p-values with the uncorrected term recurrence, to reproduce
        results of older releases. Default: False.
    max_annotation_lines : int | None
        Read at most this many lines of the annotation file. None = all.
    """

    min_study_count: int = 1
    aspects: list[Aspect] | None = None
    excluded_evidence: list[EvidenceCategory] = field(default_factory=list)
    include_negated: bool = False
    legacy_recurrence: bool = False
    max_annotation_lines: int | None = None

    @classmethod
    def from_dict(cls, cfg: dict[str, Any]) -> EnrichmentConfig:
        """
        Build a config from a loaded configuration dictionary.

        Vocabulary values are given as strings ("P", "IEA"); keys that are
        not enrichment options are ignored.

        Raises
        ------
        ValueError
            If an aspect or evidence category is not recognized.
        """
        aspects = cfg.get("aspects")
        return cls(
            min_study_count=int(cfg.get("min_study_count", 1)),
            aspects=[Aspect.parse(a) for a in aspects] if aspects else None,
            excluded_evidence=[
                EvidenceCategory(e) for e in cfg.get("excluded_evidence") or []
            ],
            include_negated=bool(cfg.get("include_negated", False)),
            legacy_recurrence=bool(cfg.get("legacy_recurrence", False)),
            max_annotation_lines=cfg.get("max_annotation_lines"),
        )


@dataclass
class TermResult:
    """
    Result of the enrichment test for one GO term.

    Fields
    ------
    term_id : str
        GO id of the term.
    population_count : int
        Population genes annotated to the term.
    population_size : int
        Population genes (n).
    study_count : int
        Study genes annotated to the term (r).
    study_size : int
        Study genes (k).
    proportion : float
        population_count / population_size (p).
    p_value : float
        P(X >= study_count). NaN when the computation failed.
    study_genes : str
        Annotated study genes, sorted and ';'-joined.
    error : str | None
        Error message when the computation failed, otherwise None.
    """

    term_id: str
    population_count: int
    population_size: int
    study_count: int
    study_size: int
    proportion: float
    p_value: float
    study_genes: str
    error: str | None = None


def perform_term_enrichment(
    annotation_set: AnnotationSet,
    study_genes: Iterable[str],
    config: EnrichmentConfig | None = None,
    population_genes: Iterable[str] | None = None,
    engine: Hypergeometric | None = None,
) -> pd.DataFrame:
    """
    Test every annotated GO term for over-representation in the study set.

    Steps
    -----
    1. Select annotations by aspect, evidence and negation.
    2. Fix the population (all annotated genes unless given) and drop study
       genes outside it.
    3. For each term count population and study genes and compute
       P(X >= r) with n = population size, p = population count / n,
       k = study size, r = study count.

    Parameters
    ----------
    annotation_set : AnnotationSet
        Loaded annotations.
    study_genes : iterable of str
        Symbols of the study set.
    config : EnrichmentConfig, optional
        Defaults to EnrichmentConfig().
    population_genes : iterable of str, optional
        Symbols of the population. Defaults to every gene carrying at least
        one selected annotation. Annotations of genes outside the
        population are ignored.
    engine : Hypergeometric, optional
        Engine to reuse (its log-factorial cache is kept warm across runs).
        A new one is created when omitted.

    Returns
    -------
    pd.DataFrame
        One row per tested term with the columns in RESULT_COLUMNS. Empty
        (with those columns) when the study set or population is empty.

    Notes
    -----
    A term whose computation raises is logged, reported with p_value=NaN
    and its error message, and the remaining terms are still processed.
    """
    config = config or EnrichmentConfig()
    if engine is None:
        engine = Hypergeometric(legacy_recurrence=config.legacy_recurrence)

    term_genes = annotation_set.term_to_genes(
        aspects=config.aspects,
        excluded_evidence=config.excluded_evidence,
        include_negated=config.include_negated,
    )

    if population_genes is None:
        population = set().union(*term_genes.values()) if term_genes else set()
    else:
        population = set(population_genes)

    study = set(study_genes)
    outside = study - population
    if outside:
        logger.warning(
            f"{len(outside)} study genes are not in the population and are ignored: "
            f"{', '.join(sorted(outside)[:10])}{' ...' if len(outside) > 10 else ''}"
        )
    study &= population

    if not study or not population:
        logger.warning("Empty study set or population; no terms tested.")
        return pd.DataFrame(columns=RESULT_COLUMNS)

    n = len(population)
    k = len(study)
    if k >= n:
        logger.warning(
            f"Study set ({k} genes) is not smaller than the population ({n} genes); "
            "all p-values will be 1.0."
        )

    logger.info(f"Term enrichment: {len(term_genes)} terms, population={n}, study={k}")

    results: list[TermResult] = []
    n_failed = 0
    for term_id in sorted(term_genes):
        pop_hits = term_genes[term_id] & population
        study_hits = pop_hits & study
        r = len(study_hits)
        if not pop_hits or r < config.min_study_count:
            continue

        p = len(pop_hits) / n
        error = None
        try:
            p_value = engine.phypergeometric(n, p, k, r)
        except HyperEnrichError as e:
            n_failed += 1
            p_value = math.nan
            error = str(e)
            logger.warning(f"Term {term_id}: p-value computation failed: {e}")

        logger.debug(f"Term {term_id}: n={n}, p={p:.6g}, k={k}, r={r}, p_value={p_value}")
        results.append(
            TermResult(
                term_id=term_id,
                population_count=len(pop_hits),
                population_size=n,
                study_count=r,
                study_size=k,
                proportion=p,
                p_value=p_value,
                study_genes=";".join(sorted(study_hits)),
                error=error,
            )
        )

    if n_failed:
        logger.warning(f"{n_failed} of {len(results)} terms could not be tested.")

    if not results:
        logger.warning("No terms reached the minimum study count.")
        return pd.DataFrame(columns=RESULT_COLUMNS)

    results_df = pd.DataFrame([asdict(r) for r in results], columns=RESULT_COLUMNS)
    results_df["p_value"] = results_df["p_value"].astype(np.float64)
    results_df = results_df.sort_values(
        ["p_value", "term_id"], na_position="last"
    ).reset_index(drop=True)

    logger.debug("Term enrichment complete.")
    return results_df
