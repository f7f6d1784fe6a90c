"""Command-line interface for hyperenrich."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .annotation import Aspect, EvidenceCategory, annotation_descriptive_stats, read_gaf
from .config import load_config
from .enrichment import EnrichmentConfig, perform_term_enrichment
from .utils import read_gene_list
from .version import __version__

logger = logging.getLogger("hyperenrich")

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for the hyperenrich CLI."""
    parser = argparse.ArgumentParser(
        description="hyperenrich: GO term over-representation with exact hypergeometric p-values."
    )

    # General Options
    general_group = parser.add_argument_group("General Options")
    general_group.add_argument(
        "--version",
        action="version",
        version=f"hyperenrich {__version__}",
        help="Show the current version and exit",
    )
    general_group.add_argument(
        "--log-level",
        choices=list(LOG_LEVEL_MAP),
        default="INFO",
        help="Set the logging level",
    )
    general_group.add_argument(
        "--log-file", help="Path to a file to write logs to (in addition to stderr)."
    )
    general_group.add_argument(
        "-c",
        "--config",
        help="Path to configuration file",
        default=None,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    stats_parser = subparsers.add_parser(
        "stats", help="Print summary statistics of a GAF annotation file as JSON"
    )
    stats_parser.add_argument("gaf", help="GO annotation file (GAF 2.2, optionally gzipped)")
    stats_parser.add_argument(
        "--max-lines",
        type=int,
        default=None,
        help="Read at most this many lines of the annotation file",
    )

    enrich_parser = subparsers.add_parser(
        "enrich", help="Test each GO term for over-representation in a study gene set"
    )
    enrich_parser.add_argument("gaf", help="GO annotation file (GAF 2.2, optionally gzipped)")
    enrich_parser.add_argument(
        "-s", "--study", required=True, help="File with study gene symbols, one per line"
    )
    enrich_parser.add_argument(
        "-p",
        "--population",
        help="File with population gene symbols, one per line "
        "(default: all genes in the annotation file)",
    )
    enrich_parser.add_argument(
        "-o",
        "--output-file",
        default=None,
        help="Output TSV file, or '-' for stdout (default: stdout)",
    )
    enrich_parser.add_argument(
        "--aspect",
        action="append",
        choices=[a.value for a in Aspect],
        help="Restrict to a sub-ontology (F, P, C). May be given multiple times.",
    )
    enrich_parser.add_argument(
        "--exclude-evidence",
        action="append",
        choices=[e.value for e in EvidenceCategory],
        help="Ignore annotations of this evidence category. May be given multiple times.",
    )
    enrich_parser.add_argument(
        "--include-negated",
        action="store_true",
        default=None,
        help="Count NOT-qualified annotations",
    )
    enrich_parser.add_argument(
        "--min-study-count",
        type=int,
        default=None,
        help="Only test terms annotated to at least this many study genes",
    )
    enrich_parser.add_argument(
        "--legacy-recurrence",
        action="store_true",
        default=None,
        help="Use the uncorrected p-value recurrence of older releases (not a valid p-value)",
    )
    enrich_parser.add_argument(
        "--max-lines",
        type=int,
        default=None,
        help="Read at most this many lines of the annotation file",
    )

    return parser


def parse_args(args_list: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Parameters
    ----------
    args_list : list, optional
        List of arguments to parse. If None, uses sys.argv

    Returns
    -------
    argparse.Namespace
        Parsed arguments
    """
    parser = create_parser()
    return parser.parse_args(args_list)


def _configure_logging(args: argparse.Namespace) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("hyperenrich").setLevel(LOG_LEVEL_MAP[args.log_level])

    if args.log_file:
        log_file_path = Path(args.log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(args.log_file)
        fh.setLevel(LOG_LEVEL_MAP[args.log_level])
        fh.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(fh)
        logger.debug(f"Logging to file enabled: {args.log_file}")


def _merge_cli_options(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Override configuration values with the options given on the command line."""
    cfg = dict(cfg)
    if args.max_lines is not None:
        cfg["max_annotation_lines"] = args.max_lines
    if args.command != "enrich":
        return cfg
    if args.aspect:
        cfg["aspects"] = args.aspect
    if args.exclude_evidence:
        cfg["excluded_evidence"] = args.exclude_evidence
    if args.include_negated is not None:
        cfg["include_negated"] = args.include_negated
    if args.min_study_count is not None:
        cfg["min_study_count"] = args.min_study_count
    if args.legacy_recurrence is not None:
        cfg["legacy_recurrence"] = args.legacy_recurrence
    return cfg


def run_stats(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    """Print the descriptive statistics of an annotation file."""
    annotation_set = read_gaf(args.gaf, max_lines=cfg.get("max_annotation_lines"))
    stats = annotation_descriptive_stats(annotation_set)
    print(json.dumps(stats, indent=2))
    return 0


def run_enrich(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    """Run term-for-term enrichment and write the result table."""
    config = EnrichmentConfig.from_dict(cfg)
    logger.debug(f"Enrichment configuration: {config}")

    annotation_set = read_gaf(args.gaf, max_lines=config.max_annotation_lines)
    study_genes = read_gene_list(args.study)
    population_genes = read_gene_list(args.population) if args.population else None

    results_df = perform_term_enrichment(
        annotation_set, study_genes, config, population_genes=population_genes
    )

    if args.output_file in (None, "-", "stdout"):
        results_df.to_csv(sys.stdout, sep="\t", index=False)
    else:
        output_path = Path(args.output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        results_df.to_csv(output_path, sep="\t", index=False)
        logger.info(f"Wrote {len(results_df)} terms to {output_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run main entry point for the hyperenrich CLI.

    Steps:
        1. Parse arguments.
        2. Configure logging and load config.
        3. Apply command line overrides to the configuration.
        4. Run the selected subcommand.

    Returns 0 on success and 1 when an input file is missing or malformed.
    """
    args = parse_args(argv)
    _configure_logging(args)

    command_line = " ".join(["hyperenrich"] + (argv if argv is not None else sys.argv[1:]))
    logger.debug(f"Command line invocation: {command_line}")

    try:
        cfg = _merge_cli_options(load_config(args.config), args)
        logger.debug(f"Configuration loaded: {cfg}")

        if args.command == "stats":
            return run_stats(args, cfg)
        return run_enrich(args, cfg)
    except (FileNotFoundError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
