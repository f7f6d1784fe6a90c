# File: hyperenrich/config.py
# Location: hyperenrich/hyperenrich/config.py

"""
Configuration for hyperenrich runs.

The packaged config.json holds the defaults of the enrichment options:

    max_annotation_lines  cap on lines read from the GAF file (null = all)
    min_study_count       terms with fewer annotated study genes are skipped
    aspects               sub-ontologies to test, e.g. ["P"] (null = F, P and C)
    excluded_evidence     evidence categories to ignore, e.g. ["IEA"]
    include_negated       count NOT-qualified annotations
    legacy_recurrence     reproduce the uncorrected p-value recurrence

A user file passed with -c/--config replaces the defaults as a whole; keys it
omits fall back to the EnrichmentConfig defaults, and command line options
override both.
"""

import json
import os
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.json")


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the enrichment options from a JSON file.

    Parameters
    ----------
    config_file : str, optional
        Path to a JSON configuration file. If None, the packaged defaults
        (DEFAULT_CONFIG_PATH) are loaded.

    Returns
    -------
    dict
        Option name to value, ready for EnrichmentConfig.from_dict.

    Raises
    ------
    FileNotFoundError
        If the specified configuration file does not exist.
    ValueError
        If the file is not valid JSON or does not hold a JSON object.
    """
    if not config_file:
        config_file = DEFAULT_CONFIG_PATH

    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Configuration file '{config_file}' not found.")

    with open(config_file, "r", encoding="utf-8") as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing JSON configuration: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file '{config_file}' must contain a JSON object.")

    return config
