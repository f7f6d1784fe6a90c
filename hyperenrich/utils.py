# File: hyperenrich/utils.py
# Location: hyperenrich/hyperenrich/utils.py

"""
Utility functions module.

Provides helpers for opening (optionally gzipped) input files and reading
plain gene lists.
"""

import gzip
import logging
from typing import List

logger = logging.getLogger("hyperenrich")


def smart_open(filename: str, mode: str = "r", encoding: str = "utf-8"):
    """
    Open a file with automatic gzip support based on file extension.

    Annotation files are distributed as ``goa_human.gaf.gz`` and the like, so
    both compressed and plain files are accepted everywhere a path is read.

    Parameters
    ----------
    filename : str
        Path to the file
    mode : str
        File opening mode ('r', 'w', 'rt', 'wt', etc.)
    encoding : str
        Text encoding (for text modes)

    Returns
    -------
    file object
        Opened file handle
    """
    if str(filename).endswith(".gz"):
        # Ensure text mode for gzip
        if "t" not in mode and "b" not in mode:
            mode = mode + "t"
        return gzip.open(filename, mode, encoding=encoding)
    else:
        if "b" not in mode:
            return open(filename, mode, encoding=encoding)
        else:
            return open(filename, mode)


def read_gene_list(filename: str) -> List[str]:
    """
    Read gene symbols from a file, one per line.

    Blank lines and lines starting with '#' are ignored, surrounding
    whitespace is stripped and duplicates are dropped (first occurrence
    wins).

    Parameters
    ----------
    filename : str
        Path to the gene list.

    Returns
    -------
    List[str]
        Gene symbols in file order.
    """
    genes: List[str] = []
    seen = set()
    with smart_open(filename, "r") as fh:
        for line in fh:
            symbol = line.strip()
            if not symbol or symbol.startswith("#"):
                continue
            if symbol in seen:
                continue
            seen.add(symbol)
            genes.append(symbol)
    logger.debug(f"Read {len(genes)} genes from {filename}")
    return genes
