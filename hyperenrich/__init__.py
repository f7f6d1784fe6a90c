# File: hyperenrich/__init__.py
# Location: hyperenrich/hyperenrich/__init__.py

"""
hyperenrich Package.

This package provides exact hypergeometric probabilities in log space and
the term-for-term over-representation analysis built on them, together
with a reader for GO annotation (GAF 2.2) files.
"""

from .version import __version__
