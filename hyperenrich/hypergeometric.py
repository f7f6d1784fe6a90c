# File: hyperenrich/hypergeometric.py
# Location: hyperenrich/hyperenrich/hypergeometric.py
"""
Exact hypergeometric probabilities computed in log space.

Provides:
- Hypergeometric: engine holding a memoized table of log factorials, with
  - logfact / log_choose: log factorials and log binomial coefficients,
  - dhyper: the hypergeometric density,
  - phyper: lower or upper cumulative tail, summing whichever side is shorter,
  - phypergeometric: one-sided over-representation p-value P(X >= r),
    computed with an O(1) per-term recurrence after a single seed term.

Sampling model
--------------
A study set of k genes is drawn without replacement from a population of n
genes. For a given term the population splits into round(n*p) annotated and
round(n*(1-p)) unannotated genes; the probability of seeing r annotated
genes in the study set follows the hypergeometric distribution (see
GeneMerge, Castillo-Davis et al., Bioinformatics).

Recurrence
----------
phypergeometric walks the terms i = top, top-1, ..., r and moves from the
log term for i to the one for i-1 by adding

    log(i / (np - i + 1)) + log((nq - k + i) / (k - i + 1))

Older releases added the two ratios themselves instead of their logarithms,
which overstates every term after the first. That arithmetic is still
available through ``legacy_recurrence=True`` for comparisons against results
produced with those releases; it is not a valid p-value.

Thread safety
-------------
The log-factorial table is the only mutable state. It grows under a
per-instance lock, so an engine may be shared between threads; callers that
prefer isolation can simply create one engine each.
"""

from __future__ import annotations

import logging
import math
import numbers
import threading
from decimal import ROUND_HALF_UP, Decimal

from hyperenrich.errors import InternalError, InvalidArgumentError

logger = logging.getLogger("hyperenrich")


def _require_index(name: str, value) -> int:
    """Return ``value`` as an int, raising InvalidArgumentError unless it is a nonnegative integer."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}", {name: value})
    if value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value}", {name: value})
    return int(value)


def _require_proportion(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(f"{name} must be a real number, got {value!r}", {name: value})
    value = float(value)
    if math.isnan(value) or value < 0.0 or value > 1.0:
        raise InvalidArgumentError(f"{name} must be in [0, 1], got {value}", {name: value})
    return value


def round_half_up(value: float) -> int:
    """
    Round a nonnegative float to the nearest integer, ties away from zero.

    Python's round() rounds ties to even, which would turn a population of
    5 genes at p=0.5 into 2 annotated and 2 unannotated genes. Population
    counts are derived with this function instead.
    """
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


_CLAMP_TOLERANCE = 1e-9


def _clamp_probability(value: float) -> float:
    """Clip floating-point overshoot into [0, 1]; larger excursions are logged."""
    if value < 0.0 or value > 1.0:
        if value < -_CLAMP_TOLERANCE or value > 1.0 + _CLAMP_TOLERANCE:
            logger.warning(f"Probability {value!r} outside [0, 1] clamped")
        return 0.0 if value < 0.0 else 1.0
    return value


class Hypergeometric:
    """
    Hypergeometric distribution functions backed by a log-factorial cache.

    Usage
    -----
    >>> hg = Hypergeometric()
    >>> hg.dhyper(5, 3, 10, 4)
    0.0
    >>> hg.phypergeometric(n=1000, p=0.02, k=50, r=0)
    1.0

    Parameters
    ----------
    legacy_recurrence : bool
        Reproduce the uncorrected term recurrence in phypergeometric (adds
        the raw step ratios to the log term). Only for reproducing old
        results; the default False gives the exact tail probability.
    """

    def __init__(self, legacy_recurrence: bool = False) -> None:
        # log(0!) = log(1!) = 0
        self._lfactorial: list[float] = [0.0, 0.0]
        self._lock = threading.Lock()
        self.legacy_recurrence = legacy_recurrence

    @property
    def cache_size(self) -> int:
        """Number of log factorials currently held (highest cached index + 1)."""
        return len(self._lfactorial)

    def logfact(self, i: int) -> float:
        """
        Return log(i!), extending the cache through ``i`` if needed.

        Only the missing suffix of the table is computed, each entry from its
        predecessor: log(j!) = log((j-1)!) + log(j).

        Raises
        ------
        InvalidArgumentError
            If ``i`` is not a nonnegative integer.
        InternalError
            If the table does not hold index ``i`` after extension.
        """
        i = _require_index("i", i)
        if i >= len(self._lfactorial):
            with self._lock:
                start = len(self._lfactorial)
                for j in range(start, i + 1):
                    self._lfactorial.append(self._lfactorial[-1] + math.log(j))
                if i >= start:
                    logger.debug(f"Extended log factorial cache from {start} to {i + 1} entries")
        try:
            return self._lfactorial[i]
        except IndexError as e:
            raise InternalError(
                f"Could not calculate log factorial for j={i}", {"cache_size": self.cache_size}
            ) from e

    def log_choose(self, n: int, k: int) -> float:
        """
        Return log(n choose k).

        Raises
        ------
        InvalidArgumentError
            If ``k > n`` or either argument is negative.
        """
        n = _require_index("n", n)
        k = _require_index("k", k)
        if k > n:
            raise InvalidArgumentError(f"k must be <= n, got n={n}, k={k}", {"n": n, "k": k})
        return self.logfact(n) - self.logfact(k) - self.logfact(n - k)

    def dhyper(self, x: int, m: int, n: int, k: int) -> float:
        """
        Density of the hypergeometric distribution.

        Parameters
        ----------
        x : int
            Number of white balls drawn without replacement.
        m : int
            Number of white balls in the urn.
        n : int
            Number of black balls in the urn.
        k : int
            Number of balls drawn from the urn, in 0, 1, ..., m + n.

        Returns
        -------
        float
            P(X = x). Exactly 0.0 when the outcome is impossible: more white
            balls than the urn holds (x > m), more white balls than draws
            (x > k), or more black balls than the urn holds (k - x > n).
        """
        x = _require_index("x", x)
        m = _require_index("m", m)
        n = _require_index("n", n)
        k = _require_index("k", k)

        if x > m:
            return 0.0
        if x > k:
            return 0.0
        if k - x > n:
            return 0.0

        # ways to choose x white + ways to choose k-x black, over ways to choose k of m+n
        log_p = self.log_choose(m, x) + self.log_choose(n, k - x) - self.log_choose(m + n, k)
        return math.exp(log_p)

    def phyper(self, x: int, N: int, M: int, n: int, lower_tail: bool = True) -> float:
        """
        Cumulative hypergeometric probability.

        Parameters
        ----------
        x : int
            Number of white balls drawn without replacement.
        N : int
            Number of balls in the urn.
        M : int
            Number of white balls in the urn.
        n : int
            Number of balls drawn from the urn.
        lower_tail : bool
            If True return P(X <= x), otherwise P(X > x).

        Returns
        -------
        float
            The requested tail probability.

        Notes
        -----
        The largest attainable value is up = min(n, M). When x lies in the
        lower half of [0, up] the densities 0..x are summed, otherwise
        x+1..up, and the complement is taken when the other tail was asked
        for.
        """
        x = _require_index("x", x)
        N = _require_index("N", N)
        M = _require_index("M", M)
        n = _require_index("n", n)
        if M > N:
            raise InvalidArgumentError(f"M must be <= N, got N={N}, M={M}", {"N": N, "M": M})
        if n > N:
            raise InvalidArgumentError(f"n must be <= N, got N={N}, n={n}", {"N": N, "n": n})

        black = N - M
        up = min(n, M)

        if x < up // 2:
            p = 0.0
            for i in range(x, -1, -1):
                p += self.dhyper(i, M, black, n)
            return _clamp_probability(p if lower_tail else 1.0 - p)

        q = 0.0
        for i in range(x + 1, up + 1):
            q += self.dhyper(i, M, black, n)
        return _clamp_probability(1.0 - q if lower_tail else q)

    def phypergeometric(self, n: int, p: float, k: int, r: int) -> float:
        """
        Probability of at least ``r`` annotated genes in a study set.

        Parameters
        ----------
        n : int
            Number of population genes.
        p : float
            Proportion of population genes annotated to the term.
        k : int
            Number of study genes.
        r : int
            Number of study genes annotated to the term.

        Returns
        -------
        float
            P(X >= r). 1.0 when the study set is not smaller than the
            population (k >= n, which points to a problem in the input data)
            and when r < 1. 0.0 when r exceeds the largest attainable count.

        Raises
        ------
        InvalidArgumentError
            For negative counts or p outside [0, 1].

        Notes
        -----
        The urn holds np = round(n*p) annotated and nq = round(n*(1-p))
        unannotated genes. When n*p ends in exactly .5 both counts round up
        and np + nq = n + 1; the terms are then normalized by C(np + nq, k)
        so the result equals the sum of dhyper(i, np, nq, k) for i >= r.
        """
        n = _require_index("n", n)
        k = _require_index("k", k)
        r = _require_index("r", r)
        p = _require_proportion("p", p)

        if k >= n:
            return 1.0
        if r < 1:
            return 1.0

        n_annotated = round_half_up(n * p)
        n_unannotated = round_half_up(n * (1.0 - p))

        urn_size = n_annotated + n_unannotated
        if urn_size != n:
            logger.debug(
                f"Rounding n={n}, p={p} gives {n_annotated} + {n_unannotated} = {urn_size} "
                f"genes; using an urn of {urn_size}"
            )
        log_n_choose_k = self.log_choose(urn_size, k)
        top = min(n_annotated, k)

        lfoo = self.log_choose(n_annotated, top) + self.log_choose(n_unannotated, k - top)

        total = 0.0
        for i in range(top, r - 1, -1):
            total += math.exp(lfoo - log_n_choose_k)
            if i > r:
                lfoo += self._step(i, n_annotated, n_unannotated, k)

        if self.legacy_recurrence:
            return total
        return _clamp_probability(total)

    def _step(self, i: int, n_annotated: int, n_unannotated: int, k: int) -> float:
        """Increment turning the log term for ``i`` into the log term for ``i - 1``."""
        if self.legacy_recurrence:
            return i / (n_annotated - i + 1) + (n_unannotated - k + i) / (k - i + 1)

        numerator = n_unannotated - k + i
        if numerator <= 0:
            # term i-1 needs more unannotated genes than exist; so do all after it
            return -math.inf
        return math.log(i / (n_annotated - i + 1)) + math.log(numerator / (k - i + 1))
