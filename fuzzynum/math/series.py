"""
Series of float terms.

A series is either a finite tuple of terms or an infinite pure generator
index -> term. Both are restartable: partial_sums() starts from the first
term on every call and terms of an infinite series are recomputed on
request. Infinite series must always be evaluated with a bound.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Sequence

from fuzzynum.core.errors import UnboundedSeriesEvaluation
from fuzzynum.core.logging import get_context_logger
from .context import Context, resolve_context

logger = get_context_logger(__name__, component="series")


@dataclass(frozen=True)
class SeriesSum:
    """Result of evaluating a series: value, absolute error bound and terms used."""

    value: float
    error: float
    terms: int


class Series(ABC):
    """Abstract series."""

    @abstractmethod
    def term(self, n: int) -> float:
        """The n-th term (0-based)."""
        pass

    @property
    @abstractmethod
    def n_terms(self) -> Optional[int]:
        """Number of terms, None when infinite."""
        pass

    @property
    def is_finite(self) -> bool:
        return self.n_terms is not None

    def _indices(self) -> Iterator[int]:
        if self.n_terms is None:
            return itertools.count()
        return iter(range(self.n_terms))

    def partial_sums(self) -> Iterator[float]:
        """Lazy running totals; a fresh iterator on every call."""
        total = 0.0
        for n in self._indices():
            total += self.term(n)
            yield total

    def sum_terms(self, n: Optional[int] = None) -> float:
        """
        Sum of the first n terms (all terms of a finite series by default).

        Raises:
            UnboundedSeriesEvaluation: infinite series without n
        """
        if n is None:
            if self.n_terms is None:
                raise UnboundedSeriesEvaluation()
            n = self.n_terms
        elif self.n_terms is not None:
            n = min(n, self.n_terms)
        return sum((self.term(i) for i in range(n)), 0.0)

    def evaluate(
        self,
        epsilon: Optional[float] = None,
        max_terms: Optional[int] = None,
        context: Optional[Context] = None,
    ) -> SeriesSum:
        """
        Evaluate the series.

        With epsilon, terms are summed while |term| > epsilon and the error is
        epsilon / convergence_rate. The term count is capped by max_terms (or
        the context's max_terms); hitting the cap logs a warning and widens
        the error by the last term. Without epsilon, max_terms terms are summed
        and the first omitted term is the error.

        Raises:
            UnboundedSeriesEvaluation: infinite series with neither bound
        """
        if epsilon is None:
            return self._evaluate_count(max_terms)

        ctx = resolve_context(context)
        cap = max_terms if max_terms is not None else ctx.max_terms
        if self.n_terms is not None:
            cap = min(cap, self.n_terms)

        total = 0.0
        last = 0.0
        for n in range(cap):
            last = self.term(n)
            if abs(last) <= epsilon:
                return SeriesSum(total, epsilon / ctx.convergence_rate, n)
            total += last

        if self.n_terms is not None and cap == self.n_terms:
            # Every term was needed; the sum is complete
            return SeriesSum(total, 0.0, cap)

        logger.warning(
            "Series did not converge within the term cap",
            extra_data={"cap": cap, "epsilon": epsilon, "last_term": last},
        )
        return SeriesSum(total, epsilon / ctx.convergence_rate + abs(last), cap)

    def _evaluate_count(self, max_terms: Optional[int]) -> SeriesSum:
        if max_terms is None:
            if self.n_terms is None:
                raise UnboundedSeriesEvaluation()
            return SeriesSum(self.sum_terms(), 0.0, self.n_terms)

        n = max_terms if self.n_terms is None else min(max_terms, self.n_terms)
        total = self.sum_terms(n)
        if self.n_terms is not None and n == self.n_terms:
            return SeriesSum(total, 0.0, n)
        return SeriesSum(total, abs(self.term(n)), n)


@dataclass(frozen=True)
class FiniteSeries(Series):
    """Series over a fixed tuple of terms."""

    terms: Sequence[float] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "terms", tuple(self.terms))

    def term(self, n: int) -> float:
        return self.terms[n]

    @property
    def n_terms(self) -> Optional[int]:
        return len(self.terms)


@dataclass(frozen=True)
class InfiniteSeries(Series):
    """Series whose n-th term is generator(n); terms are not memoized."""

    generator: Callable[[int], float]

    def term(self, n: int) -> float:
        return self.generator(n)

    @property
    def n_terms(self) -> Optional[int]:
        return None
