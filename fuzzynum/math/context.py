"""
Numeric context.

The Context carries the numeric policy used by comparison, series
evaluation and function evaluation: the default confidence level, series
bounds, and the precision constants. It is immutable; with_flags() returns
an adjusted copy.
"""

from functools import lru_cache
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from fuzzynum.core.config import Settings, get_settings


class Context(BaseModel):
    """Per-call numeric policy."""

    model_config = ConfigDict(frozen=True)

    confidence: float = Field(default=0.5, gt=0.0, lt=1.0)
    fuzz_epsilon: float = Field(default=1e-17, ge=0.0)
    series_epsilon: float = Field(default=1e-15, gt=0.0)
    max_terms: int = Field(default=1000, gt=0)
    convergence_rate: float = Field(default=0.001, gt=0.0)
    double_precision: float = Field(default=2.0 ** -53, gt=0.0)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Context":
        """Build a context from library settings."""
        settings = settings or get_settings()
        return cls(
            confidence=settings.DEFAULT_CONFIDENCE,
            fuzz_epsilon=settings.FUZZ_EPSILON,
            series_epsilon=settings.SERIES_EPSILON,
            max_terms=settings.SERIES_MAX_TERMS,
            convergence_rate=settings.SERIES_CONVERGENCE_RATE,
            double_precision=settings.DOUBLE_PRECISION,
        )

    def with_flags(self, **flags: Any) -> "Context":
        """Copy of this context with some values replaced (validated)."""
        return Context(**{**self.model_dump(), **flags})


@lru_cache()
def get_current_context() -> Context:
    """
    Get the default context.

    Returns:
        Context built once from the cached settings
    """
    return Context.from_settings()


def resolve_context(context: Optional[Context]) -> Context:
    return context if context is not None else get_current_context()
