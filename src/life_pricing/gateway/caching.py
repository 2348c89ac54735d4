"""
Memoizing gateway wrapper.

Illustrations and reverse lookups issue the same gateway queries many
times. Calculators never cache; wrapping the gateway is the supported way
to avoid repeated round-trips. Results (including absent rows) are kept
for the lifetime of the wrapper.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from life_pricing.data.schemas import (
    Gender,
    IllustrationKind,
    PaymentMethod,
    PaymentMode,
    RateRecord,
    SmokingStatus,
)
from life_pricing.gateway.base import RateGateway

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Hit/miss counters for a CachingRateGateway."""

    hits: int = 0
    misses: int = 0

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Fraction of queries answered from the cache."""
        if self.total == 0:
            return 0.0
        return self.hits / self.total


class CachingRateGateway(RateGateway):
    """
    Gateway decorator caching every answer by its query arguments.

    Parameters
    ----------
    inner : RateGateway
        Gateway that answers cache misses

    Examples
    --------
    >>> cached = CachingRateGateway(TableRateGateway(tables))  # doctest: +SKIP
    >>> cached.stats.hit_rate  # doctest: +SKIP
    0.0
    """

    def __init__(self, inner: RateGateway):
        self._inner = inner
        self._cache: dict[tuple, Any] = {}
        self.stats = CacheStats()

    def clear(self) -> None:
        """Drop every cached answer and reset the counters."""
        self._cache.clear()
        self.stats = CacheStats()

    async def _cached(self, key: tuple, fetch: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._cache:
            self.stats.hits += 1
            return self._cache[key]
        self.stats.misses += 1
        value = await fetch()
        self._cache[key] = value
        return value

    async def get_rate(
        self,
        control_code: str,
        age: int,
        gender: Gender,
        smoking_status: SmokingStatus,
        payment_mode: PaymentMode,
        payment_method: PaymentMethod,
    ) -> RateRecord | None:
        args = (control_code, age, gender, smoking_status, payment_mode, payment_method)
        return await self._cached(("rate", *args), lambda: self._inner.get_rate(*args))

    async def get_term_rate(
        self,
        control_code: str,
        age: int,
        gender: Gender,
        smoking_status: SmokingStatus,
        payment_mode: PaymentMode,
        payment_method: PaymentMethod,
        duration: int,
    ) -> RateRecord | None:
        args = (control_code, age, gender, smoking_status, payment_mode, payment_method, duration)
        return await self._cached(("term", *args), lambda: self._inner.get_term_rate(*args))

    async def get_risk_rating_factor(
        self,
        code: str,
        age: int,
        gender: Gender,
        table_number: int,
    ) -> float:
        args = (code, age, gender, table_number)
        return await self._cached(("risk", *args), lambda: self._inner.get_risk_rating_factor(*args))

    async def get_illustration_factor(
        self,
        plan_code: str,
        kind: IllustrationKind,
        sex: Gender | None,
        issue_age: int,
        duration: int | None,
        risk: SmokingStatus | None,
    ) -> float | None:
        args = (plan_code, kind, sex, issue_age, duration, risk)
        return await self._cached(("factor", *args), lambda: self._inner.get_illustration_factor(*args))

    async def get_all_illustration_factors(
        self,
        plan_code: str,
        kind: IllustrationKind,
        sex: Gender | None,
        issue_age: int,
        risk: SmokingStatus | None,
    ) -> dict[int, float]:
        args = (plan_code, kind, sex, issue_age, risk)
        factors = await self._cached(
            ("factors", *args), lambda: self._inner.get_all_illustration_factors(*args)
        )
        # Callers get their own dict so the cached one cannot be mutated
        return dict(factors)
