"""
Rate Lookup Gateway interface.

The rate store is an out-of-process collaborator. Every calculator reaches
it through this interface only, so a caching or batching implementation
can be substituted without touching calculation logic. Timeouts and
retries are the implementation's concern.
"""

from abc import ABC, abstractmethod

from life_pricing.data.schemas import (
    Gender,
    IllustrationKind,
    PaymentMethod,
    PaymentMode,
    RateRecord,
    SmokingStatus,
)


class RateGateway(ABC):
    """
    Abstract base class for rate-store access.

    The core treats a gateway as a deterministic keyed oracle: the same
    query always yields the same answer. Absent rows are reported as
    ``None`` (rate records, single illustration factors) or ``0.0``
    (risk-rating factors), never by raising.

    Subclasses must implement:
    - get_rate
    - get_term_rate
    - get_risk_rating_factor
    - get_illustration_factor
    - get_all_illustration_factors
    """

    @abstractmethod
    async def get_rate(
        self,
        control_code: str,
        age: int,
        gender: Gender,
        smoking_status: SmokingStatus,
        payment_mode: PaymentMode,
        payment_method: PaymentMethod,
    ) -> RateRecord | None:
        """
        Fetch the flat age-based rate record for a control code.

        Returns
        -------
        RateRecord or None
            Matching record, None when the store has no row
        """
        ...

    @abstractmethod
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
        """Fetch the rate record for a policy year of a term product."""
        ...

    @abstractmethod
    async def get_risk_rating_factor(
        self,
        code: str,
        age: int,
        gender: Gender,
        table_number: int,
    ) -> float:
        """
        Fetch the substandard table factor per $1000.

        Returns
        -------
        float
            Factor, 0.0 when the store has no row
        """
        ...

    @abstractmethod
    async def get_illustration_factor(
        self,
        plan_code: str,
        kind: IllustrationKind,
        sex: Gender | None,
        issue_age: int,
        duration: int | None,
        risk: SmokingStatus | None,
    ) -> float | None:
        """
        Fetch one illustration factor.

        Parameters
        ----------
        plan_code : str
            Plan code of the factor table
        kind : IllustrationKind
            Factor table (div, cash, pua_prem, pua_div, nsp)
        sex : Gender, optional
            Sex column; None matches rows with no sex
        issue_age : int
            Issue age, or attained age for age-keyed tables
        duration : int, optional
            Policy year; None selects the age-keyed row (duration 0)
        risk : SmokingStatus, optional
            Risk column; None matches rows with no risk

        Returns
        -------
        float or None
            Factor, None when the store has no row
        """
        ...

    @abstractmethod
    async def get_all_illustration_factors(
        self,
        plan_code: str,
        kind: IllustrationKind,
        sex: Gender | None,
        issue_age: int,
        risk: SmokingStatus | None,
    ) -> dict[int, float]:
        """Fetch every duration's factor for one issue age, keyed by duration."""
        ...
