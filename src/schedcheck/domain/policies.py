"""Policy definitions for reporting rules.

Policies are kept separate from the evaluation engine so that display
thresholds can be tested independently and changed without touching the
aggregation code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class HoursStatus(Enum):
    """Classification of a period's worked hours against its minimum."""

    INSUFFICIENT = "insufficient"
    OPTIMAL = "optimal"
    EXCESSIVE = "excessive"


class HoursPolicy(ABC):
    """Abstract base class for hours classification policies."""

    @abstractmethod
    def classify(self, hours: float, min_hours: float) -> HoursStatus:
        """Classify worked hours for one period.

        Args:
            hours: Hours worked (or credited) in the period.
            min_hours: Minimum hours required for the period.

        Returns:
            Status band for the period.
        """
        pass

    @abstractmethod
    def excess_threshold(self, min_hours: float) -> float:
        """Hours above which a period counts as excessive."""
        pass

    def scaled_minimum(self, min_hours: float, days: int, period_days: int) -> float:
        """Minimum prorated to the bucket length, shorter or longer than a period."""
        if period_days <= 0:
            return min_hours
        return min_hours * days / period_days


@dataclass
class DefaultHoursPolicy(HoursPolicy):
    """Default hours policy implementation.

    Bands relative to the period minimum:
    - hours < minimum: insufficient
    - hours > minimum * 1.25: excessive
    - otherwise: optimal
    """

    excess_factor: float = 1.25

    def classify(self, hours: float, min_hours: float) -> HoursStatus:
        if min_hours <= 0:
            return HoursStatus.OPTIMAL
        if hours < min_hours:
            return HoursStatus.INSUFFICIENT
        elif hours > self.excess_threshold(min_hours):
            return HoursStatus.EXCESSIVE
        else:
            return HoursStatus.OPTIMAL

    def excess_threshold(self, min_hours: float) -> float:
        return min_hours * self.excess_factor
