import logging
from copy import copy
from enum import StrEnum
from math import inf, nan, sqrt
from typing import Self, override

from ..utils.structlog import SL

log = logging.getLogger(__name__)


class NegativeVariancePolicy(StrEnum):
    """What ``standard_deviation()`` returns when rounding makes the variance negative."""

    CLAMP = "clamp"
    NAN = "nan"


class FlowStats:
    """Mean, variance, standard deviation and coefficient of variation over a
    flow of weighted values.

    The series itself is never stored, only four running sums, so memory is
    constant and every operation is O(1). Values are fed with ``add()`` and
    taken out again with ``remove()``::

        stats = FlowStats()
        stats.add(1.0)
        stats.add(4.0)
        stats.add(4.0)
        stats.mean()  # 3.0
        stats.remove(4.0)
        stats.mean()  # 2.5

    ``remove()`` trusts its caller: the removed ``(value, weight)`` pair must
    have been added before and not removed since. Nothing checks this, a
    mismatched removal just leaves meaningless sums behind (see
    ``CheckedFlowStats`` for a variant that does check).

    The variance uses the one-pass sum-of-squares formula, which loses
    precision through cancellation when the values are large compared to
    their spread. Use a Welford-style accumulator if that matters more than
    being able to remove values.

    Instances are not thread-safe; ``copy()`` gives an independent snapshot
    that can be handed elsewhere.
    """

    n: int
    weight_sum: float
    weighted_sum: float
    weighted_squares_sum: float
    negative_variance: NegativeVariancePolicy

    def __init__(
        self,
        negative_variance: NegativeVariancePolicy | str = NegativeVariancePolicy.CLAMP,
    ):
        self.negative_variance = NegativeVariancePolicy(negative_variance)
        self.clear()

    def clear(self) -> None:
        """Resets the series, as if every value had been removed."""
        self.n = 0
        self.weight_sum = 0.0
        self.weighted_sum = 0.0
        self.weighted_squares_sum = 0.0

    def add(self, value: float, weight: float = 1.0) -> None:
        self.n += 1
        self.weight_sum += weight
        self.weighted_sum += value * weight
        self.weighted_squares_sum += value * value * weight

    def remove(self, value: float, weight: float = 1.0) -> None:
        """Takes back a value added earlier with the same weight."""
        self.n -= 1
        self.weight_sum -= weight
        self.weighted_sum -= value * weight
        self.weighted_squares_sum -= value * value * weight

    def merge(self, other: "FlowStats") -> None:
        """Adds every value of ``other`` to this series. ``other`` is left as is."""
        self.n += other.n
        self.weight_sum += other.weight_sum
        self.weighted_sum += other.weighted_sum
        self.weighted_squares_sum += other.weighted_squares_sum

    def count(self) -> int:
        return self.n

    def total_weight(self) -> float:
        return self.weight_sum

    def mean(self) -> float:
        """Weighted mean of the series, or 0.0 for an empty series."""
        if self.weight_sum == 0:
            return 0.0
        return self.weighted_sum / self.weight_sum

    def variance(self) -> float:
        """Biased (population) weighted variance, or 0.0 for an empty series."""
        if self.weight_sum == 0:
            return 0.0
        mean = self.mean()
        return self.weighted_squares_sum / self.weight_sum - mean * mean

    def standard_deviation(self) -> float:
        var = self.variance()
        if var < 0:
            if self.negative_variance == NegativeVariancePolicy.NAN:
                return nan
            log.debug(SL("Clamping negative variance", variance=var))
            return 0.0
        return sqrt(var)

    def coefficient_of_variation(self) -> float:
        """Standard deviation over mean.

        A zero mean gives 0.0 when the series is empty and +inf otherwise.
        """
        mean = self.mean()
        if mean == 0:
            if self.weight_sum == 0:
                return 0.0
            return inf
        return self.standard_deviation() / mean

    def copy(self) -> Self:
        """Returns a snapshot that later changes to this object do not affect."""
        return copy(self)

    def __copy__(self) -> Self:
        dup = type(self)(self.negative_variance)
        dup.merge(self)
        return dup

    def info(self) -> dict[str, float]:
        return {
            "mean": self.mean(),
            "variance": self.variance(),
            "stddev": self.standard_deviation(),
            "cv": self.coefficient_of_variation(),
            "count": self.n,
            "total_weight": self.weight_sum,
        }

    @override
    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(count={self.n}, total_weight={self.weight_sum}, "
            f"mean={self.mean()}, variance={self.variance()})"
        )
