from collections import Counter
from typing import override

from .flow import FlowStats, NegativeVariancePolicy


class UnmatchedRemovalError(Exception):
    value: float
    weight: float

    def __init__(self, value: float, weight: float):
        super().__init__(
            f"Removing value {value} with weight {weight}, which is not in the series"
        )
        self.value = value
        self.weight = weight


class CheckedFlowStats(FlowStats):
    """FlowStats that remembers which (value, weight) pairs are in the series
    and refuses to remove one that is not.

    Meant for tests and debugging: memory grows with the number of distinct
    pairs, unlike the plain accumulator.
    """

    active: Counter[tuple[float, float]]

    def __init__(
        self,
        negative_variance: NegativeVariancePolicy | str = NegativeVariancePolicy.CLAMP,
    ):
        self.active = Counter()
        super().__init__(negative_variance)

    @override
    def clear(self) -> None:
        super().clear()
        self.active.clear()

    @override
    def add(self, value: float, weight: float = 1.0) -> None:
        self.active[value, weight] += 1
        super().add(value, weight)

    @override
    def remove(self, value: float, weight: float = 1.0) -> None:
        if self.active[value, weight] <= 0:
            raise UnmatchedRemovalError(value, weight)
        self.active[value, weight] -= 1
        if self.active[value, weight] == 0:
            del self.active[value, weight]
        super().remove(value, weight)

    @override
    def merge(self, other: FlowStats) -> None:
        if not isinstance(other, CheckedFlowStats):
            raise TypeError(
                f"Cannot merge {type(other).__name__} into CheckedFlowStats: "
                + "its values are not tracked"
            )
        self.active.update(other.active)
        super().merge(other)

    def active_pairs(self) -> Counter[tuple[float, float]]:
        return Counter(self.active)
