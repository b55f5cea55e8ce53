from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DealCategory:
    id: str
    name: str
    # half-open [lower, upper) on price_per_sqm_diff_percent; None = unbounded
    lower: float | None
    upper: float | None

    def contains(self, diff_percent: float) -> bool:
        if self.lower is not None and diff_percent < self.lower:
            return False
        if self.upper is not None and diff_percent >= self.upper:
            return False
        return True


DEAL_CATEGORIES: tuple[DealCategory, ...] = (
    DealCategory(id="excellent", name="Excellent", lower=None, upper=-20),
    DealCategory(id="good", name="Good Deal", lower=-20, upper=-10),
    DealCategory(id="below", name="Below Market", lower=-10, upper=0),
    DealCategory(id="fair", name="Fair Price", lower=0, upper=10),
    DealCategory(id="above", name="Above Market", lower=10, upper=None),
)

_BY_ID = {c.id: c for c in DEAL_CATEGORIES}


def get_deal_category(category_id: str) -> DealCategory | None:
    return _BY_ID.get((category_id or "").strip().lower())


def classify_deal(diff_percent: float | None) -> str | None:
    if diff_percent is None:
        return None
    for cat in DEAL_CATEGORIES:
        if cat.contains(diff_percent):
            return cat.id
    return None
