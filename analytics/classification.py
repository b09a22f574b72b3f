"""ABC (Pareto) classification by inventory value."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from common.choices import AbcClass

from .policy import classify_cumulative_share, management_strategy, review_days

HUNDRED = Decimal("100")
ZERO = Decimal("0")


@dataclass(frozen=True)
class AbcItem:
    item_id: int
    item_name: str
    category: str
    current_stock: int
    unit_price: Decimal
    total_value: Decimal
    value_percentage: Decimal
    cumulative_percentage: Decimal
    abc_class: str
    management_strategy: str
    review_days: int


@dataclass(frozen=True)
class AbcReport:
    items: tuple
    total_value: Decimal = ZERO
    class_a_count: int = 0
    class_b_count: int = 0
    class_c_count: int = 0
    class_a_value: Decimal = ZERO
    class_b_value: Decimal = ZERO
    class_c_value: Decimal = ZERO

    @property
    def total_items(self) -> int:
        return len(self.items)

    def _share(self, value: Decimal) -> Decimal:
        return value / self.total_value * HUNDRED if self.total_value > 0 else ZERO

    @property
    def class_a_percentage(self) -> Decimal:
        return self._share(self.class_a_value)

    @property
    def class_b_percentage(self) -> Decimal:
        return self._share(self.class_b_value)

    @property
    def class_c_percentage(self) -> Decimal:
        return self._share(self.class_c_value)

    @property
    def summary(self) -> str:
        return (
            f"A: {self.class_a_count} items ({self.class_a_percentage:.1f}%), "
            f"B: {self.class_b_count} items ({self.class_b_percentage:.1f}%), "
            f"C: {self.class_c_count} items ({self.class_c_percentage:.1f}%)"
        )


def classify_abc(rows: Iterable) -> AbcReport:
    """Classify rows by ``unit_price * current_stock``.

    Rows need ``item_id``, ``item_name``, ``category``, ``current_stock`` and
    ``unit_price``. Highest value first, ties by item id; an item is A while
    the cumulative share stays within 80%, B within 95%, C beyond. With no
    value on hand at all every item is C and every percentage is zero.
    """

    valued = [(Decimal(row.unit_price) * row.current_stock, row) for row in rows]
    valued.sort(key=lambda pair: (-pair[0], pair[1].item_id))
    total = sum((value for value, _ in valued), ZERO)

    items = []
    counts = {AbcClass.A: 0, AbcClass.B: 0, AbcClass.C: 0}
    values = {AbcClass.A: ZERO, AbcClass.B: ZERO, AbcClass.C: ZERO}
    cumulative_value = ZERO
    cumulative = ZERO
    for value, row in valued:
        if total > 0:
            pct = value / total * HUNDRED
            cumulative_value += value
            cumulative = cumulative_value / total * HUNDRED
            abc_class = classify_cumulative_share(cumulative)
        else:
            pct = ZERO
            abc_class = AbcClass.C
        counts[abc_class] += 1
        values[abc_class] += value
        items.append(
            AbcItem(
                item_id=row.item_id,
                item_name=row.item_name,
                category=row.category,
                current_stock=row.current_stock,
                unit_price=Decimal(row.unit_price),
                total_value=value,
                value_percentage=pct,
                cumulative_percentage=cumulative,
                abc_class=abc_class,
                management_strategy=management_strategy(abc_class),
                review_days=review_days(abc_class),
            )
        )

    return AbcReport(
        items=tuple(items),
        total_value=total,
        class_a_count=counts[AbcClass.A],
        class_b_count=counts[AbcClass.B],
        class_c_count=counts[AbcClass.C],
        class_a_value=values[AbcClass.A],
        class_b_value=values[AbcClass.B],
        class_c_value=values[AbcClass.C],
    )


# EOF
