"""Tolerance-aware comparison primitives shared by the contract checks and the scorer."""
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Protocol, Union

Number = Union[Decimal, int, float, str]


class NamedAmountLike(Protocol):
    name: str
    amount: Decimal


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as Decimal("0.1") instead of the binary expansion
    return Decimal(str(value))


def compare_amount(expected: Optional[Number], actual: Number, tolerance: Number = Decimal("0")) -> bool:
    """
    True when ``actual`` is within ``tolerance`` of ``expected``.

    A missing ``expected`` means the quote never recorded the figure, so the
    contract is expected to carry zero for it: the check then passes only
    when ``|actual| <= tolerance``.
    """
    tolerance = to_decimal(tolerance)
    actual = to_decimal(actual)
    if expected is None:
        return abs(actual) <= tolerance
    return abs(to_decimal(expected) - actual) <= tolerance


def normalize_key(name: str) -> str:
    return name.strip().lower()


def normalize_amounts(items: Iterable[NamedAmountLike]) -> Dict[str, Decimal]:
    # Later entries with the same key overwrite earlier ones
    mapping: Dict[str, Decimal] = {}
    for item in items:
        mapping[normalize_key(item.name)] = to_decimal(item.amount)
    return mapping


def compare_collections(
    expected: Iterable[NamedAmountLike],
    actual: Iterable[NamedAmountLike],
    tolerance: Number = Decimal("0"),
    allow_missing_expected: bool = False,
) -> List[str]:
    """
    Reconcile two (name, amount) collections by normalized name.

    Returns the failing keys, lower-cased and sorted: expected names missing from
    ``actual`` (unless ``allow_missing_expected``), names only present in
    ``actual``, and shared names whose amounts differ by more than
    ``tolerance``. An empty list means both sides agree. Input order never
    matters.
    """
    tolerance = to_decimal(tolerance)
    expected_map = normalize_amounts(expected)
    actual_map = normalize_amounts(actual)
    failures: List[str] = []

    for name, amount in expected_map.items():
        actual_amount = actual_map.get(name)
        if actual_amount is None:
            if not allow_missing_expected:
                failures.append(name)
            continue
        if abs(amount - actual_amount) > tolerance:
            failures.append(name)

    for name in actual_map:
        if name not in expected_map:
            failures.append(name)

    return sorted(failures)
