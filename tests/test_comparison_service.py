from decimal import Decimal
from itertools import permutations

from outthedoor.models.common import NamedAmount
from outthedoor.services.comparison_service import compare_amount, compare_collections, normalize_amounts


def items(*pairs):
    return [NamedAmount(name=name, amount=Decimal(amount)) for name, amount in pairs]


def test_compare_amount_within_tolerance():
    assert compare_amount(Decimal("100"), Decimal("101"), Decimal("2"))
    assert compare_amount(Decimal("100"), Decimal("102"), Decimal("2"))
    assert not compare_amount(Decimal("100"), Decimal("103"), Decimal("2"))


def test_compare_amount_default_tolerance_is_exact():
    assert compare_amount(Decimal("50405"), Decimal("50405"))
    assert not compare_amount(Decimal("50405"), Decimal("50405.01"))


def test_compare_amount_cent_boundaries_use_decimal_semantics():
    # 0.1 + 0.2 != 0.3 in binary floating point
    assert compare_amount(Decimal("0.3"), Decimal("0.1") + Decimal("0.2"))
    assert compare_amount(0.3, 0.1 + 0.2, Decimal("0.01"))
    assert compare_amount(Decimal("5020.40"), Decimal("5022.40"), Decimal("2"))
    assert not compare_amount(Decimal("5020.40"), Decimal("5022.41"), Decimal("2"))


def test_compare_amount_missing_expected_means_zero():
    assert compare_amount(None, Decimal("0"), Decimal("2"))
    assert compare_amount(None, Decimal("-2"), Decimal("2"))
    assert not compare_amount(None, Decimal("2.01"), Decimal("2"))
    assert not compare_amount(None, Decimal("1"))


def test_collections_report_amount_mismatch():
    expected = items(("Doc Fee", "150"), ("DMV", "200"))
    actual = items(("Doc Fee", "150"), ("DMV", "195"))

    assert compare_collections(expected, actual, tolerance=1) == ["dmv"]


def test_collections_within_tolerance_pass():
    expected = items(("Doc Fee", "150"))
    actual = items(("Doc Fee", "151"))

    assert compare_collections(expected, actual, tolerance=1) == []
    assert compare_collections(expected, actual, tolerance=0) == ["doc fee"]


def test_collections_are_order_independent():
    expected = items(("Incentive A", "-500"), ("Incentive B", "-250"), ("Loyalty", "-1000"))
    actual = items(("Incentive B", "-250"), ("Incentive A", "-400"), ("Conquest", "-500"))
    baseline = compare_collections(expected, actual, tolerance=0)

    assert baseline == ["conquest", "incentive a", "loyalty"]
    for shuffled_expected in permutations(expected):
        for shuffled_actual in permutations(actual):
            assert compare_collections(shuffled_expected, shuffled_actual, tolerance=0) == baseline


def test_collections_ignore_case_and_surrounding_whitespace():
    expected = items(("Doc Fee", "150"))
    actual = items(("  doc fee ", "150"))

    assert compare_collections(expected, actual) == []


def test_collections_missing_and_extra_keys():
    expected = items(("Toyota Cash", "-750"), ("Holiday Bonus", "-250"))
    actual = items(("Toyota Cash", "-750"), ("Nitrogen", "199"))

    assert compare_collections(expected, actual) == ["holiday bonus", "nitrogen"]


def test_collections_allow_missing_expected_still_flags_extras():
    expected = items(("Toyota Cash", "-750"), ("Holiday Bonus", "-250"))
    actual = items(("Toyota Cash", "-750"), ("Nitrogen", "199"))

    assert compare_collections(expected, actual, allow_missing_expected=True) == ["nitrogen"]


def test_collections_last_duplicate_name_wins():
    mapping = normalize_amounts(items(("Doc Fee", "100"), ("DOC FEE", "150")))

    assert mapping == {"doc fee": Decimal("150")}
    assert compare_collections(items(("Doc Fee", "150")), items(("doc fee", "90"), ("Doc Fee", "150"))) == []


def test_empty_collections_agree():
    assert compare_collections([], []) == []
