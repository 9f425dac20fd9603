"""
Shadiness heuristic for dealer quotes.

The score is advisory only: it is shown to buyers and ops as a low / medium /
high pill and is the starting point the contract check rewards against. No
quote is ever rejected because of it.
"""
from decimal import Decimal

from outthedoor.models.quote_request import DealerQuoteInput
from outthedoor.services.comparison_service import compare_amount

MISSING_ITEMIZATION_PENALTY = 15
FORCED_ADDON_PENALTY = 10
CREDIT_PULL_PENALTY = 15

LOW_MAX = 25
MEDIUM_MAX = 60


def has_unexplained_total(quote: DealerQuoteInput, tolerance: Decimal = Decimal("0")) -> bool:
    """Nothing itemized, yet the OTD total does not follow from MSRP, discount and tax."""
    fees = (quote.doc_fee, quote.dmv_fee, quote.tire_battery_fee)
    if any(fee != 0 for fee in fees):
        return False
    explained = quote.msrp + quote.dealer_discount + quote.tax_amount
    return not compare_amount(explained, quote.otd_total, tolerance)


def count_forced_addons(quote: DealerQuoteInput) -> int:
    return sum(1 for addon in quote.addons if not addon.is_optional and addon.amount != 0)


def calculate_shadiness_score(quote: DealerQuoteInput, tolerance: Decimal = Decimal("0")) -> int:
    if quote.honors_advertised_vin_price:
        # Honoring the advertised VIN price outweighs every penalty
        return 0

    score = 0
    if has_unexplained_total(quote, tolerance):
        score += MISSING_ITEMIZATION_PENALTY
    score += FORCED_ADDON_PENALTY * count_forced_addons(quote)
    if quote.requires_credit_pull_for_cash:
        score += CREDIT_PULL_PENALTY

    return max(0, score)


def shadiness_level(score: int) -> str:
    if score <= LOW_MAX:
        return "low"
    if score <= MEDIUM_MAX:
        return "medium"
    return "high"
