import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional

from outthedoor.core.config import settings
from outthedoor.core.exceptions import NotFoundError, PreconditionFailedError
from outthedoor.core.logger import get_logger
from outthedoor.models.common import NamedAmount
from outthedoor.models.contract import CheckResult, Contract, ContractStatus
from outthedoor.models.contract_request import ContractDiffInput
from outthedoor.models.quote import Quote, QuoteLineKind, QuoteStatus
from outthedoor.models.timeline import TimelineActor, TimelineEventType
from outthedoor.services.comparison_service import compare_amount, compare_collections, normalize_key
from outthedoor.services.record_store import RecordStore
from outthedoor.services.timeline_service import record_event

logger = get_logger(__name__)

# Quote fee lines that mirror the dedicated doc / DMV / tire-battery fields
CANONICAL_FEE_LINES = ("Doc Fee", "DMV / Registration", "Tire & Battery")

# -------------------------------------------------------------------
# Per-quote locks: uploads and checks of a quote's contract run one at a time
# -------------------------------------------------------------------
_locks_guard = threading.Lock()
_record_locks: Dict[str, threading.Lock] = {}
_lock_users: Dict[str, int] = {}


@contextmanager
def _record_lock(key: str) -> Iterator[None]:
    with _locks_guard:
        lock = _record_locks.setdefault(key, threading.Lock())
        _lock_users[key] = _lock_users.get(key, 0) + 1
    try:
        with lock:
            yield
    finally:
        # Drop the lock once nobody holds or waits on it
        with _locks_guard:
            _lock_users[key] -= 1
            if not _lock_users[key]:
                del _lock_users[key]
                del _record_locks[key]


# -------------------------------------------------------------------
# Check construction (pure)
# -------------------------------------------------------------------
def _mismatch_note(failures: List[str], labels: Dict[str, str]):
    if not failures:
        return None
    return "Mismatch: " + ", ".join(labels.get(key, key) for key in failures)


def _labels(*collections: Iterable[NamedAmount]) -> Dict[str, str]:
    labels: Dict[str, str] = {}
    for items in collections:
        for item in items:
            labels.setdefault(normalize_key(item.name), item.name.strip())
    return labels


def _exact(field: str, expected, actual) -> CheckResult:
    return CheckResult(field=field, passed=expected == actual, expected=expected, actual=actual)


def _amount(field: str, expected, actual: Decimal, tolerance: Decimal, notes=None) -> CheckResult:
    return CheckResult(
        field=field,
        passed=compare_amount(expected, actual, tolerance),
        expected=expected,
        actual=actual,
        notes=notes,
    )


def _quote_fee_items(quote: Quote) -> List[NamedAmount]:
    items = [
        NamedAmount(name="docFee", amount=quote.doc_fee or Decimal("0")),
        NamedAmount(name="dmvFee", amount=quote.dmv_fee or Decimal("0")),
        NamedAmount(name="tireBatteryFee", amount=quote.tire_battery_fee or Decimal("0")),
    ]
    items.extend(
        NamedAmount(name=line.name, amount=line.amount)
        for line in quote.lines_of(QuoteLineKind.FEE)
        if line.name not in CANONICAL_FEE_LINES
    )
    return items


def _claimed_fee_items(diff_input: ContractDiffInput) -> List[NamedAmount]:
    fees = diff_input.fees
    items = [
        NamedAmount(name="docFee", amount=fees.doc_fee),
        NamedAmount(name="dmvFee", amount=fees.dmv_fee),
        NamedAmount(name="tireBatteryFee", amount=fees.tire_battery_fee),
    ]
    items.extend(NamedAmount(name=fee.name, amount=fee.amount) for fee in fees.other_fees)
    return items


def build_contract_checks(quote: Quote, diff_input: ContractDiffInput) -> List[CheckResult]:
    """
    Compare the contract's claimed figures with the accepted quote.

    Returns one result per check in a fixed order: vin, year, make, model,
    trim, msrp, dealerDiscount, incentives, fees, addons, taxRate,
    taxAmount, otdTotal.
    """
    default = settings.DEFAULT_TOLERANCE
    line_item = settings.LINE_ITEM_TOLERANCE
    checks: List[CheckResult] = []

    checks.append(_exact("vin", quote.vin, diff_input.vin))
    checks.append(_exact("year", quote.year, diff_input.year))
    checks.append(_exact("make", quote.make, diff_input.make))
    checks.append(_exact("model", quote.model, diff_input.model))
    checks.append(_exact("trim", quote.trim, diff_input.trim))

    checks.append(_amount("msrp", quote.msrp, diff_input.msrp, default))
    checks.append(_amount("dealerDiscount", quote.dealer_discount, diff_input.dealer_discount, default))

    quote_incentives = [
        NamedAmount(name=line.name, amount=line.amount) for line in quote.lines_of(QuoteLineKind.INCENTIVE)
    ]
    incentive_failures = compare_collections(quote_incentives, diff_input.incentives, tolerance=line_item)
    checks.append(
        CheckResult(
            field="incentives",
            passed=not incentive_failures,
            expected=[item.model_dump() for item in quote_incentives],
            actual=[item.model_dump() for item in diff_input.incentives],
            notes=_mismatch_note(incentive_failures, _labels(quote_incentives, diff_input.incentives)),
        )
    )

    quote_fees = _quote_fee_items(quote)
    claimed_fees = _claimed_fee_items(diff_input)
    fee_failures = compare_collections(quote_fees, claimed_fees, tolerance=line_item)
    checks.append(
        CheckResult(
            field="fees",
            passed=not fee_failures,
            expected={item.name: item.amount for item in quote_fees},
            actual={item.name: item.amount for item in claimed_fees},
            notes=_mismatch_note(fee_failures, _labels(quote_fees, claimed_fees)),
        )
    )

    # Binary gate: any addon the buyer did not approve fails, whatever it costs
    unapproved = [addon.name for addon in diff_input.addons if not addon.approved_by_buyer]
    checks.append(
        CheckResult(
            field="addons",
            passed=not unapproved,
            expected=[
                {"name": line.name, "approvedByBuyer": line.approved_by_buyer}
                for line in quote.lines_of(QuoteLineKind.ADDON)
            ],
            actual=[addon.model_dump(by_alias=True) for addon in diff_input.addons],
            notes=f"Unapproved addons present: {', '.join(unapproved)}" if unapproved else None,
        )
    )

    checks.append(_amount("taxRate", quote.tax_rate, diff_input.tax_rate, default))
    checks.append(
        _amount(
            "taxAmount",
            quote.tax_amount,
            diff_input.tax_amount,
            settings.TAX_TOLERANCE,
            notes=f"Allowed tolerance ${settings.TAX_TOLERANCE}",
        )
    )
    checks.append(_amount("otdTotal", quote.otd_total, diff_input.otd_total, default))

    return checks


def failing_checks(contract: Contract) -> List[CheckResult]:
    return [check for check in contract.checks if not check.passed]


# -------------------------------------------------------------------
# Operations with side effects
# -------------------------------------------------------------------
def upload_contract(store: RecordStore, quote_id: str, file_names: Optional[List[str]] = None) -> Contract:
    """Create (or reset) the contract of an accepted quote after the dealer uploads files."""
    file_names = file_names or []
    with _record_lock(f"quote:{quote_id}"):
        quote = store.get_quote(quote_id)
        if quote is None:
            raise NotFoundError("Quote not found")
        if quote.status != QuoteStatus.ACCEPTED:
            raise PreconditionFailedError("Contract files can only be uploaded for accepted quotes")

        with store.transaction():
            contract = store.get_contract_for_quote(quote_id)
            if contract is None:
                contract = Contract(quote_id=quote_id)
                logger.info(f"Creating contract {contract.id} for quote {quote_id}")
            else:
                logger.info(f"Resetting contract {contract.id} for quote {quote_id} after new upload")
                contract.status = ContractStatus.UPLOADED
                contract.checks = []
            contract.file_count += len(file_names)
            store.save_contract(contract)

    record_event(
        store,
        brief_id=quote.brief_id,
        quote_id=quote.id,
        type=TimelineEventType.CONTRACT_UPLOADED,
        actor=TimelineActor.DEALER,
        payload={"contractId": contract.id, "fileCount": len(file_names)},
    )
    return contract


def check_contract_against_quote(store: RecordStore, contract_id: str, diff_input: ContractDiffInput) -> Contract:
    """
    Run every contract check, persist the verdict and reward a truthful dealer.

    The contract status and check list, plus the quote's shadiness reward,
    are committed together after all checks are computed. The reward is
    granted once per contract, on its first transition into ``checked_ok``.
    """
    contract = store.get_contract(contract_id)
    if contract is None:
        raise NotFoundError("Contract not found")

    # Same lock as upload_contract; a contract never moves to another quote
    with _record_lock(f"quote:{contract.quote_id}"):
        contract = store.get_contract(contract_id)
        quote = store.get_quote(contract.quote_id)
        if quote is None:
            raise NotFoundError("Quote not found for contract")

        checks = build_contract_checks(quote, diff_input)
        all_pass = all(check.passed for check in checks)

        previous_status = contract.status
        contract.status = ContractStatus.CHECKED_OK if all_pass else ContractStatus.MISMATCH
        contract.checks = checks

        reward = all_pass and previous_status != ContractStatus.CHECKED_OK and not contract.reward_applied
        if reward:
            contract.reward_applied = True
            quote.shadiness_score = max(0, quote.shadiness_score - settings.CONTRACT_PASS_REWARD)

        with store.transaction():
            store.save_contract(contract)
            if reward:
                store.save_quote(quote)

        failed = [check.field for check in checks if not check.passed]
        if all_pass:
            logger.info(f"Contract {contract_id} matches quote {quote.id} (reward applied: {reward})")
        else:
            logger.warning(f"Contract {contract_id} mismatches quote {quote.id} on: {', '.join(failed)}")

        record_event(
            store,
            brief_id=quote.brief_id,
            quote_id=quote.id,
            type=TimelineEventType.CONTRACT_PASS if all_pass else TimelineEventType.CONTRACT_MISMATCH,
            actor=TimelineActor.SYSTEM,
            payload={
                "contractId": contract_id,
                "checks": [check.model_dump(by_alias=True, mode="json") for check in checks],
            },
        )

    return contract
