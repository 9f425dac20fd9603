from typing import List, Optional

from outthedoor.core.config import settings
from outthedoor.core.exceptions import NotFoundError, PreconditionFailedError
from outthedoor.core.logger import get_logger
from outthedoor.models.quote import Quote, QuoteLine, QuoteLineKind, QuoteStatus
from outthedoor.models.quote_request import CounterRequest, DealerQuoteInput
from outthedoor.models.timeline import TimelineActor, TimelineEventType
from outthedoor.services.contract_service import CANONICAL_FEE_LINES
from outthedoor.services.record_store import RecordStore
from outthedoor.services.shadiness_service import calculate_shadiness_score
from outthedoor.services.timeline_service import record_event

logger = get_logger(__name__)


def build_quote_lines(payload: DealerQuoteInput) -> List[QuoteLine]:
    doc_fee_name, dmv_fee_name, tire_battery_name = CANONICAL_FEE_LINES
    lines = [
        QuoteLine(kind=QuoteLineKind.FEE, name=name, amount=amount)
        for name, amount in (
            (doc_fee_name, payload.doc_fee),
            (dmv_fee_name, payload.dmv_fee),
            (tire_battery_name, payload.tire_battery_fee),
        )
        if amount
    ]
    lines.extend(QuoteLine(kind=QuoteLineKind.FEE, name=fee.name, amount=fee.amount) for fee in payload.other_fees)
    lines.extend(
        QuoteLine(kind=QuoteLineKind.INCENTIVE, name=incentive.name, amount=incentive.amount)
        for incentive in payload.incentives
    )
    lines.extend(
        QuoteLine(kind=QuoteLineKind.ADDON, name=addon.name, amount=addon.amount, is_optional=addon.is_optional)
        for addon in payload.addons
    )
    return lines


def get_quote(store: RecordStore, quote_id: str) -> Quote:
    quote = store.get_quote(quote_id)
    if quote is None:
        raise NotFoundError("Quote not found")
    return quote


def submit_dealer_quote(
    store: RecordStore,
    brief_id: str,
    dealer_id: str,
    payload: DealerQuoteInput,
    invite_token: Optional[str] = None,
) -> Quote:
    """Persist a dealer's quote as a draft for ops review, scored at submission time."""
    dealer = store.get_dealer(dealer_id)
    if dealer is None:
        raise NotFoundError("Dealer not found")

    score = calculate_shadiness_score(payload, settings.DEFAULT_TOLERANCE)
    quote = Quote(
        brief_id=brief_id,
        dealer_id=dealer_id,
        invite_token=invite_token,
        status=QuoteStatus.DRAFT,
        vin=payload.vin,
        stock_number=payload.stock_number,
        year=payload.year,
        make=payload.make,
        model=payload.model,
        trim=payload.trim,
        msrp=payload.msrp,
        dealer_discount=payload.dealer_discount,
        doc_fee=payload.doc_fee,
        dmv_fee=payload.dmv_fee,
        tire_battery_fee=payload.tire_battery_fee,
        tax_rate=payload.tax_rate,
        tax_amount=payload.tax_amount,
        otd_total=payload.otd_total,
        lines=build_quote_lines(payload),
        shadiness_score=score,
    )
    store.save_quote(quote)
    logger.info(f"Dealer {dealer_id} submitted quote {quote.id} on brief {brief_id} (shadiness={score})")

    record_event(
        store,
        brief_id=brief_id,
        quote_id=quote.id,
        type=TimelineEventType.QUOTE_SUBMITTED,
        actor=TimelineActor.DEALER,
        payload={"dealer": dealer.name, "shadinessScore": score},
    )
    return quote


def publish_quote(
    store: RecordStore,
    quote_id: str,
    confidence: Optional[float] = None,
    note: Optional[str] = None,
) -> Quote:
    with store.transaction():
        quote = get_quote(store, quote_id)
        if quote.status not in (QuoteStatus.DRAFT, QuoteStatus.COUNTERED):
            raise PreconditionFailedError(f"Only draft or countered quotes can be published (status: {quote.status.value})")

        quote.status = QuoteStatus.PUBLISHED
        if confidence is not None:
            quote.confidence = confidence
        if note is not None:
            quote.ops_note = note
        store.save_quote(quote)

    record_event(
        store,
        brief_id=quote.brief_id,
        quote_id=quote.id,
        type=TimelineEventType.QUOTE_PUBLISHED,
        actor=TimelineActor.OPS,
        payload={"confidence": quote.confidence, "shadinessScore": quote.shadiness_score},
    )
    return quote


def accept_quote(store: RecordStore, quote_id: str) -> Quote:
    """Buyer accepts a published quote; the other live quotes on the brief are rejected."""
    # Status check and sibling rejection commit as one step
    with store.transaction():
        quote = get_quote(store, quote_id)
        if quote.status != QuoteStatus.PUBLISHED:
            raise PreconditionFailedError(f"Only published quotes can be accepted (status: {quote.status.value})")

        quote.status = QuoteStatus.ACCEPTED
        store.save_quote(quote)
        for sibling in store.list_quotes(quote.brief_id):
            if sibling.id != quote.id and sibling.status in (QuoteStatus.PUBLISHED, QuoteStatus.COUNTERED):
                sibling.status = QuoteStatus.REJECTED
                store.save_quote(sibling)
                logger.info(f"Quote {sibling.id} rejected after buyer accepted {quote.id}")

    record_event(
        store,
        brief_id=quote.brief_id,
        quote_id=quote.id,
        type=TimelineEventType.QUOTE_ACCEPTED,
        actor=TimelineActor.BUYER,
        payload={"otdTotal": str(quote.otd_total) if quote.otd_total is not None else None},
    )
    return quote


def counter_quote(store: RecordStore, quote_id: str, counter: CounterRequest) -> Quote:
    with store.transaction():
        quote = get_quote(store, quote_id)
        if quote.status != QuoteStatus.PUBLISHED:
            raise PreconditionFailedError(f"Only published quotes can be countered (status: {quote.status.value})")

        if counter.type == "remove_addons":
            addon_names = {line.name.strip().lower() for line in quote.lines_of(QuoteLineKind.ADDON)}
            unknown = [name for name in counter.addon_names if name.strip().lower() not in addon_names]
            if unknown:
                raise PreconditionFailedError(f"Quote has no add-ons named: {', '.join(unknown)}")

        quote.status = QuoteStatus.COUNTERED
        store.save_quote(quote)

    record_event(
        store,
        brief_id=quote.brief_id,
        quote_id=quote.id,
        type=TimelineEventType.QUOTE_COUNTERED,
        actor=TimelineActor.BUYER,
        payload=counter.model_dump(by_alias=True, mode="json"),
    )
    return quote
