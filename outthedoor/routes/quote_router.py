from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends

from outthedoor.core.config import settings
from outthedoor.core.logger import get_logger
from outthedoor.models.quote import Quote
from outthedoor.models.quote_request import (
    CounterRequest,
    DealerQuoteInput,
    PublishQuoteRequest,
    QuoteSubmissionRequest,
)
from outthedoor.models.response import ShadinessScoreResponse
from outthedoor.services.notification_service import notify_counter
from outthedoor.services.quote_service import (
    accept_quote,
    counter_quote,
    get_quote,
    publish_quote,
    submit_dealer_quote,
)
from outthedoor.services.record_store import RecordStore, get_store
from outthedoor.services.shadiness_service import calculate_shadiness_score, shadiness_level

quote_router = APIRouter(tags=["Quote"])

logger = get_logger(__name__)


@quote_router.post("/quotes/shadiness-score", response_model=ShadinessScoreResponse)
def shadiness_score(payload: DealerQuoteInput):
    """
    Score a dealer quote for predatory pricing patterns.
    Advisory only; nothing is persisted.
    """
    score = calculate_shadiness_score(payload, settings.DEFAULT_TOLERANCE)
    return ShadinessScoreResponse(score=score, level=shadiness_level(score))


@quote_router.post("/briefs/{brief_id}/quotes", response_model=Quote)
def submit_quote(brief_id: str, payload: QuoteSubmissionRequest, store: RecordStore = Depends(get_store)):
    return submit_dealer_quote(store, brief_id, payload.dealer_id, payload.quote, payload.invite_token)


@quote_router.get("/quotes/{quote_id}", response_model=Quote)
def read_quote(quote_id: str, store: RecordStore = Depends(get_store)):
    return get_quote(store, quote_id)


@quote_router.post("/quotes/{quote_id}/publish", response_model=Quote)
def publish(
    quote_id: str,
    payload: Optional[PublishQuoteRequest] = Body(None),
    store: RecordStore = Depends(get_store),
):
    payload = payload or PublishQuoteRequest()
    return publish_quote(store, quote_id, confidence=payload.confidence, note=payload.note)


@quote_router.post("/quotes/{quote_id}/accept", response_model=Quote)
def accept(quote_id: str, store: RecordStore = Depends(get_store)):
    return accept_quote(store, quote_id)


@quote_router.post("/quotes/{quote_id}/counter", response_model=Quote)
def counter(
    quote_id: str,
    payload: CounterRequest,
    background_tasks: BackgroundTasks,
    store: RecordStore = Depends(get_store),
):
    quote = counter_quote(store, quote_id, payload)
    background_tasks.add_task(notify_counter, store, quote, payload)
    logger.info(f"Counter ({payload.type}) sent on quote {quote_id}")
    return quote
