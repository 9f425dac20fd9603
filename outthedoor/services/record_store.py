import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from outthedoor.core.logger import get_logger
from outthedoor.models.contract import Contract
from outthedoor.models.quote import Dealer, Quote, utc_now
from outthedoor.models.timeline import TimelineEvent

logger = get_logger(__name__)


class RecordStore:
    """
    In-process stand-in for the relational datastore.

    Only exposes fetch-by-id, persist and append calls. Records are copied
    on the way in and out so callers always work on a snapshot and nothing
    changes until they persist it.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._dealers: Dict[str, Dealer] = {}
        self._quotes: Dict[str, Quote] = {}
        self._contracts: Dict[str, Contract] = {}
        self._events: List[TimelineEvent] = []

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        with self._lock:
            yield self

    # ---------------------------------------------------------------
    # Dealers
    # ---------------------------------------------------------------
    def get_dealer(self, dealer_id: str) -> Optional[Dealer]:
        with self._lock:
            dealer = self._dealers.get(dealer_id)
            return dealer.model_copy(deep=True) if dealer else None

    def save_dealer(self, dealer: Dealer) -> Dealer:
        with self._lock:
            self._dealers[dealer.id] = dealer.model_copy(deep=True)
        return dealer

    # ---------------------------------------------------------------
    # Quotes
    # ---------------------------------------------------------------
    def get_quote(self, quote_id: str) -> Optional[Quote]:
        with self._lock:
            quote = self._quotes.get(quote_id)
            return quote.model_copy(deep=True) if quote else None

    def list_quotes(self, brief_id: str) -> List[Quote]:
        with self._lock:
            return [q.model_copy(deep=True) for q in self._quotes.values() if q.brief_id == brief_id]

    def save_quote(self, quote: Quote) -> Quote:
        quote.updated_at = utc_now()
        with self._lock:
            self._quotes[quote.id] = quote.model_copy(deep=True)
        logger.debug(f"Persisted quote {quote.id} status={quote.status.value} score={quote.shadiness_score}")
        return quote

    # ---------------------------------------------------------------
    # Contracts
    # ---------------------------------------------------------------
    def get_contract(self, contract_id: str) -> Optional[Contract]:
        with self._lock:
            contract = self._contracts.get(contract_id)
            return contract.model_copy(deep=True) if contract else None

    def get_contract_for_quote(self, quote_id: str) -> Optional[Contract]:
        with self._lock:
            for contract in self._contracts.values():
                if contract.quote_id == quote_id:
                    return contract.model_copy(deep=True)
        return None

    def save_contract(self, contract: Contract) -> Contract:
        contract.updated_at = utc_now()
        with self._lock:
            self._contracts[contract.id] = contract.model_copy(deep=True)
        logger.debug(f"Persisted contract {contract.id} status={contract.status.value}")
        return contract

    # ---------------------------------------------------------------
    # Timeline
    # ---------------------------------------------------------------
    def append_event(self, event: TimelineEvent) -> TimelineEvent:
        with self._lock:
            self._events.append(event.model_copy(deep=True))
        return event

    def list_events(self, brief_id: str) -> List[TimelineEvent]:
        with self._lock:
            events = [e.model_copy(deep=True) for e in self._events if e.brief_id == brief_id]
        return sorted(events, key=lambda e: e.created_at)


store = RecordStore()


def get_store() -> RecordStore:
    return store
