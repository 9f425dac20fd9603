from typing import Optional

from outthedoor.core.logger import get_logger
from outthedoor.models.contract import Contract, ContractStatus
from outthedoor.models.quote import Quote
from outthedoor.models.quote_request import CounterRequest
from outthedoor.services.contract_service import failing_checks
from outthedoor.services.email_service import (
    dealer_link,
    send_contract_mismatch_email,
    send_counter_email,
)
from outthedoor.services.record_store import RecordStore

logger = get_logger(__name__)


async def notify_contract_mismatch(store: RecordStore, contract: Contract) -> Optional[str]:
    """Email the dealer only the checks their contract failed."""
    if contract.status != ContractStatus.MISMATCH:
        return None

    quote = store.get_quote(contract.quote_id)
    dealer = store.get_dealer(quote.dealer_id) if quote and quote.dealer_id else None
    if dealer is None:
        logger.warning(f"No dealer on record for contract {contract.id}; mismatch email not sent")
        return None

    return await send_contract_mismatch_email(
        dealer_email=dealer.contact_email,
        dealer_name=dealer.contact_name or dealer.name,
        quote_summary=quote.summary(),
        diff_results=failing_checks(contract),
        link=dealer_link(quote.invite_token),
    )


async def notify_counter(store: RecordStore, quote: Quote, counter: CounterRequest) -> Optional[str]:
    dealer = store.get_dealer(quote.dealer_id) if quote.dealer_id else None
    if dealer is None:
        logger.warning(f"No dealer on record for quote {quote.id}; counter email not sent")
        return None

    return await send_counter_email(
        dealer_email=dealer.contact_email,
        dealer_name=dealer.contact_name or dealer.name,
        quote_summary=quote.summary(),
        counter=counter,
        link=dealer_link(quote.invite_token),
    )
