from decimal import Decimal

from outthedoor.core.logger import get_logger
from outthedoor.models.contract import Contract
from outthedoor.models.quote import Dealer, Quote, QuoteLine, QuoteLineKind, QuoteStatus
from outthedoor.services.record_store import RecordStore

logger = get_logger(__name__)

SEED_BRIEF_ID = "brief-seed-1"
SEED_DEALER_ID = "dealer-evergreen"
SEED_QUOTE_ID = "seed-quote-1"
SEED_CONTRACT_ID = "seed-contract"


def seed_demo_data(store: RecordStore) -> None:
    """Load one dealer, an accepted quote and its freshly uploaded contract."""
    if store.get_quote(SEED_QUOTE_ID):
        logger.info("Demo data already present")
        return

    store.save_dealer(
        Dealer(
            id=SEED_DEALER_ID,
            name="Evergreen Motors",
            contact_name="Casey Verde",
            contact_email="sales@evergreenmotors.com",
        )
    )
    store.save_quote(
        Quote(
            id=SEED_QUOTE_ID,
            brief_id=SEED_BRIEF_ID,
            dealer_id=SEED_DEALER_ID,
            invite_token="seed-token-0",
            status=QuoteStatus.ACCEPTED,
            vin="1ABCDEFG2H3I45678",
            stock_number="EVE1234",
            year=2025,
            make="Toyota",
            model="Grand Highlander",
            trim="Limited",
            msrp=Decimal("50405"),
            dealer_discount=Decimal("-1500"),
            doc_fee=Decimal("150"),
            dmv_fee=Decimal("180"),
            tire_battery_fee=Decimal("25"),
            tax_rate=Decimal("0.1025"),
            tax_amount=Decimal("5020.40"),
            otd_total=Decimal("50100"),
            confidence=0.92,
            shadiness_score=20,
            lines=[
                QuoteLine(kind=QuoteLineKind.INCENTIVE, name="Toyota Cash", amount=Decimal("-750")),
                QuoteLine(kind=QuoteLineKind.INCENTIVE, name="Holiday Bonus", amount=Decimal("-250")),
                QuoteLine(kind=QuoteLineKind.FEE, name="Doc Fee", amount=Decimal("150")),
                QuoteLine(kind=QuoteLineKind.FEE, name="DMV / Registration", amount=Decimal("180")),
            ],
        )
    )
    store.save_contract(Contract(id=SEED_CONTRACT_ID, quote_id=SEED_QUOTE_ID))
    logger.info(f"Seeded demo brief {SEED_BRIEF_ID} with quote {SEED_QUOTE_ID} and contract {SEED_CONTRACT_ID}")
