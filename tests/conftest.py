from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from outthedoor.main import app
from outthedoor.models.contract import Contract
from outthedoor.models.contract_request import ContractDiffInput
from outthedoor.models.quote import Dealer, Quote, QuoteLine, QuoteLineKind, QuoteStatus
from outthedoor.models.quote_request import DealerQuoteInput
from outthedoor.services.record_store import RecordStore, get_store

BRIEF_ID = "brief-1"
DEALER_ID = "dealer-evergreen"


def make_quote(**overrides) -> Quote:
    fields = dict(
        id="quote-1",
        brief_id=BRIEF_ID,
        dealer_id=DEALER_ID,
        invite_token="invite-token-1",
        status=QuoteStatus.ACCEPTED,
        vin="1ABCDEFG2H3I45678",
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
        shadiness_score=20,
        lines=[
            QuoteLine(kind=QuoteLineKind.INCENTIVE, name="Toyota Cash", amount=Decimal("-750")),
            QuoteLine(kind=QuoteLineKind.INCENTIVE, name="Holiday Bonus", amount=Decimal("-250")),
            QuoteLine(kind=QuoteLineKind.FEE, name="Doc Fee", amount=Decimal("150")),
            QuoteLine(kind=QuoteLineKind.FEE, name="DMV / Registration", amount=Decimal("180")),
            QuoteLine(kind=QuoteLineKind.FEE, name="Smog Certificate", amount=Decimal("30")),
            QuoteLine(kind=QuoteLineKind.ADDON, name="Floor mats", amount=Decimal("199"), approved_by_buyer=True),
        ],
    )
    fields.update(overrides)
    return Quote(**fields)


def diff_payload(**overrides) -> dict:
    """Contract figures matching ``make_quote`` exactly, with incentives reordered."""
    payload = {
        "vin": "1ABCDEFG2H3I45678",
        "year": 2025,
        "make": "Toyota",
        "model": "Grand Highlander",
        "trim": "Limited",
        "msrp": "50405",
        "dealerDiscount": "-1500",
        "incentives": [
            {"name": "Holiday Bonus", "amount": "-250"},
            {"name": "Toyota Cash", "amount": "-750"},
        ],
        "fees": {
            "docFee": "150",
            "dmvFee": "180",
            "tireBatteryFee": "25",
            "otherFees": [{"name": "Smog Certificate", "amount": "30"}],
        },
        "addons": [{"name": "Floor mats", "amount": "199", "approvedByBuyer": True}],
        "taxRate": "0.1025",
        "taxAmount": "5020.40",
        "otdTotal": "50100",
    }
    payload.update(overrides)
    return payload


def make_diff_input(**overrides) -> ContractDiffInput:
    return ContractDiffInput.model_validate(diff_payload(**overrides))


def dealer_quote_payload(**overrides) -> dict:
    payload = {
        "vin": "1ABCDEFG2H3I45678",
        "stockNumber": "EVE123",
        "year": 2025,
        "make": "Toyota",
        "model": "Grand Highlander",
        "trim": "Limited",
        "extColor": "Gray",
        "intColor": "Black",
        "msrp": "50000",
        "dealerDiscount": "-1500",
        "docFee": "150",
        "dmvFee": "180",
        "tireBatteryFee": "25",
        "otherFees": [],
        "incentives": [],
        "addons": [],
        "taxRate": "0.1025",
        "taxAmount": "5000",
        "otdTotal": "52000",
        "confirmations": {
            "noUnapprovedAddons": True,
            "incentivesVerified": True,
            "otdIncludesAllFees": True,
        },
        "requiresCreditPullForCash": False,
        "honorsAdvertisedVinPrice": False,
    }
    payload.update(overrides)
    return payload


def make_dealer_quote(**overrides) -> DealerQuoteInput:
    return DealerQuoteInput.model_validate(dealer_quote_payload(**overrides))


@pytest.fixture
def store() -> RecordStore:
    store = RecordStore()
    store.save_dealer(
        Dealer(
            id=DEALER_ID,
            name="Evergreen Motors",
            contact_name="Casey Verde",
            contact_email="sales@evergreenmotors.com",
        )
    )
    return store


@pytest.fixture
def accepted_quote(store) -> Quote:
    return store.save_quote(make_quote())


@pytest.fixture
def contract(store, accepted_quote) -> Contract:
    return store.save_contract(Contract(id="contract-1", quote_id=accepted_quote.id))


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
