from conftest import make_diff_input
from outthedoor.models.contract import ContractStatus
from outthedoor.models.quote import QuoteStatus
from outthedoor.services.contract_service import check_contract_against_quote
from outthedoor.services.record_store import RecordStore
from outthedoor.services.seed_service import SEED_CONTRACT_ID, SEED_QUOTE_ID, seed_demo_data


def test_seed_loads_accepted_quote_with_pending_contract():
    store = RecordStore()

    seed_demo_data(store)
    seed_demo_data(store)

    quote = store.get_quote(SEED_QUOTE_ID)
    assert quote.status == QuoteStatus.ACCEPTED
    assert store.get_dealer(quote.dealer_id).contact_email == "sales@evergreenmotors.com"
    assert store.get_contract(SEED_CONTRACT_ID).status == ContractStatus.UPLOADED


def test_seed_contract_can_be_checked():
    store = RecordStore()
    seed_demo_data(store)

    # The seeded quote carries no "Smog Certificate" fee or addons
    diff_input = make_diff_input(
        fees={"docFee": "150", "dmvFee": "180", "tireBatteryFee": "25"},
        addons=[],
    )
    contract = check_contract_against_quote(store, SEED_CONTRACT_ID, diff_input)

    assert contract.status == ContractStatus.CHECKED_OK
    assert store.get_quote(SEED_QUOTE_ID).shadiness_score == 5
