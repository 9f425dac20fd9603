from conftest import BRIEF_ID, DEALER_ID, dealer_quote_payload, diff_payload, make_quote
from outthedoor.models.quote import QuoteStatus


def test_check_contract_passes(client, store, contract):
    response = client.post(f"/contracts/{contract.id}/check", json=diff_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "checked_ok"
    assert [check["field"] for check in body["checks"]][:3] == ["vin", "year", "make"]
    assert all(check["pass"] for check in body["checks"])
    assert store.get_quote(contract.quote_id).shadiness_score == 5


def test_check_contract_mismatch(client, store, contract):
    payload = diff_payload(fees={"docFee": 150, "dmvFee": 195, "tireBatteryFee": 25})

    response = client.post(f"/contracts/{contract.id}/check", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "mismatch"
    failed = [check for check in body["checks"] if not check["pass"]]
    assert [check["field"] for check in failed] == ["fees"]
    assert "dmvFee" in failed[0]["notes"]


def test_check_unknown_contract_returns_404(client):
    response = client.post("/contracts/missing/check", json=diff_payload())

    assert response.status_code == 404
    assert response.json() == {"detail": "Contract not found"}


def test_invalid_diff_input_is_rejected_before_checking(client, store, contract):
    response = client.post(f"/contracts/{contract.id}/check", json=diff_payload(taxRate=1.5, vin="123"))

    assert response.status_code == 422
    assert store.get_contract(contract.id).checks == []


def test_recheck_runs_in_background(client, store, contract):
    response = client.post(f"/contracts/{contract.id}/recheck", json=diff_payload())

    assert response.status_code == 202
    assert store.get_contract(contract.id).status.value == "checked_ok"


def test_get_contract(client, contract):
    response = client.get(f"/contracts/{contract.id}")

    assert response.status_code == 200
    assert response.json()["quoteId"] == contract.quote_id


def test_upload_requires_accepted_quote(client, store):
    store.save_quote(make_quote(id="published", status=QuoteStatus.PUBLISHED))

    response = client.post("/contracts/upload", json={"quoteId": "published", "fileNames": ["contract.pdf"]})

    assert response.status_code == 409
    assert response.json()["detail"] == "Contract files can only be uploaded for accepted quotes"


def test_upload_for_accepted_quote(client, accepted_quote):
    response = client.post("/contracts/upload", json={"quoteId": accepted_quote.id})

    assert response.status_code == 200
    assert response.json()["status"] == "uploaded"
    assert response.json()["contractId"]


def test_shadiness_score_endpoint(client):
    clean = client.post("/quotes/shadiness-score", json=dealer_quote_payload())
    shady = client.post(
        "/quotes/shadiness-score",
        json=dealer_quote_payload(
            otdTotal=48000,
            docFee=0,
            dmvFee=0,
            tireBatteryFee=0,
            addons=[{"name": "Nitrogen package", "amount": 899}],
            requiresCreditPullForCash=True,
        ),
    )

    assert clean.json() == {"score": 0, "level": "low"}
    assert shady.json() == {"score": 40, "level": "medium"}


def test_shadiness_score_requires_confirmations(client):
    payload = dealer_quote_payload()
    del payload["confirmations"]

    assert client.post("/quotes/shadiness-score", json=payload).status_code == 422


def test_quote_lifecycle_over_http(client, store):
    submitted = client.post(
        f"/briefs/{BRIEF_ID}/quotes",
        json={"dealerId": DEALER_ID, "inviteToken": "tok-1", "quote": dealer_quote_payload()},
    )
    assert submitted.status_code == 200
    quote_id = submitted.json()["id"]
    assert submitted.json()["status"] == "draft"

    published = client.post(f"/quotes/{quote_id}/publish", json={"confidence": 0.8})
    assert published.json()["status"] == "published"

    countered = client.post(f"/quotes/{quote_id}/counter", json={"type": "match_target", "targetOTD": 51000})
    assert countered.json()["status"] == "countered"

    client.post(f"/quotes/{quote_id}/publish")
    accepted = client.post(f"/quotes/{quote_id}/accept")
    assert accepted.json()["status"] == "accepted"

    timeline = client.get(f"/timeline/{BRIEF_ID}").json()
    assert timeline["count"] == 5
    assert [event["type"] for event in timeline["events"]] == [
        "quote_submitted",
        "quote_published",
        "quote_countered",
        "quote_published",
        "quote_accepted",
    ]


def test_accept_unpublished_quote_returns_409(client, store):
    store.save_quote(make_quote(id="draft", status=QuoteStatus.DRAFT))

    response = client.post("/quotes/draft/accept")

    assert response.status_code == 409


def test_unknown_counter_type_is_rejected(client, store):
    store.save_quote(make_quote(id="live", status=QuoteStatus.PUBLISHED))

    response = client.post("/quotes/live/counter", json={"type": "walk_away"})

    assert response.status_code == 422
