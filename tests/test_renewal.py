import pytest


def _renew(client, contract_id, total_hours):
    response = client.post(f"/api/contracts/{contract_id}/renew", json={"totalHours": total_hours})
    assert response.status_code == 200, response.text
    return response.json()


def test_renew_rolls_overage_forward(client, create_contract, add_intervention, get_contract):
    old = create_contract("ACME", 10)
    add_intervention(old["id"], 14, description="Fix")

    renewed = _renew(client, old["id"], 20)

    assert renewed["clientName"] == "ACME"
    assert renewed["totalHours"] == 20
    new = get_contract(renewed["id"])
    assert new["usedHours"] == pytest.approx(4)
    assert new["contractNumber"] == 2
    assert new["contractType"] == "signed"
    assert new["clientId"] == get_contract(old["id"])["clientId"]

    [carry] = new["interventions"]
    assert carry["description"] == "Fix (reporté)"
    assert carry["hoursUsed"] == pytest.approx(4)
    assert carry["technician"] == "Système"
    assert carry["isBillable"] is True
    assert carry["date"] == new["createdDate"]

    previous = get_contract(old["id"])
    assert previous["isArchived"] is True
    assert previous["archivedAt"] is not None
    assert previous["usedHours"] == pytest.approx(14)


def test_renew_uses_latest_billable_description(client, create_contract, add_intervention, get_contract):
    old = create_contract("ACME", 10)
    add_intervention(old["id"], 6, description="Install", date="2026-01-05T09:00:00")
    add_intervention(old["id"], 6, description="Migration", date="2026-01-09T09:00:00")
    add_intervention(old["id"], 3, description="Training", date="2026-01-12T09:00:00",
                     billable=False)

    renewed = _renew(client, old["id"], 10)

    [carry] = get_contract(renewed["id"])["interventions"]
    assert carry["description"] == "Migration (reporté)"
    assert carry["hoursUsed"] == pytest.approx(2)


def test_renew_without_overage(client, create_contract, add_intervention, get_contract):
    old = create_contract("ACME", 10)
    add_intervention(old["id"], 8)

    renewed = _renew(client, old["id"], 10)

    new = get_contract(renewed["id"])
    assert new["usedHours"] == 0
    assert new["interventions"] == []


def test_renew_unknown_contract(client):
    response = client.post("/api/contracts/missing/renew", json={"totalHours": 10})
    assert response.status_code == 404


def _renewal_quote(client, contract_id, total_hours):
    return client.post(
        f"/api/contracts/{contract_id}/renewal-quote", json={"totalHours": total_hours})


def _carry_lines(contract):
    return sorted(
        (i["description"], i["hoursUsed"]) for i in contract["interventions"]
        if i["technician"] == "Système"
    )


@pytest.fixture
def overrun(create_contract, add_intervention):
    """10h contract with 12h used over two interventions."""
    contract = create_contract("ACME", 10)
    add_intervention(contract["id"], 6, description="A", date="2026-01-10T09:00:00")
    add_intervention(contract["id"], 6, description="B", date="2026-01-11T09:00:00")
    return contract["id"]


def test_renewal_quote_carries_overage(client, overrun, get_contract):
    response = _renewal_quote(client, overrun, 20)

    assert response.status_code == 200
    body = response.json()
    quote = get_contract(body["quoteId"])
    assert quote["contractType"] == "quote"
    assert quote["signedDate"] is None
    assert quote["linkedContractId"] == overrun
    assert quote["usedHours"] == pytest.approx(2)
    assert _carry_lines(quote) == [("B (reporté)", 2)]

    original = get_contract(overrun)
    assert original["renewalQuoteId"] == body["quoteId"]
    assert original["isArchived"] is False


def test_renewal_quote_follows_hour_changes(client, overrun, add_intervention, get_contract):
    quote_id = _renewal_quote(client, overrun, 20).json()["quoteId"]

    extra = add_intervention(overrun, 3, description="C", date="2026-01-12T09:00:00")
    quote = get_contract(quote_id)
    assert _carry_lines(quote) == [("B (reporté)", 2), ("C (reporté)", 3)]
    assert quote["usedHours"] == pytest.approx(5)

    client.put(f"/api/interventions/{extra}", json={
        "date": "2026-01-12T09:00:00", "description": "C", "hoursUsed": 1,
        "technician": "Alice", "isBillable": True,
    })
    assert _carry_lines(get_contract(quote_id)) == [("B (reporté)", 2), ("C (reporté)", 1)]

    client.delete(f"/api/interventions/{extra}")
    quote = get_contract(quote_id)
    assert _carry_lines(quote) == [("B (reporté)", 2)]
    assert quote["usedHours"] == pytest.approx(2)


def test_renewal_quote_clears_when_back_under_budget(client, overrun, get_contract):
    quote_id = _renewal_quote(client, overrun, 20).json()["quoteId"]
    last = next(i for i in get_contract(overrun)["interventions"] if i["description"] == "B")

    client.delete(f"/api/interventions/{last['id']}")

    quote = get_contract(quote_id)
    assert _carry_lines(quote) == []
    assert quote["usedHours"] == 0


def test_only_one_pending_renewal_quote(client, overrun):
    assert _renewal_quote(client, overrun, 20).status_code == 200

    second = _renewal_quote(client, overrun, 20)

    assert second.status_code == 400
    assert second.json()["status_code"] == "202"


def test_quote_cannot_be_renewed_by_quote(client, overrun):
    quote_id = _renewal_quote(client, overrun, 20).json()["quoteId"]
    assert _renewal_quote(client, quote_id, 20).status_code == 400


def test_signing_renewal_quote_archives_original(client, overrun, get_contract):
    quote_id = _renewal_quote(client, overrun, 20).json()["quoteId"]

    response = client.patch(f"/api/contracts/{quote_id}/sign")

    assert response.status_code == 200
    quote = get_contract(quote_id)
    assert quote["contractType"] == "signed"
    assert quote["signedDate"] == response.json()["signedDate"]
    assert quote["linkedContractId"] is None
    original = get_contract(overrun)
    assert original["isArchived"] is True
    assert original["archivedAt"] == quote["signedDate"]
    assert original["renewalQuoteId"] is None


def test_delete_quote_unlinks_original(client, overrun, get_contract):
    quote_id = _renewal_quote(client, overrun, 20).json()["quoteId"]

    assert client.delete(f"/api/contracts/{quote_id}").json() == {"success": True}

    assert client.get(f"/api/contracts/{quote_id}").status_code == 404
    assert get_contract(overrun)["renewalQuoteId"] is None
    # a new quote can be opened again
    assert _renewal_quote(client, overrun, 15).status_code == 200


def test_signed_contract_cannot_be_deleted(client, overrun, get_contract):
    response = client.delete(f"/api/contracts/{overrun}")

    assert response.status_code == 400
    assert response.json()["status_code"] == "402"
    assert get_contract(overrun)["isArchived"] is False


def test_renew_supersedes_pending_quote(client, overrun, get_contract):
    quote_id = _renewal_quote(client, overrun, 20).json()["quoteId"]

    renewed = _renew(client, overrun, 20)

    assert get_contract(overrun)["renewalQuoteId"] is None
    assert get_contract(quote_id)["linkedContractId"] is None
    assert get_contract(renewed["id"])["usedHours"] == pytest.approx(2)


def test_renewing_a_renewal_quote_frees_the_original(client, overrun, add_intervention, get_contract):
    quote_id = _renewal_quote(client, overrun, 20).json()["quoteId"]

    renewed = _renew(client, quote_id, 20)

    original = get_contract(overrun)
    assert original["renewalQuoteId"] is None
    assert original["isArchived"] is False
    quote = get_contract(quote_id)
    assert quote["isArchived"] is True
    assert quote["linkedContractId"] is None
    assert get_contract(renewed["id"])["usedHours"] == pytest.approx(0)

    # the archived quote no longer follows the original's hours
    add_intervention(overrun, 3, description="C", date="2026-01-12T09:00:00")
    assert _carry_lines(get_contract(quote_id)) == [("B (reporté)", 2)]
    assert _renewal_quote(client, overrun, 15).status_code == 200
