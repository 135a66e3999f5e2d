import pytest


def test_contract_numbers_are_sequential(create_contract):
    numbers = [create_contract(f"Client {i}")["contractNumber"] for i in range(3)]
    assert numbers == [1, 2, 3]


def test_create_signed_contract(create_contract, get_contract):
    created = create_contract("ACME", 10, internalNotes="priority")

    assert created["contractType"] == "signed"
    assert created["signedDate"] == created["createdDate"]

    contract = get_contract(created["id"])
    assert contract["usedHours"] == 0
    assert contract["status"] == "active"
    assert contract["isArchived"] is False
    assert contract["archivedAt"] is None
    assert contract["internalNotes"] == "priority"
    assert contract["clientId"]


def test_create_quote_has_no_signed_date(create_contract):
    created = create_contract("ACME", 5, contractType="quote")
    assert created["contractType"] == "quote"
    assert created["signedDate"] is None


def test_contracts_reuse_client_by_name(client, create_contract):
    first = create_contract("ACME")
    second = create_contract("ACME")
    create_contract("Globex")

    lookup = client.get("/api/clients-list").json()
    assert sorted(c["name"] for c in lookup) == ["ACME", "Globex"]
    assert client.get(f"/api/contracts/{first['id']}").json()["clientId"] == \
        client.get(f"/api/contracts/{second['id']}").json()["clientId"]


def test_create_requires_client(client):
    response = client.post("/api/contracts", json={"totalHours": 10})
    assert response.status_code == 422
    assert response.json()["status"] == "Failure"


def test_create_rejects_negative_budget(client):
    response = client.post("/api/contracts", json={"clientName": "ACME", "totalHours": -1})
    assert response.status_code == 422


def test_create_with_unknown_client_id(client):
    response = client.post(
        "/api/contracts", json={"clientId": "missing", "totalHours": 10})
    assert response.status_code == 404
    assert response.json()["status_code"] == "300"


def test_archive_is_idempotent(client, create_contract, get_contract):
    contract_id = create_contract()["id"]

    assert client.patch(f"/api/contracts/{contract_id}/archive").json() == {"success": True}
    archived_at = get_contract(contract_id)["archivedAt"]
    assert archived_at is not None

    client.patch(f"/api/contracts/{contract_id}/archive")
    again = get_contract(contract_id)
    assert again["isArchived"] is True
    assert again["archivedAt"] == archived_at


def test_unarchive_clears_archived_at(client, create_contract, get_contract):
    contract_id = create_contract()["id"]
    client.patch(f"/api/contracts/{contract_id}/archive")

    client.patch(f"/api/contracts/{contract_id}/unarchive")
    client.patch(f"/api/contracts/{contract_id}/unarchive")

    contract = get_contract(contract_id)
    assert contract["isArchived"] is False
    assert contract["archivedAt"] is None


def test_archive_unknown_contract_is_noop(client):
    response = client.patch("/api/contracts/missing/archive")
    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_list_hides_archived_by_default(client, create_contract):
    kept = create_contract("ACME")["id"]
    archived = create_contract("Globex")["id"]
    client.patch(f"/api/contracts/{archived}/archive")

    default = [c["id"] for c in client.get("/api/contracts").json()]
    everything = [c["id"] for c in client.get(
        "/api/contracts", params={"includeArchived": True}).json()]

    assert default == [kept]
    # newest first
    assert everything == [archived, kept]


def test_sign_quote(client, create_contract, get_contract):
    contract_id = create_contract(contractType="quote")["id"]

    response = client.patch(f"/api/contracts/{contract_id}/sign")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    contract = get_contract(contract_id)
    assert contract["contractType"] == "signed"
    assert contract["signedDate"] == body["signedDate"]


def test_sign_unknown_contract(client):
    assert client.patch("/api/contracts/missing/sign").status_code == 404


def test_rename_contract(client, create_contract, get_contract):
    contract_id = create_contract("ACME")["id"]

    response = client.patch(
        f"/api/contracts/{contract_id}/client-name",
        json={"clientName": "ACME Corp", "createdDate": "2025-06-01T00:00:00"},
    )

    assert response.status_code == 200
    contract = get_contract(contract_id)
    assert contract["clientName"] == "ACME Corp"
    assert contract["createdDate"] == "2025-06-01T00:00:00"


def test_rename_unknown_contract(client):
    response = client.patch("/api/contracts/missing/client-name", json={"clientName": "X"})
    assert response.status_code == 404


def test_get_by_number(client, create_contract):
    create_contract("ACME")
    second = create_contract("Globex")

    assert client.get("/api/contracts/by-number/2").json()["id"] == second["id"]
    assert client.get("/api/contracts/by-number/99").status_code == 404


def test_unknown_contract_envelope(client):
    response = client.get("/api/contracts/missing")

    assert response.status_code == 404
    body = response.json()
    assert body["data"] is None
    assert body["status"] == "Failure"
    assert body["status_code"] == "300"
    assert "missing" in body["message"]


def test_overview(client, create_contract, add_intervention):
    over = create_contract("ACME", 10)["id"]
    add_intervention(over, 12)
    create_contract("Globex", 20)
    create_contract("Initech", 5, contractType="quote")
    archived = create_contract("Umbrella", 8)["id"]
    client.patch(f"/api/contracts/{archived}/archive")

    overview = client.get("/api/contracts/overview").json()

    assert overview == {
        "activeContracts": 2,
        "archivedContracts": 1,
        "quotes": 1,
        "contractsInOverage": 1,
        "totalHours": pytest.approx(35),
        "usedHours": pytest.approx(12),
    }


def test_recalculate_hours(client, create_contract, add_intervention):
    contract_id = create_contract()["id"]
    add_intervention(contract_id, 2.5)
    add_intervention(contract_id, 1, billable=False)

    response = client.post(f"/api/contracts/{contract_id}/recalculate-hours")

    assert response.json() == {"id": contract_id, "usedHours": pytest.approx(2.5)}
    assert client.post("/api/contracts/missing/recalculate-hours").status_code == 404


def test_health(client):
    assert client.get("/api/health").json()["status"] == "healthy"
