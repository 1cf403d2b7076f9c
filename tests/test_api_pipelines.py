"""
Tests for sales pipelines and favorites.

Run with: pytest tests/test_api_pipelines.py -v
"""

import pytest

from federaltalks.config import DEFAULT_PIPELINE_STAGES

PIPELINES = "/api/v1/pipelines"
FAVORITES = "/api/v1/favorites"


@pytest.fixture()
def pipeline(client, member_headers):
    return client.get(f"{PIPELINES}/default", headers=member_headers).json()


class TestPipelines:

    def test_default_pipeline_created_once(self, client, member_headers, pipeline):
        assert pipeline["name"] == "My Pipeline"
        assert pipeline["is_default"] is True
        assert [s["name"] for s in pipeline["stages"]] == [name for name, _ in DEFAULT_PIPELINE_STAGES]

        again = client.get(f"{PIPELINES}/default", headers=member_headers).json()
        assert again["id"] == pipeline["id"]
        assert len(client.get(PIPELINES, headers=member_headers).json()) == 1

    def test_new_default_replaces_old(self, client, member_headers, pipeline):
        created = client.post(PIPELINES, headers=member_headers, json={"name": "Q3 Targets", "is_default": True})

        assert created.status_code == 201
        listed = {p["name"]: p["is_default"] for p in client.get(PIPELINES, headers=member_headers).json()}
        assert listed == {"My Pipeline": False, "Q3 Targets": True}

    def test_pipelines_are_private(self, client, admin_headers, pipeline):
        response = client.get(f"{PIPELINES}/{pipeline['id']}/board", headers=admin_headers)
        assert response.status_code == 404

    def test_delete(self, client, store, member_headers, pipeline, make_contract):
        contract = make_contract()
        client.post(f"{PIPELINES}/{pipeline['id']}/entries", headers=member_headers, json={"contract_id": str(contract["id"])})

        assert client.delete(f"{PIPELINES}/{pipeline['id']}", headers=member_headers).status_code == 204
        assert store.count("pipelines") == 0
        assert store.count("pipeline_stages") == 0
        assert store.count("pipeline_entries") == 0


class TestEntries:

    def test_add_defaults_to_first_stage(self, client, member_headers, pipeline, make_contract):
        contract = make_contract()

        response = client.post(
            f"{PIPELINES}/{pipeline['id']}/entries",
            headers=member_headers,
            json={"contract_id": str(contract["id"])},
        )

        assert response.status_code == 201
        entry = response.json()
        assert entry["stage_id"] == pipeline["stages"][0]["id"]
        assert entry["probability"] == 25
        assert entry["contract"]["federal_id"] == contract["federal_id"]

    def test_duplicate_rejected(self, client, member_headers, pipeline, make_contract):
        contract = make_contract()
        payload = {"contract_id": str(contract["id"])}

        client.post(f"{PIPELINES}/{pipeline['id']}/entries", headers=member_headers, json=payload)
        response = client.post(f"{PIPELINES}/{pipeline['id']}/entries", headers=member_headers, json=payload)

        assert response.status_code == 400

    def test_move_and_board_totals(self, client, member_headers, pipeline, make_contract):
        first = make_contract(title="First", budget_max=100000)
        second = make_contract(title="Second", budget_max=50000)
        proposal = pipeline["stages"][2]

        entry = client.post(
            f"{PIPELINES}/{pipeline['id']}/entries",
            headers=member_headers,
            json={"contract_id": str(first["id"])},
        ).json()
        client.post(
            f"{PIPELINES}/{pipeline['id']}/entries",
            headers=member_headers,
            json={"contract_id": str(second["id"]), "stage_id": proposal["id"], "estimated_value": 75000},
        )

        moved = client.post(f"{PIPELINES}/entries/{entry['id']}/move", headers=member_headers, json={"stage_id": proposal["id"]})
        assert moved.status_code == 200
        assert moved.json()["stage_id"] == proposal["id"]

        board = client.get(f"{PIPELINES}/{pipeline['id']}/board", headers=member_headers).json()
        columns = {column["stage"]["name"]: column for column in board["columns"]}

        assert columns["Prospecting"]["entries"] == []
        assert columns["Prospecting"]["total_value"] == 0
        assert len(columns["Proposal"]["entries"]) == 2
        assert columns["Proposal"]["total_value"] == 175000

    def test_move_to_foreign_stage_rejected(self, client, member_headers, pipeline, make_contract):
        other = client.post(PIPELINES, headers=member_headers, json={"name": "Other"}).json()
        contract = make_contract()
        entry = client.post(
            f"{PIPELINES}/{pipeline['id']}/entries",
            headers=member_headers,
            json={"contract_id": str(contract["id"])},
        ).json()

        response = client.post(
            f"{PIPELINES}/entries/{entry['id']}/move",
            headers=member_headers,
            json={"stage_id": other["stages"][0]["id"]},
        )
        assert response.status_code == 400

    def test_update_and_remove(self, client, member_headers, pipeline, make_contract):
        contract = make_contract()
        entry = client.post(
            f"{PIPELINES}/{pipeline['id']}/entries",
            headers=member_headers,
            json={"contract_id": str(contract["id"])},
        ).json()

        updated = client.patch(f"{PIPELINES}/entries/{entry['id']}", headers=member_headers, json={
            "probability": 60,
            "notes": "Teaming partner identified",
        })
        assert updated.json()["probability"] == 60
        assert updated.json()["notes"] == "Teaming partner identified"

        invalid = client.patch(f"{PIPELINES}/entries/{entry['id']}", headers=member_headers, json={"probability": 150})
        assert invalid.status_code == 422

        assert client.delete(f"{PIPELINES}/entries/{entry['id']}", headers=member_headers).status_code == 204


class TestFavorites:

    def test_toggle(self, client, member_headers, make_contract):
        contract = make_contract(title="Bookmarked")
        url = f"{FAVORITES}/{contract['id']}"

        assert client.post(url, headers=member_headers).json()["favorited"] is True
        assert [c["title"] for c in client.get(FAVORITES, headers=member_headers).json()] == ["Bookmarked"]

        assert client.post(url, headers=member_headers).json()["favorited"] is False
        assert client.get(FAVORITES, headers=member_headers).json() == []

    def test_unknown_contract(self, client, member_headers):
        response = client.post(f"{FAVORITES}/00000000-0000-0000-0000-000000000000", headers=member_headers)
        assert response.status_code == 404
