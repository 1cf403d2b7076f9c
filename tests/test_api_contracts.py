"""
Tests for the contracts and contacts API.

Run with: pytest tests/test_api_contracts.py -v
"""

from datetime import datetime, timedelta

CONTRACTS = "/api/v1/contracts"
CONTACTS = "/api/v1/contacts"


class TestContractCrud:

    def test_create_applies_defaults(self, client, admin_headers, admin_user):
        response = client.post(CONTRACTS, headers=admin_headers, json={
            "title": "Data Center Consolidation",
            "agency": "Department of Energy",
            "keywords": "data center, consolidation",
            "budget_max": 3000000,
            "award_date": "2024-04-01",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["federal_id"].startswith("FT-")
        assert body["contract_name"] == "Data Center Consolidation"
        assert body["buying_organization"] == "Department of Energy"
        assert body["contract_type"] == "federal"
        assert body["status"] == "active"
        assert body["contract_status"] == "open"
        assert body["keywords"] == ["data center", "consolidation"]
        assert body["data_source"] == "manual"
        assert body["updated_by"] == str(admin_user["id"])

    def test_create_requires_title_and_agency(self, client, admin_headers):
        response = client.post(CONTRACTS, headers=admin_headers, json={"title": "Only Title"})
        assert response.status_code == 422

    def test_create_rejects_unknown_status(self, client, admin_headers):
        response = client.post(CONTRACTS, headers=admin_headers, json={
            "title": "X", "agency": "Y", "status": "archived",
        })
        assert response.status_code == 422

    def test_member_cannot_create(self, client, member_headers):
        response = client.post(CONTRACTS, headers=member_headers, json={"title": "X", "agency": "Y"})
        assert response.status_code == 403
        assert response.json()["detail"] == "Missing permission: add_contracts"

    def test_internal_user_with_preset(self, client, staff_factory, headers_for):
        staff = staff_factory("assistant@federaltalks.io", role="assistance")
        headers = headers_for(staff, account_type="internal")

        created = client.post(CONTRACTS, headers=headers, json={"title": "X", "agency": "Y"})
        assert created.status_code == 201

        deleted = client.delete(f"{CONTRACTS}/{created.json()['id']}", headers=headers)
        assert deleted.status_code == 403

    def test_get_and_404(self, client, member_headers, make_contract):
        contract = make_contract(title="Lookup Me")

        assert client.get(f"{CONTRACTS}/{contract['id']}", headers=member_headers).json()["title"] == "Lookup Me"
        missing = client.get(f"{CONTRACTS}/00000000-0000-0000-0000-000000000000", headers=member_headers)
        assert missing.status_code == 404

    def test_update_keeps_federal_id(self, client, admin_headers, make_contract):
        contract = make_contract()

        response = client.patch(f"{CONTRACTS}/{contract['id']}", headers=admin_headers, json={
            "title": "Renamed",
            "state": "Virginia",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["state"] == "Virginia"
        assert body["federal_id"] == contract["federal_id"]

    def test_status_transition(self, client, admin_headers, make_contract):
        contract = make_contract()

        response = client.post(f"{CONTRACTS}/{contract['id']}/status", headers=admin_headers, json={
            "status": "closed",
            "contract_status": "awarded",
        })

        assert response.status_code == 200
        assert response.json()["status"] == "closed"
        assert response.json()["contract_status"] == "awarded"

        empty = client.post(f"{CONTRACTS}/{contract['id']}/status", headers=admin_headers, json={})
        assert empty.status_code == 400

    def test_delete_removes_dependents(self, client, store, admin_headers, admin_user, make_contract):
        contract = make_contract()
        store.insert("user_favorites", [{"user_id": admin_user["id"], "contract_id": contract["id"]}])

        response = client.delete(f"{CONTRACTS}/{contract['id']}", headers=admin_headers)

        assert response.status_code == 204
        assert store.count("contracts") == 0
        assert store.count("user_favorites") == 0


class TestContractListing:

    def test_filters_and_text_match(self, client, member_headers, make_contract):
        make_contract(title="Bridge Repair", state="Ohio", contract_type="state")
        make_contract(title="Cloud Hosting", state="Texas")
        make_contract(title="Archived Work", status="closed")

        everything = client.get(CONTRACTS, headers=member_headers).json()
        assert everything["total"] == 3

        active = client.get(CONTRACTS, headers=member_headers, params={"status": "active"}).json()
        assert active["total"] == 2

        state = client.get(CONTRACTS, headers=member_headers, params={"contract_type": "state"}).json()
        assert [c["title"] for c in state["items"]] == ["Bridge Repair"]

        text = client.get(CONTRACTS, headers=member_headers, params={"q": "cloud"}).json()
        assert [c["title"] for c in text["items"]] == ["Cloud Hosting"]

    def test_requires_auth(self, client):
        assert client.get(CONTRACTS).status_code == 401


class TestContractSearch:

    def test_ranked_results(self, client, member_headers, make_contract):
        make_contract(title="Road Paving", description="asphalt")
        make_contract(title="Cybersecurity Operations", agency="DHS")
        make_contract(title="Help Desk", description="includes cybersecurity awareness")
        make_contract(title="Cybersecurity Archive", status="closed")

        response = client.post(f"{CONTRACTS}/search", headers=member_headers, json={"query": "cybersecurity"})

        assert response.status_code == 200
        body = response.json()
        assert body["mode"] == "search"
        assert [r["contract"]["title"] for r in body["results"]] == ["Cybersecurity Operations", "Help Desk"]
        assert [r["score"] for r in body["results"]] == [10, 6]

    def test_browse_with_deadline(self, client, member_headers, make_contract):
        make_contract(title="Due Soon", response_deadline=datetime.utcnow() + timedelta(days=2))
        make_contract(title="Due Later", response_deadline=datetime.utcnow() + timedelta(days=60))
        make_contract(title="No Deadline")

        response = client.post(f"{CONTRACTS}/search", headers=member_headers, json={
            "query": "",
            "deadline": "7days",
        })

        body = response.json()
        assert body["mode"] == "browse"
        assert [r["contract"]["title"] for r in body["results"]] == ["Due Soon"]
        assert body["results"][0]["score"] == 0

    def test_invalid_deadline(self, client, member_headers):
        response = client.post(f"{CONTRACTS}/search", headers=member_headers, json={"query": "", "deadline": "90days"})
        assert response.status_code == 422


class TestDownloads:

    def test_summary(self, client, member_headers, make_contract):
        contract = make_contract(title="Fleet Leasing", budget_min=100, budget_max=200)

        response = client.get(f"{CONTRACTS}/{contract['id']}/summary", headers=member_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert f'filename="{contract["federal_id"]}_summary.txt"' in response.headers["content-disposition"]
        assert "Budget: $100 - $200" in response.text

    def test_research_report(self, client, member_headers, make_contract):
        contract = make_contract()

        response = client.get(f"{CONTRACTS}/{contract['id']}/report", headers=member_headers, params={"kind": "analysis"})

        assert response.status_code == 200
        assert response.text.startswith("Contract Intelligence Analysis")
        assert f'{contract["federal_id"]}_analysis.txt' in response.headers["content-disposition"]

    def test_unknown_report_kind(self, client, member_headers, make_contract):
        contract = make_contract()
        response = client.get(f"{CONTRACTS}/{contract['id']}/report", headers=member_headers, params={"kind": "pdf"})
        assert response.status_code == 400


class TestContacts:

    def test_crud(self, client, admin_headers):
        created = client.post(CONTACTS, headers=admin_headers, json={
            "full_name": "Morgan Lee",
            "title": "Chief Procurement Officer",
            "agency": "GSA",
            "contact_type": "cpo",
            "is_federal": True,
        })
        assert created.status_code == 201
        contact_id = created.json()["id"]
        assert created.json()["data_source"] == "manual"

        updated = client.patch(f"{CONTACTS}/{contact_id}", headers=admin_headers, json={"state": "Maryland"})
        assert updated.json()["state"] == "Maryland"

        listed = client.get(CONTACTS, headers=admin_headers, params={"is_federal": True}).json()
        assert [c["full_name"] for c in listed["items"]] == ["Morgan Lee"]

        assert client.delete(f"{CONTACTS}/{contact_id}", headers=admin_headers).status_code == 204
        assert client.get(f"{CONTACTS}/{contact_id}", headers=admin_headers).status_code == 404

    def test_defaults(self, client, admin_headers):
        body = client.post(CONTACTS, headers=admin_headers, json={
            "full_name": "Sam Park",
            "title": "Director",
            "agency": "VA",
        }).json()

        assert body["contact_type"] == "procurement"
        assert body["is_federal"] is False

    def test_alphabetical_listing(self, client, store, member_headers):
        store.insert("contacts", [
            {"full_name": "Zed", "title": "CIO", "agency": "A"},
            {"full_name": "Amy", "title": "CTO", "agency": "B"},
        ])

        items = client.get(CONTACTS, headers=member_headers).json()["items"]
        assert [c["full_name"] for c in items] == ["Amy", "Zed"]
