"""
Tests for the bulk upload API.

Run with: pytest tests/test_api_uploads.py -v
"""

import io

import openpyxl

UPLOADS = "/api/v1/uploads"


def _csv_file(content, name="contracts.csv"):
    return {"file": (name, content, "text/csv")}


class TestUploadEndpoint:

    def test_contract_csv(self, client, store, admin_headers):
        content = (
            b"Contract Title,Agency,NAICS Code,Response Deadline\n"
            b"Janitorial Services,GSA,561720,2024-09-30\n"
            b",DoD,,\n"
            b"Grounds Maintenance,NPS,561730,\n"
        )

        response = client.post(f"{UPLOADS}/contracts", headers=admin_headers, files=_csv_file(content))

        assert response.status_code == 200
        assert response.json() == {
            "success_count": 2,
            "total": 3,
            "errors": ["Row 3: Missing required fields: title"],
        }
        assert store.count("contracts") == 2
        assert store.count("upload_logs", {"upload_type": "contracts"}) == 1

    def test_contact_xlsx(self, client, store, admin_headers):
        workbook = openpyxl.Workbook()
        sheet = workbook.active
        sheet.append(["Full Name", "Job Title", "Agency", "Federal"])
        sheet.append(["Alex Kim", "CIO", "Treasury", "true"])
        buffer = io.BytesIO()
        workbook.save(buffer)

        response = client.post(
            f"{UPLOADS}/contacts",
            headers=admin_headers,
            files={"file": ("contacts.xlsx", buffer.getvalue(), "application/octet-stream")},
        )

        assert response.status_code == 200
        assert response.json()["success_count"] == 1
        assert store.select_one("contacts", {"full_name": "Alex Kim"})["is_federal"] is True
        assert store.select_one("upload_logs", {})["file_type"] == (
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )

    def test_unsupported_format(self, client, store, admin_headers):
        response = client.post(
            f"{UPLOADS}/contracts",
            headers=admin_headers,
            files={"file": ("contracts.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 415
        assert response.json()["detail"] == "Unsupported file format. Please use CSV, XLS, or XLSX files."
        assert store.count("upload_logs") == 0

    def test_unreadable_file(self, client, store, admin_headers):
        response = client.post(
            f"{UPLOADS}/contracts",
            headers=admin_headers,
            files={"file": ("contracts.xlsx", b"garbage", "application/octet-stream")},
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Error reading file:")
        assert store.count("contracts") == 0

    def test_unknown_kind(self, client, admin_headers):
        response = client.post(f"{UPLOADS}/vendors", headers=admin_headers, files=_csv_file(b"a\n1\n"))
        assert response.status_code == 404

    def test_requires_upload_permission(self, client, member_headers):
        response = client.post(f"{UPLOADS}/contracts", headers=member_headers, files=_csv_file(b"title,agency\nA,B\n"))
        assert response.status_code == 403
        assert response.json()["detail"] == "Missing permission: upload_contracts"


class TestTemplatesAndLogs:

    def test_csv_template_download(self, client, member_headers):
        response = client.get(f"{UPLOADS}/templates/contacts", headers=member_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="contacts_template.csv"' in response.headers["content-disposition"]
        assert response.text.splitlines()[0].startswith("full_name,title,agency")

    def test_xlsx_template_download(self, client, member_headers):
        response = client.get(f"{UPLOADS}/templates/contracts", headers=member_headers, params={"format": "excel"})

        assert response.status_code == 200
        assert 'filename="contracts_template.xlsx"' in response.headers["content-disposition"]
        workbook = openpyxl.load_workbook(io.BytesIO(response.content))
        assert workbook.active.cell(row=1, column=1).value == "title"

    def test_bad_template_format(self, client, member_headers):
        response = client.get(f"{UPLOADS}/templates/contracts", headers=member_headers, params={"format": "pdf"})
        assert response.status_code == 400

    def test_logs_newest_first(self, client, admin_headers):
        client.post(f"{UPLOADS}/contracts", headers=admin_headers, files=_csv_file(b"title,agency\nA,B\n", "first.csv"))
        client.post(f"{UPLOADS}/contracts", headers=admin_headers, files=_csv_file(b"title,agency\nC,D\n", "second.csv"))

        logs = client.get(f"{UPLOADS}/logs", headers=admin_headers).json()

        assert [log["file_name"] for log in logs] == ["second.csv", "first.csv"]
        assert logs[0]["records_successful"] == 1

    def test_logs_require_permission(self, client, member_headers):
        assert client.get(f"{UPLOADS}/logs", headers=member_headers).status_code == 403
