"""
Integration Tests — Approval Endpoints

Tests:
- GET /api/v1/approvals
- POST /api/v1/approvals/{serial}
- POST /api/v1/approvals/rows/{row_index}
"""

from fastapi.testclient import TestClient


class TestApprovals:
    def test_buckets(self, client: TestClient, admin_headers):
        resp = client.get("/api/v1/approvals", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert [e["serial"] for e in data["pending"]] == ["SA-001"]
        assert [e["serial"] for e in data["history"]] == ["SA-002"]

    def test_approve_moves_entry_to_history(self, client: TestClient, admin_headers):
        resp = client.post("/api/v1/approvals/SA-001", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["stage1_approved_at"]

        data = client.get("/api/v1/approvals", headers=admin_headers).json()
        assert data["pending"] == []
        assert [e["serial"] for e in data["history"]] == ["SA-001", "SA-002"]

    def test_approve_twice(self, client: TestClient, admin_headers):
        client.post("/api/v1/approvals/SA-001", headers=admin_headers)

        resp = client.post("/api/v1/approvals/SA-001", headers=admin_headers)
        assert resp.status_code == 422

    def test_approve_unknown(self, client: TestClient, admin_headers):
        resp = client.post("/api/v1/approvals/SA-999", headers=admin_headers)
        assert resp.status_code == 404

    def test_store_rejects_update(self, client: TestClient, admin_headers, spreadsheet):
        spreadsheet.rejected_actions.add("updateCell")

        resp = client.post("/api/v1/approvals/SA-001", headers=admin_headers)
        assert resp.status_code == 502
        assert resp.json()["error"]["code"] == "GATEWAY_WRITE_FAILED"

    def test_approve_by_row(self, client: TestClient, admin_headers, spreadsheet):
        resp = client.post("/api/v1/approvals/rows/5", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["serial"] == "SA-001"
        assert spreadsheet.posted("updateCell")[-1]["rowIndex"] == "5"

        assert client.post("/api/v1/approvals/rows/42", headers=admin_headers).status_code == 404

    def test_row_must_match_serial(self, client: TestClient, admin_headers):
        resp = client.post("/api/v1/approvals/SA-001?row_index=6", headers=admin_headers)
        assert resp.status_code == 404
