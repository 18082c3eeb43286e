class TestWorkPermitApi:
    def _create(self, client, headers, email="cook@chefoverseas.com"):
        return client.post("/api/admin/users", json={"email": email}, headers=headers).json()["id"]

    def _upload_docket(self, client, headers, user_id, content):
        return client.post(
            f"/api/admin/workpermit/{user_id}/upload-docket",
            files={"pdf": ("final.pdf", content, "application/pdf")},
            headers=headers,
        )

    def test_update_with_tracking_code(self, client, admin_headers):
        user_id = self._create(client, admin_headers)
        r = client.put(f"/api/admin/workpermit/{user_id}",
                       json={"status": "applied", "trackingCode": "EMB-2024-001"}, headers=admin_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["warnings"] == []
        assert data["workPermit"]["status"] == "applied"
        assert data["workPermit"]["applicationDate"]
        assert data["workPermit"]["canUploadFinalDocket"] is True
        assert data["workPermit"]["display"]["label"] == "Applied"

    def test_warnings_do_not_block(self, client, admin_headers):
        user_id = self._create(client, admin_headers)
        r = client.put(f"/api/admin/workpermit/{user_id}", json={"status": "approved"}, headers=admin_headers)
        assert r.status_code == 200
        data = r.json()
        assert set(data["warnings"]) == {"unusual_transition", "tracking_code_required"}
        assert data["workPermit"]["status"] == "approved"
        assert data["workPermit"]["trackingCodeRequired"] is True

    def test_invalid_status(self, client, admin_headers):
        user_id = self._create(client, admin_headers)
        r = client.put(f"/api/admin/workpermit/{user_id}", json={"status": "lost"}, headers=admin_headers)
        assert r.status_code == 400

    def test_final_docket_gate(self, client, admin_headers, make_pdf):
        user_id = self._create(client, admin_headers)
        r = self._upload_docket(client, admin_headers, user_id, make_pdf())
        assert r.status_code == 409

        client.put(f"/api/admin/workpermit/{user_id}",
                   json={"status": "applied", "trackingCode": "EMB-1"}, headers=admin_headers)
        r = self._upload_docket(client, admin_headers, user_id, make_pdf())
        assert r.status_code == 200
        data = r.json()
        assert data["workPermit"]["finalDocketUrl"]
        assert data["workPermit"]["status"] == "applied"
        assert data["warnings"] == []

    def test_final_docket_must_be_pdf(self, client, admin_headers):
        user_id = self._create(client, admin_headers)
        client.put(f"/api/admin/workpermit/{user_id}",
                   json={"status": "applied", "trackingCode": "EMB-1"}, headers=admin_headers)
        r = self._upload_docket(client, admin_headers, user_id, b"not a pdf")
        assert r.status_code == 415

    def test_list_by_status(self, client, admin_headers):
        a = self._create(client, admin_headers, "a@chefoverseas.com")
        self._create(client, admin_headers, "b@chefoverseas.com")
        client.put(f"/api/admin/workpermit/{a}", json={"status": "applied", "trackingCode": "T"},
                   headers=admin_headers)

        rows = client.get("/api/admin/workpermits", params={"status": "applied"}, headers=admin_headers).json()
        assert [row["userId"] for row in rows] == [a]
        assert len(client.get("/api/admin/workpermits", headers=admin_headers).json()) == 2

    def test_candidate_view(self, client, login_candidate):
        headers, _ = login_candidate()
        r = client.get("/api/workpermit", headers=headers)
        assert r.status_code == 200
        assert r.json()["workPermit"]["status"] == "preparation"
        assert r.json()["workPermit"]["canUploadFinalDocket"] is False
