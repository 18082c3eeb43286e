from sqlalchemy import text


class TestContractFlow:
    def _candidate_with_originals(self, client, admin_headers, login_candidate, make_pdf):
        headers, user = login_candidate()
        r = client.post(
            f"/api/admin/contract/{user['id']}/upload",
            files={
                "contract": ("contract.pdf", make_pdf(), "application/pdf"),
                "jobOffer": ("offer.pdf", make_pdf() + b"\n", "application/pdf"),
            },
            headers=admin_headers,
        )
        assert r.status_code == 200, r.text
        return headers, user, r.json()

    def test_new_contract_is_pending(self, client, login_candidate):
        headers, _ = login_candidate()
        r = client.get("/api/contracts", headers=headers)
        assert r.status_code == 200
        data = r.json()
        assert data["contract"]["companyContractStatus"] == "not-started"
        assert data["status"]["label"] == "Pending"

    def test_originals_set_pending(self, client, admin_headers, login_candidate, make_pdf):
        _, _, data = self._candidate_with_originals(client, admin_headers, login_candidate, make_pdf)
        assert data["contract"]["companyContractStatus"] == "pending"
        assert data["contract"]["jobOfferStatus"] == "pending"
        assert data["contract"]["companyContractOriginalUrl"]
        assert data["status"]["label"] == "Pending"

    def test_originals_must_be_pdf(self, client, admin_headers, login_candidate):
        _, user = login_candidate()
        r = client.post(
            f"/api/admin/contract/{user['id']}/upload",
            files={"contract": ("c.png", b"\x89PNG", "image/png")},
            headers=admin_headers,
        )
        assert r.status_code == 415

    def test_sign_one_then_both(self, client, admin_headers, login_candidate, make_pdf):
        headers, _, _ = self._candidate_with_originals(client, admin_headers, login_candidate, make_pdf)

        r = client.post(
            "/api/contracts/upload-signed",
            files={"signedContract": ("signed.pdf", make_pdf(signed=True), "application/pdf")},
            headers=headers,
        )
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["contract"]["companyContractStatus"] == "signed"
        assert data["contract"]["companyContractSignatureValid"] is True
        assert data["status"]["label"] == "In Progress"
        assert data["signatures"][0]["document"] == "signedContract"

        r = client.post(
            "/api/contracts/upload-signed",
            files={"signedJobOffer": ("offer-signed.pdf", make_pdf(signed=True) + b"\n", "application/pdf")},
            headers=headers,
        )
        assert r.json()["status"]["label"] == "Completed"

    def test_unsigned_upload_is_rejected(self, client, admin_headers, login_candidate, make_pdf):
        headers, _, _ = self._candidate_with_originals(client, admin_headers, login_candidate, make_pdf)
        r = client.post(
            "/api/contracts/upload-signed",
            files={"signedContract": ("signed.pdf", make_pdf() + b"\n\n", "application/pdf")},
            headers=headers,
        )
        assert r.status_code == 200
        data = r.json()
        assert data["contract"]["companyContractStatus"] == "rejected"
        assert data["contract"]["companyContractSignatureValid"] is False
        assert data["status"]["label"] == "Pending"

    def test_signed_upload_needs_original(self, client, login_candidate, make_pdf):
        headers, _ = login_candidate()
        r = client.post(
            "/api/contracts/upload-signed",
            files={"signedContract": ("signed.pdf", make_pdf(signed=True), "application/pdf")},
            headers=headers,
        )
        assert r.status_code == 409

    def test_signed_upload_requires_a_file(self, client, login_candidate):
        headers, _ = login_candidate()
        assert client.post("/api/contracts/upload-signed", headers=headers).status_code == 400

    def test_admin_sets_status(self, client, admin_headers, login_candidate, make_pdf):
        _, user, _ = self._candidate_with_originals(client, admin_headers, login_candidate, make_pdf)
        r = client.put(f"/api/admin/contract/{user['id']}",
                       json={"jobOfferStatus": "rejected", "notes": "wrong salary"}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["contract"]["jobOfferStatus"] == "rejected"
        assert r.json()["contract"]["notes"] == "wrong salary"

        r = client.put(f"/api/admin/contract/{user['id']}", json={"jobOfferStatus": "lost"},
                       headers=admin_headers)
        assert r.status_code == 400

        rows = client.get("/api/admin/contracts", headers=admin_headers).json()
        assert rows[0]["userId"] == user["id"]

    def test_rejected_job_offer_leaves_contract_untouched(self, client, admin_headers, login_candidate, make_pdf):
        _, user = login_candidate()
        r = client.post(
            f"/api/admin/contract/{user['id']}/upload",
            files={
                "contract": ("contract.pdf", make_pdf(), "application/pdf"),
                "jobOffer": ("offer.png", b"\x89PNG", "image/png"),
            },
            headers=admin_headers,
        )
        assert r.status_code == 415

        data = client.get(f"/api/admin/contract/{user['id']}", headers=admin_headers).json()
        assert data["contract"]["companyContractStatus"] == "not-started"
        assert data["contract"]["companyContractOriginalUrl"] is None

    def test_signed_upload_survives_audit_failure(self, client, admin_headers, login_candidate, make_pdf, test_db):
        headers, _, _ = self._candidate_with_originals(client, admin_headers, login_candidate, make_pdf)
        db = test_db()
        db.execute(text("DROP TABLE audit_logs"))
        db.commit()
        db.close()

        r = client.post(
            "/api/contracts/upload-signed",
            files={"signedContract": ("signed.pdf", make_pdf(signed=True), "application/pdf")},
            headers=headers,
        )
        assert r.status_code == 200, r.text
        assert r.json()["contract"]["companyContractStatus"] == "signed"

        data = client.get("/api/contracts", headers=headers).json()
        assert data["contract"]["companyContractStatus"] == "signed"
        assert data["contract"]["companyContractSignedUrl"]
        assert data["contract"]["companyContractSignatureValid"] is True
