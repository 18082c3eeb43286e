class TestSyncApi:
    def test_manual_sync_and_status(self, client, admin_headers):
        client.post("/api/admin/users", json={"email": "a@chefoverseas.com"}, headers=admin_headers)
        r = client.post("/api/admin/sync/manual", headers=admin_headers)
        assert r.status_code == 200
        report = r.json()
        assert report["usersChecked"] == 1
        assert report["busy"] is False
        # a fresh docket has no passport pages yet
        assert report["inconsistencies"][0]["type"] == "docket"
        assert report["inconsistencies"][0]["fixed"] is False

        status = client.get("/api/admin/sync/status", headers=admin_headers).json()
        assert status["isRunning"] is False
        assert status["lastReport"]["usersChecked"] == 1

    def test_requires_admin(self, client):
        assert client.post("/api/admin/sync/manual").status_code == 401


class TestRemindersApi:
    def test_run(self, client, admin_headers):
        client.post("/api/admin/users", json={"email": "a@chefoverseas.com"}, headers=admin_headers)
        r = client.post("/api/admin/reminders/run", headers=admin_headers)
        assert r.status_code == 200
        # just registered, inside the grace period
        assert r.json() == {"checked": 1, "sent": 0, "skipped": 1, "failed": 0}


class TestAuditApi:
    def test_entries_are_recorded(self, client, admin_headers):
        user_id = client.post("/api/admin/users", json={"email": "a@chefoverseas.com"},
                              headers=admin_headers).json()["id"]
        client.put(f"/api/admin/workpermit/{user_id}", json={"status": "applied"}, headers=admin_headers)

        r = client.get("/api/admin/audit", params={"user_id": user_id}, headers=admin_headers)
        assert r.status_code == 200
        actions = [e["action"] for e in r.json()["entries"]]
        assert "CREATE" in actions
        assert "STATUS_CHANGE" in actions

        r = client.get("/api/admin/audit", params={"action": "STATUS_CHANGE"}, headers=admin_headers)
        entry = r.json()["entries"][0]
        assert entry["severity"] == "warning"
        assert entry["metadata"]["warnings"] == ["tracking_code_required"]

    def test_stats(self, client, admin_headers):
        r = client.get("/api/admin/audit/stats", params={"days": 7}, headers=admin_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["byAction"]["LOGIN"] == 1
        assert data["total"] >= 2
