from datetime import datetime, timedelta, timezone

from chefportal.services.user_service import create_user
from chefportal.utils.timestamps import now_iso


class TestArchiveApi:
    def _old_user(self, test_db, email, days):
        db = test_db()
        created = now_iso(datetime.now(timezone.utc) - timedelta(days=days))
        user_id = create_user(db, email, created_at=created).id
        db.close()
        return user_id

    def test_run_and_stats(self, client, admin_headers, test_db):
        self._old_user(test_db, "old@chefoverseas.com", 400)
        self._old_user(test_db, "new@chefoverseas.com", 30)

        eligible = client.get("/api/admin/archive/eligible", headers=admin_headers).json()
        assert [u["email"] for u in eligible] == ["old@chefoverseas.com"]

        r = client.post("/api/admin/archive/run", headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["archivedCount"] == 1

        r = client.post("/api/admin/archive/run", headers=admin_headers)
        assert r.json()["archivedCount"] == 0

        stats = client.get("/api/admin/archive/stats", headers=admin_headers).json()
        assert stats["archivedUsers"] == 1
        assert stats["activeUsers"] == 1
        assert stats["usersEligibleForArchive"] == 0

        archived = client.get("/api/admin/archive/users", headers=admin_headers).json()
        assert archived[0]["archivedReason"].startswith("automatic_archive_")

    def test_manual_archive_and_restore(self, client, admin_headers, login_candidate):
        headers, user = login_candidate()
        r = client.post(f"/api/admin/archive/user/{user['id']}", json={"reason": "Withdrew"},
                        headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["user"]["archived"] is True
        # archiving ends the candidate's sessions
        assert client.get("/api/auth/me", headers=headers).status_code == 401

        r = client.post(f"/api/admin/archive/user/{user['id']}", json={"reason": "again"},
                        headers=admin_headers)
        assert r.status_code == 409

        r = client.post(f"/api/admin/archive/restore/{user['id']}", headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["user"]["archived"] is False

        r = client.post(f"/api/admin/archive/restore/{user['id']}", headers=admin_headers)
        assert r.status_code == 409

    def test_blank_reason(self, client, admin_headers, login_candidate):
        _, user = login_candidate()
        r = client.post(f"/api/admin/archive/user/{user['id']}", json={"reason": "   "},
                        headers=admin_headers)
        assert r.status_code == 400

    def test_unknown_user(self, client, admin_headers):
        r = client.post("/api/admin/archive/user/nope", json={"reason": "x"}, headers=admin_headers)
        assert r.status_code == 404

    def test_archived_candidate_cannot_log_in(self, client, admin_headers, login_candidate, fixed_otp):
        _, user = login_candidate()
        client.post(f"/api/admin/archive/user/{user['id']}", json={"reason": "Withdrew"}, headers=admin_headers)
        r = client.post("/api/auth/send-otp", json={"email": user["email"]})
        assert r.status_code == 403
