from chefportal.services.auth_service import lockout_remaining


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestOtpLogin:
    def test_send_otp(self, client, fixed_otp):
        r = client.post("/api/auth/send-otp", json={"email": "chef@chefoverseas.com"})
        assert r.status_code == 200
        assert r.json()["expires_in_seconds"] == 600

    def test_verify_registers_candidate(self, client, fixed_otp):
        client.post("/api/auth/send-otp", json={"email": "Chef@ChefOverseas.com"})
        r = client.post("/api/auth/verify-otp", json={"email": "chef@chefoverseas.com", "otp": fixed_otp})
        assert r.status_code == 200
        data = r.json()
        assert data["token"]
        assert data["user"]["email"] == "chef@chefoverseas.com"
        assert len(data["user"]["uid"]) == 8
        assert data["user"]["archived"] is False

    def test_wrong_code(self, client, fixed_otp):
        client.post("/api/auth/send-otp", json={"email": "chef@chefoverseas.com"})
        r = client.post("/api/auth/verify-otp", json={"email": "chef@chefoverseas.com", "otp": "000000"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid OTP"

    def test_code_cannot_be_reused(self, client, fixed_otp):
        client.post("/api/auth/send-otp", json={"email": "chef@chefoverseas.com"})
        body = {"email": "chef@chefoverseas.com", "otp": fixed_otp}
        assert client.post("/api/auth/verify-otp", json=body).status_code == 200
        r = client.post("/api/auth/verify-otp", json=body)
        assert r.status_code == 401
        assert r.json()["detail"] == "OTP already used"

    def test_repeated_wrong_codes_are_throttled(self, client, fixed_otp):
        client.post("/api/auth/send-otp", json={"email": "chef@chefoverseas.com"})
        wrong = {"email": "chef@chefoverseas.com", "otp": "000000"}
        for _ in range(3):
            assert client.post("/api/auth/verify-otp", json=wrong).status_code == 401

        r = client.post("/api/auth/verify-otp", json={"email": "chef@chefoverseas.com", "otp": fixed_otp})
        assert r.status_code == 429
        assert r.json()["detail"]["error"] == "too_many_attempts"

        # another address is unaffected
        client.post("/api/auth/send-otp", json={"email": "cook@chefoverseas.com"})
        r = client.post("/api/auth/verify-otp", json={"email": "cook@chefoverseas.com", "otp": fixed_otp})
        assert r.status_code == 200

    def test_verify_without_send(self, client):
        r = client.post("/api/auth/verify-otp", json={"email": "chef@chefoverseas.com", "otp": "123456"})
        assert r.status_code == 401

    def test_me_and_logout(self, client, login_candidate):
        headers, user = login_candidate()
        r = client.get("/api/auth/me", headers=headers)
        assert r.status_code == 200
        assert r.json()["id"] == user["id"]

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_admin_token_is_not_a_candidate(self, client, admin_headers):
        assert client.get("/api/auth/me", headers=admin_headers).status_code == 403

    def test_candidate_token_is_not_an_admin(self, client, login_candidate):
        headers, _ = login_candidate()
        assert client.get("/api/admin/users", headers=headers).status_code == 403


class TestProfile:
    def test_update_profile(self, client, login_candidate):
        headers, _ = login_candidate()
        r = client.patch("/api/profile", json={"displayName": "Chef Ramesh", "phone": " +91 98765 "},
                         headers=headers)
        assert r.status_code == 200
        data = r.json()
        assert data["displayName"] == "Chef Ramesh"
        assert data["phone"] == "+91 98765"

        assert client.get("/api/profile", headers=headers).json()["displayName"] == "Chef Ramesh"


class TestLockout:
    def test_no_lockout_below_three_failures(self):
        assert lockout_remaining(2, 1000.0, 1000.0) == 0.0

    def test_lockout_steps(self):
        assert lockout_remaining(3, 1000.0, 1000.0) == 5.0
        assert lockout_remaining(5, 1000.0, 1000.0) == 30.0
        assert lockout_remaining(12, 1000.0, 1000.0) == 300.0

    def test_lockout_counts_down(self):
        assert lockout_remaining(5, 1000.0, 1020.0) == 10.0
        assert lockout_remaining(5, 1000.0, 1100.0) == 0.0
