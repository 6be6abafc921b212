from tests.api.base import *  # noqa: F401,F403


class AuthTests(ApiTestBase):
    def test_login_returns_token_and_stamps_last_login(self):
        user_id = self._create_user(npk="100200", password="secret1", role="MANAGER", name="Dewi")
        response = self.client.post("/api/auth/login", json={"npk": "100200", "password": "secret1"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["id"], str(user_id))
        self.assertEqual(body["user"]["role"], "MANAGER")
        self.assertNotIn("passwordHash", body["user"])
        self.assertIsNotNone(body["user"]["lastLoginAt"])

        verify = self.client.get("/api/auth/verify", headers={"Authorization": f"Bearer {body['token']}"})
        self.assertEqual(verify.status_code, 200)
        self.assertEqual(verify.json()["user"], {"userId": str(user_id), "npk": "100200", "role": "MANAGER", "isActive": True})

    def test_wrong_password_and_unknown_npk_are_401(self):
        self._create_user(npk="100200", password="secret1")
        wrong = self.client.post("/api/auth/login", json={"npk": "100200", "password": "nope"})
        unknown = self.client.post("/api/auth/login", json={"npk": "999999", "password": "secret1"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json()["detail"], "Invalid NPK or password")

    def test_inactive_user_is_403(self):
        self._create_user(npk="100300", password="secret1", is_active=False)
        response = self.client.post("/api/auth/login", json={"npk": "100300", "password": "secret1"})
        self.assertEqual(response.status_code, 403)

    def test_bootstrap_admin_is_created_on_first_login(self):
        response = self.client.post(
            "/api/auth/login",
            json={"npk": settings.ADMIN_BOOTSTRAP_NPK, "password": settings.ADMIN_BOOTSTRAP_PASSWORD},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["role"], "ADMIN")
        with self.SessionLocal() as db:
            self.assertEqual(db.query(User).filter(User.npk == settings.ADMIN_BOOTSTRAP_NPK).count(), 1)

    def test_bootstrap_admin_is_repaired_when_deactivated(self):
        self._create_user(npk=settings.ADMIN_BOOTSTRAP_NPK, password="other-password", role="USER", is_active=False)
        response = self.client.post(
            "/api/auth/login",
            json={"npk": settings.ADMIN_BOOTSTRAP_NPK, "password": settings.ADMIN_BOOTSTRAP_PASSWORD},
        )
        self.assertEqual(response.status_code, 200)
        with self.SessionLocal() as db:
            user = db.query(User).filter(User.npk == settings.ADMIN_BOOTSTRAP_NPK).one()
            self.assertEqual(user.role, "ADMIN")
            self.assertTrue(user.is_active)

    def test_missing_or_bad_token_is_401(self):
        self.assertEqual(self.client.get("/api/auth/verify").status_code, 401)
        bad = self.client.get("/api/auth/verify", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(bad.status_code, 401)

    def test_inactive_claim_is_403(self):
        response = self.client.get("/api/auth/verify", headers=self._auth_headers("USER", is_active=False))
        self.assertEqual(response.status_code, 403)

    def test_profile_reads_current_user_from_storage(self):
        user_id = self._create_user(npk="100400", name="Budi")
        response = self.client.get("/api/auth/profile", headers=self._auth_headers("USER", user_id=user_id))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["name"], "Budi")

        gone = self.client.get("/api/auth/profile", headers=self._auth_headers("USER"))
        self.assertEqual(gone.status_code, 404)

    def test_session_reports_validity(self):
        user_id = self._create_user(npk="100500")
        headers = self._auth_headers("USER", user_id=user_id)
        self.assertEqual(self.client.get("/api/auth/session", headers=headers).json(), {"valid": True})

        with self.SessionLocal() as db:
            user = db.get(User, user_id)
            user.is_active = False
            db.commit()
        self.assertEqual(self.client.get("/api/auth/session", headers=headers).json(), {"valid": False})
