from tests.api.base import *  # noqa: F401,F403

from app.services.oee import compute_oee


class OeeApiTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        self.ids = self._seed_line(line_name="Line 1")
        self.plan_id = self._create_plan(self.ids, work_order_no="WO-2405100001", day=date(2024, 5, 10))
        self.headers = self._auth_headers("OPERATOR")

    def test_compute_oee(self):
        self.assertAlmostEqual(compute_oee(90, 95, 99), 84.645)
        self.assertEqual(compute_oee(100, 100, 100), 100)
        self.assertEqual(compute_oee(0, 100, 100), 0)

    def test_ingest_upserts_one_record_per_plan(self):
        payload = {"workOrderNo": "WO-2405100001", "availability": 90, "performance": 95, "quality": 99}
        first = self.client.post("/api/oee", headers=self.headers, json=payload)
        self.assertEqual(first.status_code, 200)
        self.assertAlmostEqual(first.json()["data"]["oee"], 84.645)

        second = self.client.post("/api/oee", headers=self.headers, json={**payload, "quality": 100})
        self.assertAlmostEqual(second.json()["data"]["oee"], 85.5)
        with self.SessionLocal() as db:
            self.assertEqual(db.query(OeeRecord).count(), 1)

        current = self.client.get("/api/oee", headers=self.headers, params={"workOrderNo": "WO-2405100001"})
        self.assertEqual(current.json()["data"]["quality"], 100.0)

    def test_low_oee_broadcasts_alert(self):
        payload = {"workOrderNo": "WO-2405100001", "availability": 50, "performance": 80, "quality": 90}
        self.client.post("/api/oee", headers=self.headers, json=payload)
        with self.SessionLocal() as db:
            alert = db.query(Notification).filter(Notification.title == "Low OEE Alert").one()
            self.assertIsNone(alert.user_id)
            self.assertIn("Line 1", alert.message)

    def test_factor_out_of_range_is_422(self):
        payload = {"workOrderNo": "WO-2405100001", "availability": 101, "performance": 80, "quality": 90}
        self.assertEqual(self.client.post("/api/oee", headers=self.headers, json=payload).status_code, 422)

    def test_unknown_work_order_is_404(self):
        payload = {"workOrderNo": "WO-NOPE", "availability": 50, "performance": 80, "quality": 90}
        response = self.client.post("/api/oee", headers=self.headers, json=payload)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Production plan WO-NOPE not found")

    def test_plan_without_metrics_returns_null(self):
        response = self.client.get("/api/oee", headers=self.headers, params={"workOrderNo": "WO-2405100001"})
        self.assertEqual(response.json(), {"success": True, "data": None})


class NotificationApiTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        self.user_id = self._create_user(npk="500100")
        self.other_id = self._create_user(npk="500200")
        self.headers = self._auth_headers("USER", user_id=self.user_id)
        with self.SessionLocal() as db:
            db.add_all(
                [
                    Notification(title="Mine", message="for me", user_id=self.user_id),
                    Notification(title="Everyone", message="broadcast", user_id=None),
                    Notification(title="Theirs", message="for them", user_id=self.other_id),
                    Notification(title="Old", message="already read", user_id=self.user_id, is_read=True),
                ]
            )
            db.commit()

    def _titles(self, body):
        return sorted(row["title"] for row in body["rows"])

    def test_lists_own_and_broadcast_notifications(self):
        body = self.client.get("/api/notifications", headers=self.headers).json()
        self.assertEqual(self._titles(body), ["Everyone", "Mine", "Old"])
        self.assertEqual(body["unreadCount"], 2)
        # Unread first.
        self.assertFalse(body["rows"][0]["isRead"])
        self.assertTrue(body["rows"][-1]["isRead"])

        unread = self.client.get("/api/notifications", headers=self.headers, params={"unreadOnly": "true"}).json()
        self.assertEqual(self._titles(unread), ["Everyone", "Mine"])

    def test_mark_one_read(self):
        body = self.client.get("/api/notifications", headers=self.headers).json()
        mine = next(row for row in body["rows"] if row["title"] == "Mine")
        response = self.client.post(f"/api/notifications/{mine['id']}/read", headers=self.headers)
        self.assertTrue(response.json()["notification"]["isRead"])
        self.assertIsNotNone(response.json()["notification"]["readAt"])
        self.assertEqual(self.client.get("/api/notifications", headers=self.headers).json()["unreadCount"], 1)

    def test_cannot_read_someone_elses_notification(self):
        with self.SessionLocal() as db:
            theirs = db.query(Notification).filter(Notification.title == "Theirs").one()
            theirs_id = theirs.id
        response = self.client.post(f"/api/notifications/{theirs_id}/read", headers=self.headers)
        self.assertEqual(response.status_code, 404)

    def test_read_all_leaves_other_users_untouched(self):
        response = self.client.post("/api/notifications/read-all", headers=self.headers)
        self.assertEqual(response.json()["updated"], 2)
        with self.SessionLocal() as db:
            theirs = db.query(Notification).filter(Notification.title == "Theirs").one()
            self.assertFalse(theirs.is_read)
        self.assertEqual(self.client.get("/api/notifications", headers=self.headers).json()["unreadCount"], 0)
