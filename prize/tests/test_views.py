from unittest import mock

import redis
from django.contrib.auth import get_user_model
from django.db import DatabaseError, InterfaceError
from django.test import Client, TestCase, override_settings

from prize.locks import PrizeLockError
from prize.models import DrawRecord, Prize


class DrawAPITests(TestCase):
    def setUp(self) -> None:
        self.client = Client()

    def test_draw_returns_prize_payload(self) -> None:
        prize = Prize.objects.create(
            name="Gold Egg", image="/uploads/gold.png", stock=1, probability=100
        )

        response = self.client.post("/api/draw/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "success": True,
                "prize": {"id": prize.id, "name": "Gold Egg", "image": "/uploads/gold.png"},
            },
        )

    def test_draw_reports_pool_exhausted(self) -> None:
        Prize.objects.create(name="Gold Egg", stock=1, probability=100)

        self.assertEqual(self.client.post("/api/draw/").status_code, 200)
        response = self.client.post("/api/draw/")

        self.assertEqual(response.status_code, 409)
        payload = response.json()
        self.assertFalse(payload["success"])
        self.assertEqual(payload["code"], "pool_exhausted")
        self.assertIn("message", payload)

    def test_draw_requires_post(self) -> None:
        response = self.client.get("/api/draw/")
        self.assertEqual(response.status_code, 405)

    def test_storage_failure_hides_detail(self) -> None:
        with mock.patch(
            "prize.views.draw_prize", side_effect=DatabaseError("disk I/O error at /var/db")
        ):
            with self.assertLogs("prize.views", level="ERROR"):
                response = self.client.post("/api/draw/")

        self.assertEqual(response.status_code, 503)
        payload = response.json()
        self.assertEqual(payload["code"], "storage_failure")
        self.assertNotIn("disk", payload["message"])

    def test_busy_lock_returns_service_unavailable(self) -> None:
        with mock.patch(
            "prize.views.prize_draw_lock", side_effect=PrizeLockError("lock timeout")
        ):
            response = self.client.post("/api/draw/")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["code"], "busy")


class DrawLockReleaseTests(TestCase):
    """A committed win is still reported when the lock cannot be released."""

    def setUp(self) -> None:
        self.client = Client()
        self.prize = Prize.objects.create(name="Gold Egg", stock=1, probability=100)

    def _assert_win_committed(self, response) -> None:
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/json")
        self.assertEqual(response.json()["prize"]["id"], self.prize.id)
        self.prize.refresh_from_db()
        self.assertEqual(self.prize.stock, 0)
        self.assertEqual(DrawRecord.objects.filter(prize_id=self.prize.id).count(), 1)

    @override_settings(PRIZE_DRAW_LOCK_BACKEND="redis", REDIS_URL="redis://localhost:6379/0")
    def test_redis_release_failure_keeps_win(self) -> None:
        with mock.patch("prize.locks.redis.Redis.from_url") as from_url:
            lock = from_url.return_value.lock.return_value
            lock.acquire.return_value = True
            lock.release.side_effect = redis.ConnectionError("connection reset")
            with self.assertLogs("prize.locks", level="WARNING"):
                response = self.client.post("/api/draw/")

        self._assert_win_committed(response)

    @override_settings(PRIZE_DRAW_LOCK_BACKEND="mysql")
    def test_mysql_release_failure_keeps_win(self) -> None:
        with mock.patch("prize.locks.connection") as fake_connection:
            cursor = fake_connection.cursor.return_value.__enter__.return_value
            cursor.fetchone.return_value = (1,)
            cursor.execute.side_effect = [None, InterfaceError("connection already closed")]
            with self.assertLogs("prize.locks", level="WARNING"):
                response = self.client.post("/api/draw/")

        self._assert_win_committed(response)


class PrizeListAPITests(TestCase):
    def test_lists_prizes_by_weight_without_exposing_it(self) -> None:
        low = Prize.objects.create(name="Sticker", stock=5, probability=10)
        high = Prize.objects.create(name="Speaker", stock=0, probability=60)

        for url in ("/api/prizes/", "/api/prizes/pool/"):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 200)
            payload = response.json()
            self.assertEqual([item["id"] for item in payload], [high.id, low.id])
            self.assertEqual(set(payload[0]), {"id", "name", "image", "stock"})


class AdminAPITests(TestCase):
    def setUp(self) -> None:
        self.client = Client()
        self.staff = get_user_model().objects.create_user(
            username="admin", password="correct horse", is_staff=True
        )

    def test_login_with_hashed_password(self) -> None:
        response = self.client.post(
            "/api/admin/login/",
            {"username": "admin", "password": "correct horse"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])
        self.assertEqual(self.client.get("/api/admin/stats/").status_code, 200)

        self.client.post("/api/admin/logout/")
        self.assertEqual(self.client.get("/api/admin/stats/").status_code, 403)

    def test_login_rejects_wrong_password(self) -> None:
        response = self.client.post(
            "/api/admin/login/",
            {"password": "admin123"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)
        self.assertFalse(response.json()["success"])

    def test_login_rejects_non_staff(self) -> None:
        get_user_model().objects.create_user(username="visitor", password="pw")
        response = self.client.post(
            "/api/admin/login/",
            {"username": "visitor", "password": "pw"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)

    def test_admin_endpoints_require_staff(self) -> None:
        for url in ("/api/admin/records/", "/api/admin/stats/"):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 403)
            self.assertEqual(response.json()["code"], "forbidden")

    def test_records_keep_history_of_deleted_prizes(self) -> None:
        kept = Prize.objects.create(name="Mug", image="/uploads/mug.png", stock=1)
        DrawRecord.objects.create(prize_id=kept.id, prize_name="Mug")
        DrawRecord.objects.create(prize_id=9999, prize_name="Retired Speaker")
        self.client.force_login(self.staff)

        response = self.client.get("/api/admin/records/")

        self.assertEqual(response.status_code, 200)
        records = {record["prize_name"]: record for record in response.json()}
        self.assertEqual(records["Mug"]["image"], "/uploads/mug.png")
        self.assertIsNone(records["Retired Speaker"]["image"])
        self.assertEqual(records["Retired Speaker"]["prize_id"], 9999)

    def test_stats_summarise_draws_and_stock(self) -> None:
        mug = Prize.objects.create(name="Mug", stock=4)
        pen = Prize.objects.create(name="Pen", stock=6)
        DrawRecord.objects.create(prize_id=mug.id, prize_name="Mug")
        self.client.force_login(self.staff)

        payload = self.client.get("/api/admin/stats/").json()

        self.assertEqual(payload["totalDraws"], 1)
        self.assertEqual(payload["totalStock"], 10)
        self.assertEqual(
            payload["prizes"],
            [
                {"id": mug.id, "name": "Mug", "stock": 4},
                {"id": pen.id, "name": "Pen", "stock": 6},
            ],
        )
