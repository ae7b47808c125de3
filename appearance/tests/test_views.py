from django.contrib.auth import get_user_model
from django.test import Client, TestCase

from appearance.models import SoundEffect


class PublicAppearanceAPITests(TestCase):
    def setUp(self) -> None:
        self.client = Client()

    def test_config_endpoint_returns_defaults(self) -> None:
        response = self.client.get("/api/config/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["eggCount"], 6)

    def test_sounds_endpoint_lists_both_types(self) -> None:
        response = self.client.get("/api/sounds/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(set(response.json()), {"hit", "win"})


class AdminAppearanceAPITests(TestCase):
    def setUp(self) -> None:
        self.client = Client()
        self.staff = get_user_model().objects.create_user(
            username="admin", password="correct horse", is_staff=True
        )

    def test_update_config_requires_staff(self) -> None:
        response = self.client.put(
            "/api/admin/config/", {"eggCount": 8}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 403)

    def test_update_config(self) -> None:
        self.client.force_login(self.staff)

        response = self.client.put(
            "/api/admin/config/",
            {"eggCount": 8, "eggSmashEffect": "image"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get("/api/config/").json()["eggCount"], 8)

    def test_update_config_validation_error(self) -> None:
        self.client.force_login(self.staff)

        response = self.client.put(
            "/api/admin/config/", {"eggSmashEffect": "explode"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

        response = self.client.put(
            "/api/admin/config/", "not json", content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)

    def test_activate_sound(self) -> None:
        old = SoundEffect.objects.create(type="win", name="Old", url="/a.mp3", is_active=True)
        new = SoundEffect.objects.create(type="win", name="New", url="/b.mp3")
        self.client.force_login(self.staff)

        response = self.client.post(f"/api/admin/sounds/{new.id}/activate/")

        self.assertEqual(response.status_code, 200)
        old.refresh_from_db()
        self.assertFalse(old.is_active)
        self.assertEqual(self.client.get("/api/sounds/").json()["win"]["name"], "New")

    def test_activate_missing_sound(self) -> None:
        self.client.force_login(self.staff)

        response = self.client.post("/api/admin/sounds/999/activate/")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "not_found")


class AdminCSRFTests(TestCase):
    def setUp(self) -> None:
        self.client = Client(enforce_csrf_checks=True)
        get_user_model().objects.create_user(
            username="admin", password="correct horse", is_staff=True
        )
        response = self.client.post(
            "/api/admin/login/",
            {"username": "admin", "password": "correct horse"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)

    def test_admin_write_without_token_is_rejected(self) -> None:
        response = self.client.put(
            "/api/admin/config/", {"eggCount": 8}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 403)

    def test_admin_write_with_login_token_succeeds(self) -> None:
        token = self.client.cookies["csrftoken"].value

        response = self.client.put(
            "/api/admin/config/",
            {"eggCount": 8},
            content_type="application/json",
            headers={"X-CSRFToken": token},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["config"]["eggCount"], 8)
