from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from egg_backend.settings import _database_from_url


class DatabaseURLTests(SimpleTestCase):
    def test_absolute_sqlite_path_is_kept(self) -> None:
        config = _database_from_url("sqlite:////var/data/db.sqlite3")

        self.assertEqual(config["NAME"], "/var/data/db.sqlite3")
        self.assertEqual(config["OPTIONS"]["transaction_mode"], "IMMEDIATE")

    def test_relative_sqlite_path(self) -> None:
        self.assertEqual(_database_from_url("sqlite:///db/lucky.sqlite3")["NAME"], "db/lucky.sqlite3")

    def test_mysql_url(self) -> None:
        config = _database_from_url("mysql://egg:pw@db:3307/lucky")

        self.assertEqual(config["ENGINE"], "django.db.backends.mysql")
        self.assertEqual(
            (config["NAME"], config["USER"], config["HOST"], config["PORT"]),
            ("lucky", "egg", "db", "3307"),
        )

    def test_unknown_scheme_is_rejected(self) -> None:
        with self.assertRaises(ImproperlyConfigured):
            _database_from_url("postgres://db/lucky")
