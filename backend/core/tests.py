from unittest import mock

from django.test import SimpleTestCase

import manage


class EnsurePostgresDatabaseTests(SimpleTestCase):
    def run_with(self, env, exists=None):
        with mock.patch.dict("os.environ", env, clear=True), mock.patch.object(manage.psycopg, "connect") as connect:
            conn = connect.return_value.__enter__.return_value
            conn.execute.return_value.fetchone.return_value = exists
            manage._ensure_postgres_database()
        return connect, conn

    def test_sqlite_and_unset_urls_are_skipped(self):
        connect, _ = self.run_with({"DATABASE_URL": "sqlite:///db.sqlite3"})
        connect.assert_not_called()
        connect, _ = self.run_with({})
        connect.assert_not_called()
        connect, _ = self.run_with({"DATABASE_URL": "postgres://u:p@db:5432/crm", "USE_SQLITE": "yes"})
        connect.assert_not_called()

    def test_missing_database_is_created(self):
        with mock.patch("builtins.print"):
            connect, conn = self.run_with({"DATABASE_URL": "postgres://crm:secret@db:5432/crm"})
        connect.assert_called_once_with(
            dbname="postgres", autocommit=True, host="db", port=5432, user="crm", password="secret"
        )
        self.assertEqual(conn.execute.call_count, 2)

    def test_existing_database_is_left_alone(self):
        _, conn = self.run_with({"DATABASE_URL": "postgres://crm:secret@db:5432/crm"}, exists=(1,))
        self.assertEqual(conn.execute.call_count, 1)


class RunserverAddressTests(SimpleTestCase):
    def test_default_address_is_appended(self):
        with mock.patch.object(manage.sys, "argv", ["manage.py", "runserver"]), mock.patch.dict(
            "os.environ", {"DJANGO_PORT": "9000"}, clear=True
        ):
            manage._default_runserver_address()
            self.assertEqual(manage.sys.argv[-1], "0.0.0.0:9000")

    def test_explicit_address_is_kept(self):
        with mock.patch.object(manage.sys, "argv", ["manage.py", "runserver", "127.0.0.1:8000"]):
            manage._default_runserver_address()
            self.assertEqual(manage.sys.argv, ["manage.py", "runserver", "127.0.0.1:8000"])
