from src.timekeeper.timekeeper.database import connection as connection_module
from src.timekeeper.timekeeper.database.connection import DatabaseConnection, DBConfig

PRIMARY = DBConfig(host="db.local", port=3306, user="app", password="secret", database="timekeeper")
REPORTING = DBConfig(host="db.local", port=3306, user="app", password="secret", database="timekeeper_reports")


def test_same_config_shares_one_factory(monkeypatch):
    monkeypatch.setattr(DatabaseConnection, "_instances", {})

    first = DatabaseConnection.get_instance(PRIMARY)
    again = DatabaseConnection.get_instance(
        DBConfig(host="db.local", port=3306, user="app", password="secret", database="timekeeper")
    )

    assert first is again


def test_different_config_gets_its_own_factory(monkeypatch):
    monkeypatch.setattr(DatabaseConnection, "_instances", {})

    primary = DatabaseConnection.get_instance(PRIMARY)
    reporting = DatabaseConnection.get_instance(REPORTING)

    assert primary is not reporting
    assert reporting.config.database == "timekeeper_reports"


def test_connect_uses_the_factory_settings_without_autocommit(monkeypatch):
    calls = []
    monkeypatch.setattr(connection_module.mysql.connector, "connect", lambda **kwargs: calls.append(kwargs))

    DatabaseConnection(REPORTING).connect()

    assert calls == [
        {
            "host": "db.local",
            "port": 3306,
            "user": "app",
            "password": "secret",
            "database": "timekeeper_reports",
            "autocommit": False,
        }
    ]
