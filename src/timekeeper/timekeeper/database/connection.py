from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Hands out MySQL connections for one database configuration.

    Repositories open a short-lived connection per operation and commit or
    roll back inside `db_cursor`, so autocommit stays off. Factories are
    shared per configuration: asking again with the same settings returns
    the existing factory, different settings get their own.
    """

    _instances: ClassVar[dict[DBConfig, "DatabaseConnection"]] = {}

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        factory = cls._instances.get(config)
        if factory is None:
            factory = cls._instances[config] = cls(config)
        return factory

    def connect(self):
        settings = self._config
        return mysql.connector.connect(
            host=settings.host,
            port=int(settings.port),
            user=settings.user,
            password=settings.password,
            database=settings.database,
            autocommit=False,
        )
