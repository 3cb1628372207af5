"""
Pooled PostgreSQL access for the storage adapters
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from dotenv import load_dotenv
from loguru import logger
from psycopg2.extras import RealDictCursor
from psycopg2.pool import SimpleConnectionPool

from ..config import Settings, get_settings

load_dotenv()


class DatabaseConnection:
    """
    Small connection pool; cursors commit on success and roll back on error
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        database: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        min_conn: int = 1,
        max_conn: int = 5,
        settings: Optional[Settings] = None
    ):
        """
        Open the pool

        Unset arguments fall back to the POSTGRES_* settings.
        """
        settings = settings or get_settings()
        self.host = host or settings.POSTGRES_HOST
        self.port = port or settings.POSTGRES_PORT
        self.database = database or settings.POSTGRES_DB
        self.user = user or settings.POSTGRES_USER

        self.pool = SimpleConnectionPool(
            min_conn,
            max_conn,
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=password or settings.POSTGRES_PASSWORD
        )
        logger.debug(f"PostgreSQL pool ready: {self.user}@{self.host}:{self.port}/{self.database}")

    @contextmanager
    def get_connection(self) -> Iterator:
        conn = self.pool.getconn()
        try:
            yield conn
        finally:
            self.pool.putconn(conn)

    @contextmanager
    def get_cursor(self, dict_cursor: bool = True) -> Iterator:
        """
        Cursor inside one transaction

        Rows come back as dicts unless dict_cursor is False.
        """
        with self.get_connection() as conn:
            cursor = conn.cursor(cursor_factory=RealDictCursor if dict_cursor else None)
            try:
                yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def close_all_connections(self):
        if self.pool:
            self.pool.closeall()
            logger.debug("PostgreSQL pool closed")


_db_instance: Optional[DatabaseConnection] = None


def get_db_connection() -> DatabaseConnection:
    """Process-wide pool, created on first use"""
    global _db_instance
    if _db_instance is None:
        _db_instance = DatabaseConnection()
    return _db_instance
