"""
PostgreSQL access for the contact store.

All repositories share one psycopg_pool ConnectionPool. Rows come back as
dictionaries; writes that must land together go through ``transaction()``.
"""
import os
import time
from contextlib import contextmanager

from psycopg import OperationalError
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from contactsync.observability.logger import get_logger

logger = get_logger(__name__)

APPLICATION_NAME = "contactsync"


class DatabaseConnectionPool:
    """
    Connection pool for the contact store.

    Usage:
        with DatabaseConnectionPool() as pool:
            rows = pool.execute_query("SELECT ...", params)
            with pool.transaction() as cur:
                cur.execute("INSERT ...", params)
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        database: str | None = None,
        user: str | None = None,
        password: str | None = None,
        min_size: int = 1,
        max_size: int = 10,
        timeout: float = 30.0,
    ) -> None:
        """
        Args:
            host: Database host (default: $DB_HOST or localhost)
            port: Database port (default: $DB_PORT or 5432)
            database: Database name (default: $DB_NAME or contacts)
            user: Database user (default: $DB_USER or contactsync)
            password: Database password (default: $DB_PASSWORD, required)
            min_size: Minimum pool size
            max_size: Maximum pool size
            timeout: Seconds to wait for a connection

        Raises:
            ValueError: If no password is given or set in the environment
        """
        self.host = host or os.getenv("DB_HOST", "localhost")
        self.port = port or int(os.getenv("DB_PORT", "5432"))
        self.database = database or os.getenv("DB_NAME", "contacts")
        self.user = user or os.getenv("DB_USER", "contactsync")
        password = password or os.getenv("DB_PASSWORD")

        if not password:
            raise ValueError(
                "Database password must be provided. "
                "Set DB_PASSWORD or pass password= to DatabaseConnectionPool."
            )

        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout

        self.conninfo = make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=password,
            connect_timeout=int(self.timeout),
            application_name=APPLICATION_NAME,
        )

        self._pool: ConnectionPool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Open the pool, retrying while the database is unreachable.

        Raises:
            OperationalError: If every attempt fails
        """
        if self._pool is not None:
            return

        pool = ConnectionPool(
            conninfo=self.conninfo,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )

        for attempt in range(1, max_retries + 1):
            try:
                pool.open(wait=True, timeout=self.timeout)
            except (OperationalError, TimeoutError) as e:
                if attempt == max_retries:
                    pool.close()
                    raise OperationalError(
                        f"Could not reach {self.host}:{self.port}/{self.database} "
                        f"after {max_retries} attempts: {e}"
                    ) from e
                logger.warning(
                    f"Database not reachable (attempt {attempt}/{max_retries}), retrying",
                    extra={"db_host": self.host, "db_name": self.database},
                )
                time.sleep(retry_delay)
            else:
                self._pool = pool
                logger.debug(f"Connection pool open on {self.host}:{self.port}/{self.database}")
                return

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """
        Borrow a connection. It commits on clean exit and rolls back if the
        block raises.

        Raises:
            RuntimeError: If the pool is not open
        """
        if self._pool is None:
            raise RuntimeError("Connection pool is not open. Call open() first.")

        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def get_cursor(self):
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                yield cur

    @contextmanager
    def transaction(self):
        """Cursor inside an explicit transaction; nothing is applied if the block raises."""
        with self.get_connection() as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    yield cur

    def execute_query(self, query, params=None) -> list[dict]:
        """Run a statement that returns rows (string or psycopg.sql.Composable)."""
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def execute_command(self, command, params=None) -> int:
        """Run a statement without result rows; returns the affected row count."""
        with self.transaction() as cur:
            cur.execute(command, params)
            return cur.rowcount

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


# Process-wide pool for the CLIs
_global_pool: DatabaseConnectionPool | None = None


def get_pool() -> DatabaseConnectionPool:
    """
    Raises:
        RuntimeError: If initialize_pool() has not been called
    """
    if _global_pool is None:
        raise RuntimeError("Database pool not initialized. Call initialize_pool() first.")
    return _global_pool


def initialize_pool(**kwargs) -> DatabaseConnectionPool:
    """Open the process-wide pool, replacing any previous one."""
    global _global_pool
    close_pool()
    _global_pool = DatabaseConnectionPool(**kwargs)
    _global_pool.open()
    return _global_pool


def close_pool() -> None:
    global _global_pool
    if _global_pool is not None:
        _global_pool.close()
        _global_pool = None
