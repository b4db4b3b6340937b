"""
SQL key-value store (SQLAlchemy Core).

One row per key in `kv_store`; values are stored in a JSON column.
SQLite is the default target, any SQLAlchemy URL works.
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import JSON, Column, DateTime, MetaData, String, Table, create_engine, delete, insert, select
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from noor.core.errors import StorageError, StorageReadError, StorageWriteError

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("value", JSON, nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _ensure_sqlite_directory(url: URL) -> None:
    """SQLite creates the database file but not its directory."""
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


class SqlKeyValueStore:
    def __init__(self, database_url: Optional[str] = None, *, engine: Optional[Engine] = None):
        if engine is None:
            if not database_url:
                raise ValueError("SqlKeyValueStore needs a database_url or an engine")
            try:
                url = make_url(database_url)
                _ensure_sqlite_directory(url)
                engine = create_engine(url, echo=False)
            except (SQLAlchemyError, OSError) as exc:
                raise StorageError(f"Cannot open database {database_url!r}: {exc}") from exc
        self._engine = engine
        try:
            metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StorageWriteError(f"Cannot create kv_store table: {exc}") from exc

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(select(kv_store.c.value).where(kv_store.c.key == key)).first()
        except SQLAlchemyError as exc:
            raise StorageReadError(f"Cannot read key {key!r}: {exc}") from exc
        if row is None:
            return default
        return row[0]

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, Any]) -> None:
        if not values:
            return
        now = utc_now()
        with self._transaction() as conn:
            conn.execute(delete(kv_store).where(kv_store.c.key.in_(list(values))))
            conn.execute(
                insert(kv_store),
                [{"key": k, "value": v, "updated_at": now} for k, v in values.items()],
            )

    def delete(self, key: str) -> None:
        with self._transaction() as conn:
            conn.execute(delete(kv_store).where(kv_store.c.key == key))

    def keys(self) -> Iterable[str]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(select(kv_store.c.key).order_by(kv_store.c.key)).fetchall()
        except SQLAlchemyError as exc:
            raise StorageReadError(f"Cannot list keys: {exc}") from exc
        return [row[0] for row in rows]

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _transaction(self):
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            raise StorageWriteError(f"Cannot write kv_store: {exc}") from exc
