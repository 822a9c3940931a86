"""Real-time task collection on top of SQLModel.

The store behaves like a hosted document database: documents are keyed by
ids the store generates, writes touch a single document, and every live query
(``watch``) receives the complete ordered result set after each change.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from .database import create_store_engine, create_tables, get_session
from .errors import DocumentNotFound, StoreConfigurationError, StoreError, StoreWriteError
from .models import DOCUMENT_FIELDS, TaskDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSnapshot:
    id: str
    data: Dict[str, Any]


SnapshotCallback = Callable[[List[DocumentSnapshot]], None]
ErrorCallback = Callable[[Exception], None]


class Watch:
    """Handle for one live query; ``close()`` stops delivery."""

    def __init__(self, store: "TaskStore", order_by: str, on_next: SnapshotCallback, on_error: ErrorCallback):
        self._store = store
        self.order_by = order_by
        self.on_next = on_next
        self.on_error = on_error
        self.active = True
        # generation of the newest snapshot handed to on_next
        self.delivered = 0

    def close(self) -> None:
        self.active = False
        self._store._detach(self)


class TaskStore:
    def __init__(self, engine: Engine):
        self._engine = engine
        self._watches: List[Watch] = []
        self._generation = 0

    @classmethod
    def from_url(cls, database_url: str) -> "TaskStore":
        """Connect and make sure the collection exists."""
        try:
            engine = create_store_engine(database_url)
            create_tables(engine)
        except (SQLAlchemyError, ImportError) as e:
            raise StoreConfigurationError(f"Cannot initialize task store: {e}") from e
        logger.info("Task store ready url=%s", engine.url.render_as_string(hide_password=True))
        return cls(engine)

    def close(self) -> None:
        for w in list(self._watches):
            w.close()
        self._engine.dispose()

    # ---- writes ----

    async def add_document(self, data: Dict[str, Any]) -> str:
        doc_id = await self._write(self._insert, data)
        logger.debug("Added task document id=%s", doc_id)
        await self._publish()
        return doc_id

    async def update_document(self, doc_id: str, fields: Dict[str, Any]) -> None:
        await self._write(self._update, doc_id, fields)
        logger.debug("Updated task document id=%s fields=%s", doc_id, sorted(fields))
        await self._publish()

    async def delete_document(self, doc_id: str) -> None:
        await self._write(self._delete, doc_id)
        logger.debug("Deleted task document id=%s", doc_id)
        await self._publish()

    async def _write(self, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await run_in_threadpool(fn, *args)
        except StoreWriteError:
            raise
        except SQLAlchemyError as e:
            raise StoreWriteError(str(e)) from e

    @staticmethod
    def _columns(fields: Dict[str, Any]) -> Dict[str, Any]:
        columns = {}
        for name, value in fields.items():
            if name not in DOCUMENT_FIELDS:
                raise StoreWriteError(f"Unknown task field: {name}")
            columns[DOCUMENT_FIELDS[name]] = value
        return columns

    def _insert(self, data: Dict[str, Any]) -> str:
        doc = TaskDocument(**self._columns(data))
        doc_id = doc.id
        with get_session(self._engine) as session:
            session.add(doc)
            session.commit()
        return doc_id

    def _update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        columns = self._columns(fields)
        with get_session(self._engine) as session:
            doc = session.get(TaskDocument, doc_id)
            if doc is None:
                raise DocumentNotFound(doc_id)
            for attr, value in columns.items():
                setattr(doc, attr, value)
            session.add(doc)
            session.commit()

    def _delete(self, doc_id: str) -> None:
        with get_session(self._engine) as session:
            doc = session.get(TaskDocument, doc_id)
            if doc is None:
                raise DocumentNotFound(doc_id)
            session.delete(doc)
            session.commit()

    # ---- live queries ----

    async def watch(self, order_by: str, on_next: SnapshotCallback, on_error: ErrorCallback) -> Watch:
        """Open a live query over the whole collection ordered by ``order_by``.

        The current result set is delivered before this returns.
        """
        if order_by not in DOCUMENT_FIELDS:
            raise ValueError(f"Cannot order by unknown field: {order_by}")
        w = Watch(self, order_by, on_next, on_error)
        self._watches.append(w)
        await self._deliver(w)
        return w

    def _detach(self, w: Watch) -> None:
        if w in self._watches:
            self._watches.remove(w)

    def _query(self, order_by: str) -> List[DocumentSnapshot]:
        column = getattr(TaskDocument, DOCUMENT_FIELDS[order_by])
        with get_session(self._engine) as session:
            rows = session.exec(select(TaskDocument).order_by(column, TaskDocument.id)).all()
            return [DocumentSnapshot(id=row.id, data=row.to_document()) for row in rows]

    async def _publish(self) -> None:
        for w in list(self._watches):
            await self._deliver(w)

    async def _deliver(self, w: Watch) -> None:
        if not w.active:
            return
        # queries started later observe every write committed before them
        self._generation += 1
        generation = self._generation
        try:
            snapshot = await run_in_threadpool(self._query, w.order_by)
        except SQLAlchemyError as e:
            logger.error("Live query on tasks failed: %s", e)
            w.close()
            w.on_error(StoreError(f"Live query failed: {e}"))
            return
        if not w.active or generation < w.delivered:
            logger.debug("Dropping stale snapshot generation=%d delivered=%d", generation, w.delivered)
            return
        w.delivered = generation
        try:
            w.on_next(snapshot)
        except Exception:
            # listener failures never reach the writer
            logger.exception("Snapshot listener raised")
